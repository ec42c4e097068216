from __future__ import annotations

from motor.motor_asyncio import AsyncIOMotorClient
from beanie import init_beanie

from mongo_fieldops.models import FieldOperationRun
from mongo_fieldops.store import MotorStore


def get_motor_client(mongodb_uri: str) -> AsyncIOMotorClient:
    return AsyncIOMotorClient(mongodb_uri)


def get_store(client: AsyncIOMotorClient, database: str) -> MotorStore:
    return MotorStore(client, database)


async def init_odm(mongodb_uri: str, database: str) -> AsyncIOMotorClient:
    client = AsyncIOMotorClient(mongodb_uri)
    await init_beanie(
        database=client[database],
        document_models=[FieldOperationRun],
    )
    return client
