# product_service/db.py

from fastapi import Request
from pymongo import MongoClient
from pymongo.collection import Collection

from .config import Settings


def create_client(settings: Settings) -> MongoClient:
    # All driver timeouts come from MONGODB_TIMEOUT_MS
    return MongoClient(
        settings.mongodb_url,
        serverSelectionTimeoutMS=settings.timeout_ms,
        connectTimeoutMS=settings.timeout_ms,
        socketTimeoutMS=settings.timeout_ms,
    )


def get_products_collection(client: MongoClient, settings: Settings) -> Collection:
    return client[settings.database_name][settings.collection_name]


def get_collection(request: Request) -> Collection:
    """
    FastAPI dependency returning the products collection opened at startup.
    """
    return request.app.state.products_collection
