# product_service/__main__.py

import uvicorn
from pymongo.errors import PyMongoError

from .config import ConfigurationError, load_settings
from .db import create_client
from .main import app, logger


def run() -> None:
    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.critical(f"Product Service: Invalid configuration: {e}")
        raise SystemExit(1)

    # uvicorn reports lifespan failures with its own exit code, so check MongoDB first
    client = create_client(settings)
    try:
        client.server_info()
    except PyMongoError as e:
        logger.critical(f"Product Service: Failed to connect to MongoDB: {e}")
        raise SystemExit(1)
    finally:
        client.close()

    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
