# tests/test_startup.py

from unittest.mock import MagicMock, patch

import mongomock
import pytest
from fastapi.testclient import TestClient
from pymongo.errors import ServerSelectionTimeoutError

from product_service import __main__ as entrypoint
from product_service import config, main
from product_service.config import ConfigurationError, Settings, load_settings
from product_service.main import app


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    # Keep a developer's local .env out of these tests
    monkeypatch.setattr(config, "load_dotenv", lambda: None)
    for key in (
        "MONGODB_URL",
        "MONGODB_DATABASE",
        "MONGODB_COLLECTION",
        "MONGODB_TIMEOUT_MS",
        "PORT",
    ):
        monkeypatch.delenv(key, raising=False)


def test_missing_mongodb_url_is_a_configuration_error():
    with pytest.raises(ConfigurationError, match="MONGODB_URL"):
        load_settings()


def test_settings_defaults(monkeypatch):
    monkeypatch.setenv("MONGODB_URL", "mongodb://localhost:27017")

    settings = load_settings()

    assert settings == Settings(mongodb_url="mongodb://localhost:27017")
    assert settings.port == 3000
    assert settings.timeout_ms == 5000


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("MONGODB_URL", "mongodb://db:27017")
    monkeypatch.setenv("MONGODB_DATABASE", "catalogo")
    monkeypatch.setenv("MONGODB_COLLECTION", "itens")
    monkeypatch.setenv("MONGODB_TIMEOUT_MS", "1500")

    settings = load_settings()

    assert settings.database_name == "catalogo"
    assert settings.collection_name == "itens"
    assert settings.timeout_ms == 1500


@pytest.mark.parametrize("timeout", ["abc", "0", "-10"])
def test_invalid_timeout_is_rejected(monkeypatch, timeout):
    monkeypatch.setenv("MONGODB_URL", "mongodb://db:27017")
    monkeypatch.setenv("MONGODB_TIMEOUT_MS", timeout)

    with pytest.raises(ConfigurationError):
        load_settings()


def test_startup_exits_without_mongodb_url():
    with pytest.raises(SystemExit) as exc_info:
        main.connect_database(app)
    assert exc_info.value.code == 1


def test_startup_injects_collection_into_handlers(monkeypatch):
    monkeypatch.setenv("MONGODB_URL", "mongodb://localhost:27017")
    monkeypatch.setenv("MONGODB_DATABASE", "loja_startup")
    mongo = mongomock.MongoClient()

    with patch.object(main, "create_client", return_value=mongo):
        with TestClient(app) as client:
            collection = app.state.products_collection
            assert collection.name == "produtos"

            response = client.post(
                "/produtos",
                json={
                    "nome": "Lápis",
                    "quantidade": 10,
                    "preco": 1.5,
                    "categoria": "papelaria",
                },
            )
            assert response.status_code == 201
            assert collection.count_documents({}) == 1

    del app.state.products_collection
    del app.state.mongo_client


def test_run_exits_when_mongodb_is_unreachable(monkeypatch):
    monkeypatch.setenv("MONGODB_URL", "mongodb://unreachable:27017")
    unreachable = MagicMock()
    unreachable.server_info.side_effect = ServerSelectionTimeoutError("timed out")

    with patch.object(entrypoint, "create_client", return_value=unreachable):
        with patch.object(entrypoint.uvicorn, "run") as uvicorn_run:
            with pytest.raises(SystemExit) as exc_info:
                entrypoint.run()

    assert exc_info.value.code == 1
    uvicorn_run.assert_not_called()
    unreachable.close.assert_called_once()


def test_run_exits_without_mongodb_url():
    with patch.object(entrypoint.uvicorn, "run") as uvicorn_run:
        with pytest.raises(SystemExit) as exc_info:
            entrypoint.run()

    assert exc_info.value.code == 1
    uvicorn_run.assert_not_called()


def test_run_serves_on_configured_port(monkeypatch):
    monkeypatch.setenv("MONGODB_URL", "mongodb://localhost:27017")
    monkeypatch.setenv("PORT", "8080")

    with patch.object(entrypoint, "create_client", return_value=MagicMock()):
        with patch.object(entrypoint.uvicorn, "run") as uvicorn_run:
            entrypoint.run()

    uvicorn_run.assert_called_once_with(app, host="0.0.0.0", port=8080)
