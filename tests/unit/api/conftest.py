"""Fixtures for API route tests."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from coursecatalog.api.app import create_app
from coursecatalog.api.dependencies import CALLER_HEADER, get_service
from coursecatalog.catalog import CatalogService
from coursecatalog.config import Settings
from coursecatalog.store import User


@pytest.fixture
def app(service: CatalogService) -> FastAPI:
    """Create the app with the service dependency pointed at the test service."""
    app = create_app(settings=Settings(db_path=":memory:"))

    def override_get_service():
        yield service

    app.dependency_overrides[get_service] = override_get_service
    return app


@pytest.fixture
def client(app: FastAPI):
    """Create a test client."""
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


@pytest.fixture
def auth(provider: User) -> dict[str, str]:
    """Identity header for the default provider."""
    return {CALLER_HEADER: provider.external_id}
