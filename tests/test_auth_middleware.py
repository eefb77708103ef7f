"""Tests for HTTP Basic Auth on the calculator routes."""

import base64
from collections.abc import Iterator
from unittest.mock import patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from config.settings import Settings
from src.api.app import BasicAuthMiddleware, create_app
from src.api.routes import router

_TEST_SETTINGS = Settings(auth_username="calc-user", auth_password="s3cret:with:colons")

UK_INCOME = {"input": {"income": 60000}}


def _basic(raw: str) -> dict[str, str]:
    return {"Authorization": "Basic " + base64.b64encode(raw.encode()).decode()}


@pytest.fixture
def client() -> Iterator[TestClient]:
    """Router behind the auth middleware, without the startup lifespan."""
    app = FastAPI()
    app.add_middleware(BasicAuthMiddleware)
    app.include_router(router)
    with patch("src.api.app.settings", _TEST_SETTINGS):
        yield TestClient(app)


class TestAuthorized:
    def test_rules_listing(self, client: TestClient) -> None:
        response = client.get("/rules", headers=_basic("calc-user:s3cret:with:colons"))
        assert response.status_code == 200
        assert len(response.json()["rule_sets"]) == 15

    def test_calculation(self, client: TestClient) -> None:
        """Only the first colon separates user from password."""
        response = client.post(
            "/calculate/income_tax/uk", json=UK_INCOME, headers=_basic("calc-user:s3cret:with:colons")
        )
        assert response.status_code == 200
        assert response.json()["income_tax"] == 11432.0


class TestRejected:
    @pytest.mark.parametrize(
        "headers",
        [
            {},
            _basic("calc-user:wrong"),
            _basic("someone-else:s3cret:with:colons"),
            _basic("calc-user"),
            {"Authorization": "Basic ###"},
            {"Authorization": "Bearer calc-user:s3cret:with:colons"},
        ],
        ids=["no-header", "wrong-password", "wrong-user", "no-colon", "not-base64", "bearer-scheme"],
    )
    def test_calculate_returns_401(self, client: TestClient, headers: dict[str, str]) -> None:
        response = client.post("/calculate/income_tax/uk", json=UK_INCOME, headers=headers)
        assert response.status_code == 401
        assert response.headers["WWW-Authenticate"] == "Basic"
        assert response.text == "Unauthorized"

    def test_health_is_protected_too(self, client: TestClient) -> None:
        assert client.get("/health").status_code == 401

    def test_rules_listing_without_credentials(self, client: TestClient) -> None:
        assert client.get("/rules").status_code == 401


@patch("src.api.app.settings", _TEST_SETTINGS)
def test_app_requires_auth_and_runs_lifespan() -> None:
    """The full app protects /calculate and starts up against the bundled rules."""
    with TestClient(create_app()) as client:
        assert client.post("/calculate/income_tax/uk", json=UK_INCOME).status_code == 401
        response = client.post(
            "/calculate/income_tax/uk",
            json=UK_INCOME,
            headers=_basic("calc-user:s3cret:with:colons"),
        )
        assert response.status_code == 200
        assert response.json()["income_tax"] == 11432.0
