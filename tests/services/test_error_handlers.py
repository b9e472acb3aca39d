"""Error Handlers — domain, request-validation and unexpected errors share one envelope."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel, Field

from agrilink.api.error_handlers import register_error_handlers
from agrilink.core.errors import ResourceNotFoundError, ValidationError


class Body(BaseModel):
    quantity: int = Field(gt=0)


@pytest.fixture
async def bare_client():
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/missing")
    async def missing():
        raise ResourceNotFoundError("Product", "p-1")

    @app.get("/bad-field")
    async def bad_field():
        raise ValidationError("Quantity must be positive", field="quantity")

    @app.post("/body")
    async def body(payload: Body):
        return {"ok": True}

    @app.get("/boom")
    async def boom():
        raise RuntimeError("secret connection string")

    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


async def test_domain_error_envelope(bare_client):
    res = await bare_client.get("/missing")
    assert res.status_code == 404
    error = res.json()["error"]
    assert error["code"] == "RESOURCE_NOT_FOUND"
    assert "timestamp" in error
    assert "field" not in error


async def test_validation_error_names_field(bare_client):
    res = await bare_client.get("/bad-field")
    assert res.status_code == 400
    assert res.json()["error"]["field"] == "quantity"


async def test_request_validation_lists_fields(bare_client):
    res = await bare_client.post("/body", json={"quantity": 0})
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert error["details"][0]["field"] == "body.quantity"


async def test_unexpected_error_hides_internals(bare_client):
    res = await bare_client.get("/boom")
    assert res.status_code == 500
    error = res.json()["error"]
    assert error["code"] == "INTERNAL_ERROR"
    assert "secret" not in res.text
