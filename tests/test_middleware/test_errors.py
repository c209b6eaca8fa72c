"""Tests for error handling middleware."""

from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from httpx import ASGITransport, AsyncClient
from starlette.datastructures import URL
from starlette.status import (
    HTTP_404_NOT_FOUND,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from tntsearch.core.exceptions import QueryExecutionFailure
from tntsearch.middleware.errors import (
    DATABASE_ERROR_MESSAGE,
    ErrorHandlingMiddleware,
    get_error_detail,
    handle_exception,
    register_exception_handlers,
)


@pytest.fixture
def error_app() -> FastAPI:
    """Application whose routes fail in various ways."""
    app = FastAPI()
    app.add_middleware(ErrorHandlingMiddleware)
    register_exception_handlers(app)

    @app.get("/http-error")
    async def _http_error() -> None:
        raise HTTPException(status_code=400, detail="Bad page")

    @app.get("/value-error")
    async def _value_error() -> None:
        raise ValueError("page_size must be greater than 0")

    @app.get("/query-failure")
    async def _query_failure() -> None:
        raise QueryExecutionFailure("database is locked")

    @app.get("/runtime-error")
    async def _runtime_error() -> None:
        raise RuntimeError("unexpected")

    @app.get("/typed")
    async def _typed(page: int) -> dict[str, int]:
        return {"page": page}

    return app


@pytest.fixture
async def error_client(error_app: FastAPI):
    transport = ASGITransport(app=error_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def _mock_request(correlation_id: str | None = None) -> MagicMock:
    request = MagicMock(spec=Request)
    request.url = URL("http://test/api")
    request.method = "GET"
    request.state.correlation_id = correlation_id
    return request


@pytest.mark.asyncio
async def test_http_exception_handling(error_client: AsyncClient) -> None:
    response = await error_client.get("/http-error")

    assert response.status_code == 400
    assert response.json() == {
        "error": "HTTPException",
        "message": "Bad page",
        "status_code": 400,
        "correlation_id": "unknown",
    }


@pytest.mark.asyncio
async def test_value_error_handling(error_client: AsyncClient) -> None:
    response = await error_client.get("/value-error")

    assert response.status_code == 422
    assert response.json()["message"] == "page_size must be greater than 0"


@pytest.mark.asyncio
async def test_query_failure_hides_store_message(error_client: AsyncClient) -> None:
    with patch("tntsearch.middleware.errors.logger") as mock_logger:
        response = await error_client.get("/query-failure")

    assert response.status_code == 500
    assert response.json()["error"] == "QueryExecutionFailure"
    assert response.json()["message"] == DATABASE_ERROR_MESSAGE
    assert "locked" not in response.text

    logged = mock_logger.error.call_args
    assert logged.args == ("request_error",)
    assert logged.kwargs["error_message"] == "database is locked"


@pytest.mark.asyncio
async def test_unknown_exception_handling(error_client: AsyncClient) -> None:
    response = await error_client.get("/runtime-error")

    assert response.status_code == 500
    assert response.json()["error"] == "RuntimeError"
    assert response.json()["message"] == "unexpected"


@pytest.mark.asyncio
async def test_request_validation_error(error_client: AsyncClient) -> None:
    response = await error_client.get("/typed", params={"page": "two"})

    assert response.status_code == HTTP_422_UNPROCESSABLE_ENTITY
    assert response.json()["error"] == "RequestValidationError"


def test_get_error_detail_uses_status_code_attribute() -> None:
    class TeapotError(Exception):
        status_code = 418

    assert get_error_detail(TeapotError("short and stout")) == ("short and stout", 418)
    assert get_error_detail(HTTPException(status_code=404, detail="gone")) == (
        "gone",
        HTTP_404_NOT_FOUND,
    )


def test_get_error_detail_without_args() -> None:
    detail, status_code = get_error_detail(RuntimeError())

    assert detail == ""
    assert status_code == HTTP_500_INTERNAL_SERVER_ERROR


@pytest.mark.asyncio
async def test_handle_exception_echoes_correlation_id() -> None:
    response = await handle_exception(
        _mock_request("test-abc"),
        RequestValidationError(errors=[{"loc": ["query", "page"], "msg": "bad"}]),
    )

    assert response.status_code == HTTP_422_UNPROCESSABLE_ENTITY
    assert response.headers["X-Request-ID"] == "test-abc"
    assert b'"correlation_id":"test-abc"' in response.body
