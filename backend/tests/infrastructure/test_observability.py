"""Access log middleware — one line per request, including requests that crash."""

import logging

import pytest
from starlette.requests import Request
from starlette.responses import PlainTextResponse

from storefront.infrastructure.observability import log_requests


def _request(path: str = "/api/stats") -> Request:
    return Request({
        "type": "http",
        "method": "GET",
        "path": path,
        "query_string": b"",
        "headers": [],
    })


def _access_records(caplog):
    return [r for r in caplog.records if r.name == "storefront.access"]


async def test_logs_status_of_handled_request(caplog):
    async def call_next(request):
        return PlainTextResponse("ok", status_code=201)

    with caplog.at_level(logging.INFO, logger="storefront.access"):
        response = await log_requests(_request(), call_next)

    assert response.status_code == 201
    [record] = _access_records(caplog)
    assert record.status_code == 201
    assert record.path == "/api/stats"


async def test_logs_500_when_handler_raises(caplog):
    async def call_next(request):
        raise RuntimeError("boom")

    with caplog.at_level(logging.INFO, logger="storefront.access"):
        with pytest.raises(RuntimeError):
            await log_requests(_request("/api/cj/balance"), call_next)

    [record] = _access_records(caplog)
    assert record.status_code == 500
    assert record.method == "GET"
