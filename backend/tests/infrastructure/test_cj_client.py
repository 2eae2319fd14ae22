"""ResilientCJClient — retry, backoff, and error mapping against httpx.MockTransport.

Invariants:
    - 5xx and connection errors retry up to max_retries, then CJAPIError(connection_error)
    - 429 honours Retry-After before retrying
    - 401 and CJ auth envelope codes raise CJAuthenticationError without retry
    - Timeouts are not retried
"""

import httpx
import pytest

from storefront.core.errors import CJAPIError, CJAuthenticationError
from storefront.infrastructure.cj_client import ACCESS_TOKEN_HEADER

from tests.mock_cj import MockCJ, envelope, make_cj_client


@pytest.fixture
def sleeps(monkeypatch):
    """Record backoff delays instead of sleeping."""
    delays = []

    async def fake_sleep(seconds):
        delays.append(seconds)

    monkeypatch.setattr(
        "storefront.infrastructure.cj_client.asyncio.sleep", fake_sleep,
    )
    return delays


@pytest.fixture
async def cj():
    mock = MockCJ()
    client = make_cj_client(mock, max_retries=2)
    yield mock, client
    await client.aclose()


async def test_sends_access_token_header(cj):
    mock, client = cj
    await client.get_balance("tok-1")
    assert mock.calls[0].headers[ACCESS_TOKEN_HEADER] == "tok-1"
    assert mock.paths() == ["/shopping/pay/getBalance"]


async def test_list_products_params(cj):
    mock, client = cj
    await client.list_products("tok-1", page=2, page_size=10, category_id="cat-9")
    params = mock.calls[0].url.params
    assert params["pageNum"] == "2"
    assert params["pageSize"] == "10"
    assert params["categoryId"] == "cat-9"


async def test_search_uses_product_name_filter(cj):
    mock, client = cj
    await client.search_products("tok-1", "earbuds")
    assert mock.calls[0].url.params["productNameEn"] == "earbuds"


async def test_token_exchange_posts_api_key(cj):
    mock, client = cj
    body = await client.get_access_token("key-good")
    assert body["data"]["accessToken"] == "tok-1"
    assert mock.body_of(0) == {"apiKey": "key-good"}
    assert ACCESS_TOKEN_HEADER not in mock.calls[0].headers


async def test_freight_quote_body(cj):
    mock, client = cj
    await client.freight_quote("tok-1", "vid-1", "PH", quantity=3)
    assert mock.body_of(0) == {
        "startCountryCode": "CN",
        "endCountryCode": "PH",
        "products": [{"quantity": 3, "vid": "vid-1"}],
    }


async def test_retries_server_errors_then_succeeds(cj, sleeps):
    mock, client = cj
    mock.responses["/product/getCategory"] = [
        httpx.Response(502),
        httpx.Response(503),
        envelope([{"categoryFirstName": "Home"}]),
    ]
    body = await client.get_categories("tok-1")
    assert body["data"] == [{"categoryFirstName": "Home"}]
    assert len(mock.calls) == 3
    assert len(sleeps) == 2


async def test_gives_up_after_max_retries(cj, sleeps):
    mock, client = cj
    mock.responses["/product/getCategory"] = [httpx.Response(500)]
    with pytest.raises(CJAPIError) as exc_info:
        await client.get_categories("tok-1")
    assert exc_info.value.api_error_type == "connection_error"
    assert exc_info.value.http_status == 503
    assert len(mock.calls) == 3


async def test_connection_errors_are_retried(cj, sleeps):
    mock, client = cj
    attempts = []

    def flaky(request):
        attempts.append(request)
        if len(attempts) == 1:
            raise httpx.ConnectError("refused", request=request)
        return envelope({"amount": 5})

    mock.responses["/shopping/pay/getBalance"] = flaky
    body = await client.get_balance("tok-1")
    assert body["data"] == {"amount": 5}
    assert len(attempts) == 2


async def test_rate_limit_respects_retry_after(cj, sleeps):
    mock, client = cj
    mock.responses["/shopping/pay/getBalance"] = [
        httpx.Response(429, headers={"Retry-After": "2"}),
        envelope({"amount": 1}),
    ]
    await client.get_balance("tok-1")
    assert sleeps == [2.0]


async def test_timeout_is_not_retried(cj, sleeps):
    mock, client = cj

    def slow(request):
        raise httpx.ReadTimeout("slow", request=request)

    mock.responses["/shopping/pay/getBalance"] = slow
    with pytest.raises(CJAPIError) as exc_info:
        await client.get_balance("tok-1")
    assert exc_info.value.api_error_type == "timeout"
    assert len(mock.calls) == 1
    assert sleeps == []


async def test_http_401_is_authentication_error(cj, sleeps):
    mock, client = cj
    mock.responses["/shopping/pay/getBalance"] = httpx.Response(401)
    with pytest.raises(CJAuthenticationError):
        await client.get_balance("tok-1")
    assert len(mock.calls) == 1


async def test_auth_envelope_code_is_authentication_error(cj):
    _, client = cj
    with pytest.raises(CJAuthenticationError) as exc_info:
        await client.get_balance("tok-unknown")
    assert exc_info.value.context.cj_code == 1600001


async def test_other_client_errors_map_to_cj_api_error(cj):
    mock, client = cj
    mock.responses["/product/query"] = httpx.Response(404)
    with pytest.raises(CJAPIError) as exc_info:
        await client.get_product("tok-1", "p-1")
    assert exc_info.value.api_error_type == "client_error"


async def test_non_json_body_is_invalid_response(cj):
    mock, client = cj
    mock.responses["/product/query"] = httpx.Response(200, text="<html>")
    with pytest.raises(CJAPIError) as exc_info:
        await client.get_product("tok-1", "p-1")
    assert exc_info.value.api_error_type == "invalid_response"


async def test_business_error_envelopes_are_returned_as_is(cj):
    mock, client = cj
    mock.responses["/shopping/order/createOrder"] = envelope(code=1603001, message="Balance too low")
    body = await client.create_order("tok-1", {"products": []})
    assert body["code"] == 1603001
    assert body["message"] == "Balance too low"
