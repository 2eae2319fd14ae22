"""Resilient CJ Client — wraps httpx.AsyncClient with retry, backoff, and error mapping.

Invariants:
    - Rate limits (429): exponential backoff with jitter, respects Retry-After header
    - Transient errors (5xx, connection): max_retries retries with exponential backoff
    - Timeouts: immediate failure, no retry
    - 401/403 or a CJ auth envelope code: CJAuthenticationError (token is bad, retrying won't help)
    - Other failures mapped to CJAPIError (core/errors.py)
    - Every method returns the decoded CJ envelope {code, result, message, data}

Design Decisions:
    - Wrapper over raw client: isolates retry logic from routes and services
    - ±25% jitter on backoff: prevents thundering herd on a shared CJ rate limit
    - One AsyncClient per process, opened in the lifespan: keeps the connection pool warm
    - transport injectable: tests drive the client with httpx.MockTransport
"""

import asyncio
import logging
import random

import httpx

from storefront.core.errors import CJAPIError, CJAuthenticationError, ErrorContext

logger = logging.getLogger(__name__)

ACCESS_TOKEN_HEADER = "CJ-Access-Token"

# Envelope codes CJ uses for a missing, invalid, or expired access token / API key.
CJ_AUTH_ERROR_CODES = frozenset({1600001, 1600002, 1600003})


class ResilientCJClient:
    """Wraps the CJDropShipping REST API with retry logic, timeouts, and error mapping."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: int = 30,
        max_retries: int = 3,
        base_delay_ms: int = 500,
        max_delay_ms: int = 10_000,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout_seconds,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    async def aclose(self) -> None:
        await self.client.aclose()

    # ─── Authentication ─────────────────────────────────────────

    async def get_access_token(self, api_key: str) -> dict:
        """Exchange an API key for an access token."""
        return await self.request(
            "POST", "/authentication/getAccessToken", json={"apiKey": api_key},
        )

    # ─── Catalog ────────────────────────────────────────────────

    async def list_products(
        self,
        token: str,
        page: int = 1,
        page_size: int = 20,
        category_id: str | None = None,
        keyword: str | None = None,
    ) -> dict:
        params = {"pageNum": page, "pageSize": page_size}
        if category_id:
            params["categoryId"] = category_id
        if keyword:
            params["productNameEn"] = keyword
        return await self.request("GET", "/product/list", token=token, params=params)

    async def search_products(
        self, token: str, keyword: str, page: int = 1, page_size: int = 20,
    ) -> dict:
        return await self.list_products(token, page, page_size, keyword=keyword)

    async def get_product(self, token: str, product_id: str) -> dict:
        return await self.request(
            "GET", "/product/query", token=token, params={"pid": product_id},
        )

    async def get_categories(self, token: str) -> dict:
        return await self.request("GET", "/product/getCategory", token=token)

    # ─── Orders & account ───────────────────────────────────────

    async def create_order(self, token: str, order: dict) -> dict:
        return await self.request(
            "POST", "/shopping/order/createOrder", token=token, json=order,
        )

    async def list_orders(self, token: str, page: int = 1, page_size: int = 20) -> dict:
        return await self.request(
            "GET", "/shopping/order/list", token=token,
            params={"pageNum": page, "pageSize": page_size},
        )

    async def get_balance(self, token: str) -> dict:
        return await self.request("GET", "/shopping/pay/getBalance", token=token)

    async def freight_quote(
        self,
        token: str,
        vid: str,
        end_country_code: str,
        quantity: int = 1,
        start_country_code: str = "CN",
    ) -> dict:
        return await self.request(
            "POST", "/logistic/freightCalculate", token=token,
            json={
                "startCountryCode": start_country_code,
                "endCountryCode": end_country_code,
                "products": [{"quantity": quantity, "vid": vid}],
            },
        )

    # ─── Transport ──────────────────────────────────────────────

    async def request(
        self,
        method: str,
        path: str,
        *,
        token: str | None = None,
        params: dict | None = None,
        json: dict | None = None,
    ) -> dict:
        """Send one CJ call with automatic retry on transient failures."""
        context = ErrorContext(cj_endpoint=path)
        headers = {ACCESS_TOKEN_HEADER: token} if token else None
        for attempt in range(self.max_retries + 1):
            try:
                response = await self.client.request(
                    method, path, params=params, json=json, headers=headers,
                )
            except httpx.TimeoutException:
                raise CJAPIError("API timeout", "timeout", context=context)
            except httpx.TransportError as e:
                await self._handle_transient_error(e, attempt, context)
                continue

            if response.status_code == 429:
                await self._handle_rate_limit(response, attempt, context)
                continue
            if response.status_code >= 500:
                await self._handle_transient_error(
                    f"HTTP {response.status_code}", attempt, context,
                )
                continue
            if response.status_code in (401, 403):
                raise CJAuthenticationError(
                    f"HTTP {response.status_code}", context=context,
                )
            if response.status_code >= 400:
                raise CJAPIError(
                    f"HTTP {response.status_code}", "client_error", context=context,
                )

            body = self._decode(response, context)
            self._check_envelope(body, context)
            self._log_success(path, body, attempt)
            return body

    def _decode(self, response: httpx.Response, context: ErrorContext) -> dict:
        try:
            body = response.json()
        except ValueError:
            raise CJAPIError("Response is not JSON", "invalid_response", context=context)
        if not isinstance(body, dict):
            raise CJAPIError("Unexpected response shape", "invalid_response", context=context)
        return body

    def _check_envelope(self, body: dict, context: ErrorContext) -> None:
        """CJ reports auth failures with HTTP 200 and an error code in the body."""
        code = body.get("code")
        if code in CJ_AUTH_ERROR_CODES:
            context.cj_code = code
            raise CJAuthenticationError(
                body.get("message") or "access token rejected", context=context,
            )

    def _log_success(self, path: str, body: dict, attempt: int) -> None:
        logger.info(
            "CJ API success",
            extra={
                "cj_endpoint": path,
                "cj_code": body.get("code"),
                "attempt": attempt + 1,
            },
        )

    async def _handle_rate_limit(
        self, response: httpx.Response, attempt: int, context: ErrorContext,
    ) -> None:
        """Handle rate limit response with retry or raise."""
        retry_after_ms = self._extract_retry_after(response)
        if attempt >= self.max_retries:
            raise CJAPIError(
                "Rate limit exceeded after retries",
                "rate_limit",
                retry_after_ms=retry_after_ms,
                context=context,
            )
        delay = retry_after_ms or self._backoff(attempt)
        logger.warning(
            f"CJ rate limit hit, retry after {delay}ms (attempt {attempt + 1})",
            extra={"cj_endpoint": context.cj_endpoint},
        )
        await asyncio.sleep(delay / 1000)

    async def _handle_transient_error(
        self, e, attempt: int, context: ErrorContext,
    ) -> None:
        """Handle transient errors with retry or raise."""
        if attempt >= self.max_retries:
            raise CJAPIError(
                f"Transient failure after {self.max_retries} retries: {e}",
                "connection_error",
                context=context,
            )
        delay = self._backoff(attempt)
        logger.warning(
            f"CJ transient error, retry after {delay}ms: {e}",
            extra={"cj_endpoint": context.cj_endpoint},
        )
        await asyncio.sleep(delay / 1000)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311

    def _extract_retry_after(self, response: httpx.Response) -> int | None:
        """Extract Retry-After header (returns milliseconds)."""
        val = response.headers.get("retry-after")
        if val and val.isdigit():
            return int(val) * 1000
        return None


# Singleton (opened on startup, closed on shutdown)
cj_client: ResilientCJClient | None = None


def init_cj_client(base_url: str, **kwargs) -> ResilientCJClient:
    global cj_client
    cj_client = ResilientCJClient(base_url, **kwargs)
    return cj_client


async def close_cj_client() -> None:
    global cj_client
    if cj_client:
        await cj_client.aclose()
        cj_client = None


def get_cj_client() -> ResilientCJClient:
    """FastAPI dependency for the shared CJ client."""
    if not cj_client:
        raise RuntimeError("CJ client not initialized")
    return cj_client
