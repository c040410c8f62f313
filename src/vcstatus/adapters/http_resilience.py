"""Shared async HTTP client for the repository store and the verifier."""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from logging import getLogger
from typing import TYPE_CHECKING, TypedDict, Unpack

import httpx
from aiolimiter import AsyncLimiter
from hishel import AsyncSqliteStorage, FilterPolicy
from hishel import Request as HishelCacheRequest
from hishel import Response as HishelCacheResponse
from hishel._policies import BaseFilter
from hishel.httpx import AsyncCacheClient
from httpx_retries import RetryTransport

from vcstatus.config.http_resilience import (
    IDEMPOTENT_METHODS,
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    ResponseHook,
    RetryPolicy,
    ShouldCacheHook,
)
from vcstatus.config.storage import get_storage_config

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from types import TracebackType

    from httpx._types import HeaderTypes, QueryParamTypes, TimeoutTypes, URLTypes

log = getLogger(__name__)

ERROR_BODY_PREVIEW_CHARS = 300


class RequestOptions(TypedDict, total=False):
    json: object
    params: QueryParamTypes | None
    headers: HeaderTypes | None


class AsyncClientOptions(TypedDict, total=False):
    base_url: str
    timeout: TimeoutTypes
    headers: HeaderTypes
    event_hooks: dict[str, list[ResponseHook]]
    transport: httpx.AsyncBaseTransport


class ResilientClient:
    """``httpx.AsyncClient`` with retries on idempotent reads, rate limiting and optional caching.

    Error responses are logged with a short body preview before the caller
    turns them into an adapter error.
    """

    def __init__(self, config: ResilienceConfig) -> None:
        self.config = config
        self._limiter: AsyncLimiter | None = (
            AsyncLimiter(config.ratelimit.max_calls, config.ratelimit.per_seconds)
            if config.ratelimit
            else None
        )

        storage, policy = _build_cache_components(config.cache, name=config.name)
        hooks: list[ResponseHook] = [self._log_error_response, *config.response_hooks]

        client_kwargs: AsyncClientOptions = {
            "timeout": config.timeout_seconds,
            "transport": RetryTransport(retry=config.retry.build()),
            "event_hooks": {"response": hooks},
        }
        if config.base_url is not None:
            client_kwargs["base_url"] = config.base_url
        if config.default_headers:
            client_kwargs["headers"] = dict(config.default_headers)

        if storage is not None:
            self._client = AsyncCacheClient(**client_kwargs, storage=storage, policy=policy)
        else:
            self._client = httpx.AsyncClient(**client_kwargs)

    @property
    def name(self) -> str:
        return self.config.name

    async def __aenter__(self) -> ResilientClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def request(
        self,
        method: str,
        url: URLTypes,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Response:
        async with self._slot():
            response = await self._client.request(method, url, **kwargs)
        log.debug("[%s] %s %s -> %s", self.name, method, url, response.status_code)
        return response

    async def get(self, url: URLTypes, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        return await self.request("GET", url, **kwargs)

    async def post(self, url: URLTypes, **kwargs: Unpack[RequestOptions]) -> httpx.Response:
        return await self.request("POST", url, **kwargs)

    @asynccontextmanager
    async def _slot(self) -> AsyncIterator[None]:
        if self._limiter is None:
            yield
            return
        if not self._limiter.has_capacity():
            log.debug("[%s] Rate limit reached, waiting for capacity", self.name)
        async with self._limiter:
            yield

    async def _log_error_response(self, response: httpx.Response) -> None:
        if not response.is_error:
            return
        await response.aread()
        log.warning(
            "[%s] %s %s failed with %s: %s",
            self.name,
            response.request.method,
            response.request.url,
            response.status_code,
            response.text[:ERROR_BODY_PREVIEW_CHARS],
        )


class _ReadRequestFilter(BaseFilter[HishelCacheRequest]):
    """Keeps writes out of the cache."""

    def needs_body(self) -> bool:
        return False

    def apply(self, item: HishelCacheRequest, body: bytes | None) -> bool:  # noqa: ARG002
        return item.method.upper() in IDEMPOTENT_METHODS


class _ShouldCacheResponseFilter(BaseFilter[HishelCacheResponse]):
    """Hishel response filter that delegates to a JSON predicate."""

    def __init__(self, predicate: ShouldCacheHook) -> None:
        self._predicate = predicate

    def needs_body(self) -> bool:
        return True

    def apply(self, item: HishelCacheResponse, body: bytes | None) -> bool:  # noqa: ARG002
        if body is None:
            return True
        try:
            payload = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            return False
        return bool(self._predicate(payload))


def _build_cache_components(
    config: CacheConfig | None,
    *,
    name: str,
) -> tuple[AsyncSqliteStorage | None, FilterPolicy | None]:
    if config is None or not config.enabled:
        return None, None

    if config.backend not in {"sqlite", "memory"}:
        msg = f"Unsupported cache backend: {config.backend}"
        raise ValueError(msg)

    if config.backend == "sqlite":
        database_path = config.sqlite_path or str(get_storage_config().http_cache_path())
    else:
        database_path = ":memory:"
    ttl = config.ttl_seconds
    log.info("[%s] HTTP cache enabled (%s, ttl=%s)", name, database_path, ttl)
    storage = AsyncSqliteStorage(
        database_path=database_path,
        default_ttl=ttl,
        refresh_ttl_on_access=True,
    )

    policy: FilterPolicy | None = None
    if config.should_cache is not None:
        policy = FilterPolicy(
            request_filters=[_ReadRequestFilter()],
            response_filters=[_ShouldCacheResponseFilter(config.should_cache)],
        )

    return storage, policy


def default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


__all__ = [
    "CacheConfig",
    "RateLimit",
    "ResilienceConfig",
    "ResilientClient",
    "RetryPolicy",
    "default_client_factory",
]
