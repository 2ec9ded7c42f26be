"""Abstract base class for describe-only sources."""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

import boto3

from graphsource.arn import parse_arn
from graphsource.config import AwsConfig
from graphsource.context import RequestContext
from graphsource.errors import (
    AmbiguousResultError,
    NoScopeError,
    NotFoundError,
    SourceError,
    UpstreamError,
)
from graphsource.fetcher import Boto3PageFetcher, PageTransport, RateLimitedFetcher
from graphsource.items import Item, QueryMethod
from graphsource.limiter import LimitBucket
from graphsource.mapper import ItemMapper
from graphsource.scope import format_scope, scope_from_arn

logger = logging.getLogger("graphsource.source")


@dataclass(frozen=True)
class SourceMetadata:
    """Static description of a source, used for registration and docs."""

    item_type: str
    descriptive_name: str
    get_description: str
    list_description: str
    search_description: str = ""
    group: str = "AWS"
    terraform_query_map: tuple[str, ...] = ()

    @property
    def methods(self) -> tuple[QueryMethod, ...]:
        if self.search_description:
            return (QueryMethod.GET, QueryMethod.LIST, QueryMethod.SEARCH)
        return (QueryMethod.GET, QueryMethod.LIST)


class DescribeOnlySource(ABC):
    """A source backed by a single paginated describe call.

    Subclasses declare METADATA, SERVICE, OPERATION, RESULT_KEY and MAPPER and
    override the request builders. Sources serve exactly one scope, the
    account and region they were built for.
    """

    METADATA: SourceMetadata
    SERVICE: str = ""
    OPERATION: str = ""
    RESULT_KEY: str = ""
    MAPPER: ItemMapper

    def __init__(
        self,
        account_id: str,
        region: str,
        limiter: LimitBucket,
        client: Any = None,
        transport: Optional[PageTransport] = None,
    ) -> None:
        if transport is None:
            if client is None:
                raise ValueError("either client or transport is required")
            transport = Boto3PageFetcher(client, self.OPERATION, self.RESULT_KEY)
        self.account_id = account_id
        self.region = region
        self.scope = format_scope(account_id, region)
        self._fetcher = RateLimitedFetcher(transport, limiter)

    @classmethod
    def from_config(
        cls,
        config: AwsConfig,
        limiter: LimitBucket,
        session: Optional[boto3.Session] = None,
    ) -> "DescribeOnlySource":
        """Build the source with a boto3 client from the AWS config."""
        if not config.account_id:
            raise ValueError("AWS account id not set")
        session = session or boto3.Session(profile_name=config.profile)
        client = session.client(cls.SERVICE, region_name=config.region)
        return cls(config.account_id, config.region, limiter, client=client)

    @property
    def item_type(self) -> str:
        return self.METADATA.item_type

    def scopes(self) -> list[str]:
        return [self.scope]

    # ------------------------------------------------------------------
    # Request builders
    # ------------------------------------------------------------------

    @abstractmethod
    def get_input(self, scope: str, query: str) -> dict[str, Any]:
        """Request kwargs selecting the single resource ``query``."""

    def list_input(self, scope: str) -> dict[str, Any]:
        return {}

    def search_input(self, scope: str, query: str) -> Optional[dict[str, Any]]:
        """Request kwargs for a search. None means: treat ``query`` as an ARN."""
        return None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, ctx: RequestContext, scope: str, query: str) -> Item:
        self._check_scope(scope, query)
        items = self._run(ctx, scope, self.get_input(scope, query), QueryMethod.GET, query)
        if not items:
            raise NotFoundError(
                f"{self.item_type} not found",
                item_type=self.item_type, scope=scope, query=query,
            )
        if len(items) > 1:
            raise AmbiguousResultError(
                f"expected 1 {self.item_type}, got {len(items)}",
                count=len(items),
                item_type=self.item_type, scope=scope, query=query,
            )
        return items[0]

    def list(self, ctx: RequestContext, scope: str) -> list[Item]:
        self._check_scope(scope)
        return self._run(ctx, scope, self.list_input(scope), QueryMethod.LIST)

    def search(self, ctx: RequestContext, scope: str, query: str) -> list[Item]:
        self._check_scope(scope, query)
        try:
            request = self.search_input(scope, query)
        except SourceError as exc:
            raise exc.with_context(item_type=self.item_type, scope=scope, query=query)
        if request is None:
            return self._search_arn(ctx, scope, query)
        return self._run(ctx, scope, request, QueryMethod.SEARCH, query)

    def _search_arn(self, ctx: RequestContext, scope: str, query: str) -> list[Item]:
        try:
            arn = parse_arn(query)
        except SourceError as exc:
            raise exc.with_context(item_type=self.item_type, scope=scope, query=query)

        arn_scope = scope_from_arn(arn) if arn.account_id else ""
        if arn_scope != scope:
            raise NoScopeError(
                f"ARN scope {arn_scope!r} does not match requested scope",
                item_type=self.item_type, scope=scope, query=query,
            )
        try:
            return [self.get(ctx, scope, arn.resource_id)]
        except NotFoundError:
            return []

    def _check_scope(self, scope: str, query: Optional[str] = None) -> None:
        if scope not in self.scopes():
            raise NoScopeError(
                f"scope not served by this source (serves {self.scope})",
                item_type=self.item_type, scope=scope, query=query,
            )

    def _run(
        self,
        ctx: RequestContext,
        scope: str,
        request: dict[str, Any],
        method: QueryMethod,
        query: Optional[str] = None,
    ) -> list[Item]:
        """Fetch every page for ``request`` and map the records."""
        started = time.monotonic()
        extra = {"item_type": self.item_type, "scope": scope, "method": method.value, "query": query}
        try:
            records, pages = self._describe(ctx, request)
            items = self.MAPPER.map_all(records, scope)
        except SourceError as exc:
            logger.warning("Query failed: %s", exc, extra=extra)
            raise exc.with_context(item_type=self.item_type, scope=scope, query=query)

        logger.info(
            "Query complete",
            extra={
                **extra,
                "pages": pages,
                "items": len(items),
                "duration_s": round(time.monotonic() - started, 3),
            },
        )
        return items

    def _describe(self, ctx: RequestContext, request: dict[str, Any]) -> tuple[list[dict], int]:
        """Drive pagination to the end. Partial results are never returned."""
        records: list[dict] = []
        seen_tokens: set[str] = set()
        token: Optional[str] = None
        pages = 0

        while True:
            ctx.raise_if_done()
            try:
                page = self._fetcher.fetch_page(ctx, request, token)
            except SourceError:
                raise
            except Exception as exc:
                raise UpstreamError(f"{self.OPERATION or 'describe'} failed: {exc}") from exc
            # a page that finished after cancellation is dropped
            ctx.raise_if_done()

            pages += 1
            records.extend(page.records)
            token = page.next_token
            if not token:
                return records, pages
            if token in seen_tokens:
                raise UpstreamError(f"pagination token repeated: {token!r}")
            seen_tokens.add(token)
