"""Page fetching: the boto3 transport adapter and the rate-limit gate."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from botocore.exceptions import BotoCoreError, ClientError

from graphsource.context import RequestContext
from graphsource.errors import UpstreamError
from graphsource.limiter import LimitBucket

logger = logging.getLogger("graphsource.fetcher")


@dataclass
class Page:
    records: list[dict[str, Any]] = field(default_factory=list)
    next_token: Optional[str] = None


class PageTransport(ABC):
    """Fetches one page of a describe call."""

    @abstractmethod
    def fetch_page(
        self,
        ctx: RequestContext,
        request: dict[str, Any],
        next_token: Optional[str] = None,
    ) -> Page:
        """Return the page for ``request`` starting at ``next_token``."""


class Boto3PageFetcher(PageTransport):
    """Calls a boto3 describe operation one page at a time.

    Direct Connect describe calls take and return ``nextToken``; other
    services spell it ``NextToken``, hence the configurable names.
    """

    def __init__(
        self,
        client: Any,
        operation: str,
        result_key: str,
        token_param: str = "nextToken",
        token_key: str = "nextToken",
    ) -> None:
        self._client = client
        self._operation = operation
        self._result_key = result_key
        self._token_param = token_param
        self._token_key = token_key

    def fetch_page(
        self,
        ctx: RequestContext,
        request: dict[str, Any],
        next_token: Optional[str] = None,
    ) -> Page:
        kwargs = dict(request)
        if next_token:
            kwargs[self._token_param] = next_token

        # botocore calls can't be interrupted; the caller re-checks ctx after
        call = getattr(self._client, self._operation)
        try:
            resp = call(**kwargs)
        except (BotoCoreError, ClientError) as exc:
            raise UpstreamError(f"{self._operation} failed: {exc}") from exc

        return Page(
            records=list(resp.get(self._result_key, [])),
            next_token=resp.get(self._token_key) or None,
        )


class RateLimitedFetcher:
    """Runs every page fetch inside a slot of the shared LimitBucket."""

    def __init__(self, transport: PageTransport, limiter: LimitBucket) -> None:
        self.transport = transport
        self.limiter = limiter

    def fetch_page(
        self,
        ctx: RequestContext,
        request: dict[str, Any],
        next_token: Optional[str] = None,
    ) -> Page:
        with self.limiter.slot(ctx):
            return self.transport.fetch_page(ctx, request, next_token)
