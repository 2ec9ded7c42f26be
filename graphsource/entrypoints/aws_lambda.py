"""AWS Lambda handler for graph discovery queries.

Each invocation runs one query against one source.

Event format:
  {"type": "directconnect-connection", "method": "LIST"}
  {"type": "directconnect-connection", "method": "GET", "query": "dxcon-fg5678gh"}
  {"type": "directconnect-virtual-interface", "method": "SEARCH", "query": "dxcon-fg5678gh",
   "scope": "123456789012.us-east-1"}
"""

from __future__ import annotations

import json
import logging
import os

from graphsource.config import load_config, resolve_account_id
from graphsource.context import RequestContext, background
from graphsource.errors import (
    AmbiguousResultError,
    NoScopeError,
    NotFoundError,
    ParseError,
    SourceError,
    UpstreamError,
)
from graphsource.logging_config import configure_logging
from graphsource.registry import SOURCE_REGISTRY, build_source, new_limiter
from graphsource.scope import parse_scope

logger = logging.getLogger("graphsource.lambda")

# Stop this long before Lambda kills the invocation
_DEADLINE_MARGIN_S = 2.0

_STATUS_CODES = (
    (NotFoundError, 404),
    (AmbiguousResultError, 409),
    (ParseError, 400),
    (NoScopeError, 400),
    (UpstreamError, 502),
)


def _response(status: int, body: dict) -> dict:
    return {"statusCode": status, "body": json.dumps(body, default=str)}


def _request_context(context) -> RequestContext:
    remaining_ms = getattr(context, "get_remaining_time_in_millis", None)
    if remaining_ms is None:
        return background()
    return RequestContext.with_timeout(max(remaining_ms() / 1000.0 - _DEADLINE_MARGIN_S, 0.0))


def handler(event: dict, context) -> dict:
    """Lambda entry point."""
    configure_logging(os.environ.get("GRAPHSOURCE_LOG_LEVEL", "INFO"))

    item_type = event.get("type", "")
    method = str(event.get("method", "")).upper()
    query = event.get("query", "")
    if item_type not in SOURCE_REGISTRY:
        return _response(400, {"error": f"unknown type {item_type!r}"})
    if method not in ("GET", "LIST", "SEARCH"):
        return _response(400, {"error": f"unknown method {method!r}"})
    if method != "LIST" and not query:
        return _response(400, {"error": f"{method} requires 'query'"})
    if event.get("scope"):
        try:
            parse_scope(event["scope"])
        except ValueError as exc:
            return _response(400, {"error": str(exc)})

    logger.info("Lambda invoked for type=%s method=%s", item_type, method)

    config = load_config()
    try:
        aws = resolve_account_id(config.aws)
        source = build_source(item_type, aws, new_limiter(config.rate_limit))
        scope = event.get("scope") or source.scope
        ctx = _request_context(context)

        if method == "GET":
            items = [source.get(ctx, scope, query)]
        elif method == "LIST":
            items = source.list(ctx, scope)
        else:
            items = source.search(ctx, scope, query)
    except SourceError as exc:
        status = 500
        for exc_type, code in _STATUS_CODES:
            if isinstance(exc, exc_type):
                status = code
                break
        logger.error("Query failed for %s: %s", item_type, exc)
        return _response(status, {"type": item_type, "error": str(exc)})
    except Exception as exc:
        logger.error("Query failed for %s: %s", item_type, exc, exc_info=True)
        return _response(500, {"type": item_type, "error": str(exc)})

    return _response(200, {
        "type": item_type,
        "scope": scope,
        "items": [item.to_dict() for item in items],
    })
