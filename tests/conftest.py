"""Shared fixtures: fake transports, an example source and sample records.

Sources are exercised against in-memory page transports or MagicMock boto3
clients, so no test touches AWS.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Iterator, Optional
from unittest.mock import MagicMock

import pytest

from graphsource.base_source import DescribeOnlySource, SourceMetadata
from graphsource.context import RequestContext
from graphsource.fetcher import Page, PageTransport
from graphsource.items import BlastPropagation, QueryMethod
from graphsource.limiter import LimitBucket
from graphsource.links import LinkRule
from graphsource.mapper import ItemMapper

ACCOUNT_ID = "123456789012"
REGION = "us-east-1"
SCOPE = f"{ACCOUNT_ID}.{REGION}"

SECRET_ARN = "arn:aws:secretsmanager:eu-west-1:210987654321:secret:dx/macsec-AbCdEf"
SECRET_SCOPE = "210987654321.eu-west-1"


# ---------------------------------------------------------------------------
# Transports
# ---------------------------------------------------------------------------


class FakeTransport(PageTransport):
    """Serves a fixed list of pages. Page N's continuation token is str(N + 1)."""

    def __init__(
        self,
        pages: list[Page],
        on_fetch: Optional[Callable[[RequestContext, int], None]] = None,
    ) -> None:
        self.pages = pages
        self.on_fetch = on_fetch
        self.calls: list[tuple[dict, Optional[str]]] = []

    def fetch_page(self, ctx, request, next_token=None):
        self.calls.append((dict(request), next_token))
        index = 0 if next_token is None else int(next_token)
        if self.on_fetch is not None:
            self.on_fetch(ctx, index)
        return self.pages[index]


def paged(*pages: list[dict[str, Any]]) -> list[Page]:
    """Build chained pages from lists of records."""
    result = []
    for i, records in enumerate(pages):
        token = str(i + 1) if i + 1 < len(pages) else None
        result.append(Page(records=list(records), next_token=token))
    return result


# ---------------------------------------------------------------------------
# Example source
# ---------------------------------------------------------------------------

DEVICE_BLAST = BlastPropagation(in_=True, out=False)
GROUP_BLAST = BlastPropagation(in_=True, out=False)


class ExampleConnectionSource(DescribeOnlySource):
    METADATA = SourceMetadata(
        item_type="x-connection",
        descriptive_name="Connection",
        get_description="Get a connection by ID",
        list_description="List all connections",
        search_description="Search connections by ARN",
        group="Example",
        terraform_query_map=("x_connection.id",),
    )
    OPERATION = "describe_connections"
    RESULT_KEY = "connections"
    MAPPER = ItemMapper(
        item_type="x-connection",
        unique_attribute="id",
        attribute_fields=("id", "deviceRef", "groupArn"),
        link_rules=(
            LinkRule(
                item_type="x-device",
                method=QueryMethod.GET,
                source="deviceRef",
                blast=DEVICE_BLAST,
            ),
            LinkRule(
                item_type="x-group",
                method=QueryMethod.SEARCH,
                source="groupArn",
                blast=GROUP_BLAST,
                scope_from_arn=True,
            ),
        ),
    )

    def get_input(self, scope, query):
        return {"ids": [query]}


@pytest.fixture
def limiter() -> LimitBucket:
    return LimitBucket(max_capacity=1000, refill_rate=1000.0, max_in_flight=4)


@pytest.fixture
def ctx() -> RequestContext:
    return RequestContext()


@pytest.fixture
def make_source(limiter):
    """Build an ExampleConnectionSource over the given pages."""

    def _make(*pages, on_fetch=None):
        transport = FakeTransport(paged(*pages), on_fetch=on_fetch)
        source = ExampleConnectionSource(ACCOUNT_ID, REGION, limiter, transport=transport)
        return source, transport

    return _make


# ---------------------------------------------------------------------------
# Direct Connect records
# ---------------------------------------------------------------------------


def make_connection(
    connection_id: str = "dxcon-fg5678gh",
    lag_id: Optional[str] = "dxlag-ffrz71kw",
    secret_arns: tuple[str, ...] = (SECRET_ARN,),
    **overrides: Any,
) -> dict[str, Any]:
    record: dict[str, Any] = {
        "ownerAccount": ACCOUNT_ID,
        "connectionId": connection_id,
        "connectionName": "prod-primary",
        "connectionState": "available",
        "region": REGION,
        "location": "EqDC2",
        "bandwidth": "10Gbps",
        "loaIssueTime": datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        "jumboFrameCapable": True,
        "awsDeviceV2": "EqDC2-123h49s71dabc",
        "hasLogicalRedundancy": "yes",
        "macSecCapable": True,
        "tags": [{"key": "env", "value": "prod"}, {"key": "team", "value": "network"}],
        "macSecKeys": [
            {"secretARN": arn, "ckn": "0123456789abcdef", "state": "associated"}
            for arn in secret_arns
        ],
    }
    if lag_id is not None:
        record["lagId"] = lag_id
    record.update(overrides)
    return record


def make_lag(lag_id: str = "dxlag-ffrz71kw", connection_ids=("dxcon-fg5678gh", "dxcon-abc12345")) -> dict[str, Any]:
    return {
        "lagId": lag_id,
        "lagName": "prod-lag",
        "lagState": "available",
        "ownerAccount": ACCOUNT_ID,
        "region": REGION,
        "location": "EqDC2",
        "connectionsBandwidth": "10Gbps",
        "numberOfConnections": len(connection_ids),
        "minimumLinks": 1,
        "connections": [make_connection(cid, lag_id=lag_id, secret_arns=()) for cid in connection_ids],
        "allowsHostedConnections": False,
        "tags": [{"key": "env", "value": "prod"}],
        "macSecKeys": [],
    }


def make_virtual_interface(vif_id: str = "dxvif-fgh12345", **overrides: Any) -> dict[str, Any]:
    record: dict[str, Any] = {
        "ownerAccount": ACCOUNT_ID,
        "virtualInterfaceId": vif_id,
        "virtualInterfaceName": "prod-private",
        "virtualInterfaceType": "private",
        "virtualInterfaceState": "available",
        "region": REGION,
        "location": "EqDC2",
        "connectionId": "dxcon-fg5678gh",
        "vlan": 101,
        "asn": 65000,
        "amazonSideAsn": 64512,
        "addressFamily": "ipv4",
        "mtu": 9001,
        "directConnectGatewayId": "5f294f92-bafb-4011-916d-9b0bec63d6f4",
        "bgpPeers": [{"bgpPeerId": "dxpeer-1", "asn": 65000, "bgpStatus": "up"}],
        "tags": [{"key": "env", "value": "prod"}],
    }
    record.update(overrides)
    return record


@pytest.fixture
def dx_client() -> MagicMock:
    """MagicMock standing in for a boto3 directconnect client."""
    return MagicMock()


@pytest.fixture(autouse=True)
def graphsource_logger() -> Iterator[logging.Logger]:
    """Restore the graphsource logger after tests that call configure_logging()."""
    logger = logging.getLogger("graphsource")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield logger
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]
