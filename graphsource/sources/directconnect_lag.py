"""Direct Connect source: link aggregation groups (LAGs)."""

from __future__ import annotations

from typing import Any

from graphsource.base_source import DescribeOnlySource, SourceMetadata
from graphsource.items import BlastPropagation, QueryMethod
from graphsource.links import LinkRule, each
from graphsource.mapper import ItemMapper

LAG_FIELDS = (
    "lagId",
    "lagName",
    "lagState",
    "ownerAccount",
    "region",
    "location",
    "connectionsBandwidth",
    "numberOfConnections",
    "minimumLinks",
    "awsDevice",
    "awsDeviceV2",
    "awsLogicalDeviceId",
    "connections",
    "allowsHostedConnections",
    "jumboFrameCapable",
    "hasLogicalRedundancy",
    "providerName",
    "macSecCapable",
    "encryptionMode",
    "macSecKeys",
)

LAG_LINKS = (
    LinkRule(
        item_type="directconnect-connection",
        method=QueryMethod.GET,
        source=each("connections", "connectionId"),
        blast=BlastPropagation(in_=True, out=True),
    ),
    LinkRule(
        item_type="directconnect-location",
        method=QueryMethod.GET,
        source="location",
        blast=BlastPropagation(in_=True, out=False),
    ),
    LinkRule(
        item_type="directconnect-virtual-interface",
        method=QueryMethod.SEARCH,
        source="lagId",
        blast=BlastPropagation(in_=False, out=True),
    ),
    LinkRule(
        item_type="secretsmanager-secret",
        method=QueryMethod.SEARCH,
        source=each("macSecKeys", "secretARN"),
        blast=BlastPropagation(in_=True, out=False),
        scope_from_arn=True,
    ),
)


class DirectConnectLagSource(DescribeOnlySource):
    METADATA = SourceMetadata(
        item_type="directconnect-lag",
        descriptive_name="Link Aggregation Group",
        get_description="Get a LAG by ID",
        list_description="List all LAGs",
        search_description="Search LAGs by ARN",
        terraform_query_map=("aws_dx_lag.id",),
    )
    SERVICE = "directconnect"
    OPERATION = "describe_lags"
    RESULT_KEY = "lags"
    MAPPER = ItemMapper(
        item_type="directconnect-lag",
        unique_attribute="lagId",
        attribute_fields=LAG_FIELDS,
        link_rules=LAG_LINKS,
    )

    def get_input(self, scope: str, query: str) -> dict[str, Any]:
        return {"lagId": query}
