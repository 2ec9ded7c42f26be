"""Direct Connect source: connections."""

from __future__ import annotations

from typing import Any

from graphsource.base_source import DescribeOnlySource, SourceMetadata
from graphsource.items import BlastPropagation, QueryMethod
from graphsource.links import LinkRule, each
from graphsource.mapper import ItemMapper

CONNECTION_FIELDS = (
    "ownerAccount",
    "connectionId",
    "connectionName",
    "connectionState",
    "region",
    "location",
    "bandwidth",
    "vlan",
    "partnerName",
    "loaIssueTime",
    "lagId",
    "awsDevice",
    "jumboFrameCapable",
    "awsDeviceV2",
    "awsLogicalDeviceId",
    "hasLogicalRedundancy",
    "providerName",
    "macSecCapable",
    "portEncryptionStatus",
    "encryptionMode",
    "macSecKeys",
)

CONNECTION_LINKS = (
    # The LAG and its member connections fail together
    LinkRule(
        item_type="directconnect-lag",
        method=QueryMethod.GET,
        source="lagId",
        blast=BlastPropagation(in_=True, out=True),
    ),
    LinkRule(
        item_type="directconnect-location",
        method=QueryMethod.GET,
        source="location",
        blast=BlastPropagation(in_=True, out=False),
    ),
    # Virtual interfaces ride on the connection
    LinkRule(
        item_type="directconnect-virtual-interface",
        method=QueryMethod.SEARCH,
        source="connectionId",
        blast=BlastPropagation(in_=False, out=True),
    ),
    # MACsec CKN/CAK secrets can live in another account or region
    LinkRule(
        item_type="secretsmanager-secret",
        method=QueryMethod.SEARCH,
        source=each("macSecKeys", "secretARN"),
        blast=BlastPropagation(in_=True, out=False),
        scope_from_arn=True,
    ),
)


class DirectConnectConnectionSource(DescribeOnlySource):
    METADATA = SourceMetadata(
        item_type="directconnect-connection",
        descriptive_name="Connection",
        get_description="Get a connection by ID",
        list_description="List all connections",
        search_description="Search connections by ARN",
        terraform_query_map=("aws_dx_connection.id",),
    )
    SERVICE = "directconnect"
    OPERATION = "describe_connections"
    RESULT_KEY = "connections"
    MAPPER = ItemMapper(
        item_type="directconnect-connection",
        unique_attribute="connectionId",
        attribute_fields=CONNECTION_FIELDS,
        link_rules=CONNECTION_LINKS,
    )

    def get_input(self, scope: str, query: str) -> dict[str, Any]:
        return {"connectionId": query}
