"""Direct Connect source: virtual interfaces."""

from __future__ import annotations

from typing import Any, Optional

from graphsource.arn import parse_arn
from graphsource.base_source import DescribeOnlySource, SourceMetadata
from graphsource.errors import NoScopeError, ParseError
from graphsource.items import BlastPropagation, QueryMethod
from graphsource.links import LinkRule
from graphsource.mapper import ItemMapper
from graphsource.scope import scope_from_arn

VIRTUAL_INTERFACE_FIELDS = (
    "virtualInterfaceId",
    "virtualInterfaceName",
    "virtualInterfaceType",
    "virtualInterfaceState",
    "ownerAccount",
    "region",
    "location",
    "connectionId",
    "vlan",
    "asn",
    "amazonSideAsn",
    "amazonAddress",
    "customerAddress",
    "addressFamily",
    "customerRouterConfig",
    "mtu",
    "jumboFrameCapable",
    "virtualGatewayId",
    "directConnectGatewayId",
    "routeFilterPrefixes",
    "bgpPeers",
    "awsDeviceV2",
    "awsLogicalDeviceId",
    "siteLinkEnabled",
)

VIRTUAL_INTERFACE_LINKS = (
    LinkRule(
        item_type="directconnect-connection",
        method=QueryMethod.GET,
        source="connectionId",
        blast=BlastPropagation(in_=True, out=False),
    ),
    LinkRule(
        item_type="directconnect-location",
        method=QueryMethod.GET,
        source="location",
        blast=BlastPropagation(in_=True, out=False),
    ),
    LinkRule(
        item_type="directconnect-direct-connect-gateway",
        method=QueryMethod.GET,
        source="directConnectGatewayId",
        blast=BlastPropagation(in_=True, out=True),
    ),
    LinkRule(
        item_type="ec2-vpn-gateway",
        method=QueryMethod.GET,
        source="virtualGatewayId",
        blast=BlastPropagation(in_=True, out=True),
    ),
)

# ARN resource type -> describe_virtual_interfaces filter
_ARN_FILTER_KEYS = {
    "dxcon": "connectionId",
    "dxlag": "connectionId",
    "dxvif": "virtualInterfaceId",
}


class DirectConnectVirtualInterfaceSource(DescribeOnlySource):
    METADATA = SourceMetadata(
        item_type="directconnect-virtual-interface",
        descriptive_name="Virtual Interface",
        get_description="Get a virtual interface by ID",
        list_description="List all virtual interfaces",
        search_description="Search virtual interfaces by connection or LAG ID, or by dxcon, dxlag or dxvif ARN",
        terraform_query_map=(
            "aws_dx_private_virtual_interface.id",
            "aws_dx_public_virtual_interface.id",
            "aws_dx_transit_virtual_interface.id",
        ),
    )
    SERVICE = "directconnect"
    OPERATION = "describe_virtual_interfaces"
    RESULT_KEY = "virtualInterfaces"
    MAPPER = ItemMapper(
        item_type="directconnect-virtual-interface",
        unique_attribute="virtualInterfaceId",
        attribute_fields=VIRTUAL_INTERFACE_FIELDS,
        link_rules=VIRTUAL_INTERFACE_LINKS,
    )

    def get_input(self, scope: str, query: str) -> dict[str, Any]:
        return {"virtualInterfaceId": query}

    def search_input(self, scope: str, query: str) -> Optional[dict[str, Any]]:
        """Filter by the owning connection or LAG, or look up one interface.

        ``query`` is a bare connection or LAG ID (dxcon-..., dxlag-...) or an
        ARN. A dxcon or dxlag ARN filters on ``connectionId``; a dxvif ARN
        selects that interface by ``virtualInterfaceId``.
        """
        if not query.startswith("arn:"):
            if not query:
                raise ParseError("empty connection id")
            return {"connectionId": query}

        arn = parse_arn(query)
        if not arn.account_id or scope_from_arn(arn) != scope:
            raise NoScopeError(f"ARN {query!r} is not in scope {scope!r}")
        key = _ARN_FILTER_KEYS.get(arn.resource_type)
        if key is None:
            raise ParseError(f"unsupported resource type {arn.resource_type!r} in ARN {query!r}")
        return {key: arn.resource_id}
