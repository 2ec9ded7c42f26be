"""Source registry: item type -> source class."""

from __future__ import annotations

import importlib
from typing import Any, Optional

from graphsource.base_source import DescribeOnlySource
from graphsource.config import AwsConfig, RateLimitConfig
from graphsource.limiter import LimitBucket


SOURCE_REGISTRY: dict[str, tuple[str, str]] = {
    # item type -> (module_path, class_name)
    "directconnect-connection": ("graphsource.sources.directconnect_connection", "DirectConnectConnectionSource"),
    "directconnect-lag": ("graphsource.sources.directconnect_lag", "DirectConnectLagSource"),
    "directconnect-virtual-interface": ("graphsource.sources.directconnect_virtual_interface", "DirectConnectVirtualInterfaceSource"),
}


def new_limiter(config: RateLimitConfig) -> LimitBucket:
    """Build the LimitBucket shared by every source of one account."""
    return LimitBucket(
        max_capacity=config.max_capacity,
        refill_rate=config.refill_rate,
        max_in_flight=config.max_in_flight,
    )


def source_class(item_type: str) -> type[DescribeOnlySource]:
    entry = SOURCE_REGISTRY.get(item_type)
    if not entry:
        raise KeyError(f"unknown item type: {item_type}")
    module_path, class_name = entry
    module = importlib.import_module(module_path)
    return getattr(module, class_name)


def build_source(
    item_type: str,
    config: AwsConfig,
    limiter: LimitBucket,
    client: Optional[Any] = None,
) -> DescribeOnlySource:
    """Instantiate a source by item type.

    With ``client`` given, it is used as-is; otherwise a boto3 client is
    built from ``config``.
    """
    cls = source_class(item_type)
    if client is not None:
        return cls(config.account_id, config.region, limiter, client=client)
    return cls.from_config(config, limiter)
