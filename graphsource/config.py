"""Configuration via environment variables.

Supports:
  - Environment variables (local dev, Lambda)
  - .env files via python-dotenv
  - IAM roles / profiles for credentials (no keys in config)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

import boto3
from dotenv import load_dotenv

logger = logging.getLogger("graphsource.config")


@dataclass(frozen=True)
class AwsConfig:
    region: str = "us-east-1"
    account_id: str = ""  # empty = resolve via STS
    profile: Optional[str] = None  # None = default credential chain


@dataclass(frozen=True)
class RateLimitConfig:
    max_capacity: int = 50
    refill_rate: float = 20.0  # tokens per second
    max_in_flight: int = 10


@dataclass(frozen=True)
class SourceConfig:
    aws: AwsConfig = field(default_factory=AwsConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    log_level: str = "INFO"


def _positive_int(name: str, default: int) -> int:
    val = int(os.environ.get(name, str(default)))
    if val < 1:
        raise ValueError(f"{name} must be a positive integer, got {val}")
    return val


def _positive_float(name: str, default: float) -> float:
    val = float(os.environ.get(name, str(default)))
    if val <= 0:
        raise ValueError(f"{name} must be positive, got {val}")
    return val


def load_config() -> SourceConfig:
    """Load configuration from environment variables (and a .env file)."""
    load_dotenv()

    aws = AwsConfig(
        region=os.environ.get("AWS_REGION", "us-east-1"),
        account_id=os.environ.get("AWS_ACCOUNT_ID", ""),
        profile=os.environ.get("AWS_PROFILE") or None,
    )

    rate_limit = RateLimitConfig(
        max_capacity=_positive_int("GRAPHSOURCE_RATE_CAPACITY", 50),
        refill_rate=_positive_float("GRAPHSOURCE_RATE_REFILL", 20.0),
        max_in_flight=_positive_int("GRAPHSOURCE_MAX_IN_FLIGHT", 10),
    )

    return SourceConfig(
        aws=aws,
        rate_limit=rate_limit,
        log_level=os.environ.get("GRAPHSOURCE_LOG_LEVEL", "INFO"),
    )


def resolve_account_id(aws: AwsConfig) -> AwsConfig:
    """Fill in the account id from STS when it was not configured."""
    if aws.account_id:
        return aws
    session = boto3.Session(profile_name=aws.profile)
    identity = session.client("sts", region_name=aws.region).get_caller_identity()
    logger.info("Resolved AWS account %s via STS", identity["Account"])
    return AwsConfig(region=aws.region, account_id=identity["Account"], profile=aws.profile)
