"""Scope strings: the isolation key items are unique within."""

from __future__ import annotations

from graphsource.arn import ARN


def format_scope(account_id: str, region: str = "") -> str:
    """Return ``account.region``, or just the account for global resources."""
    if not account_id:
        raise ValueError("account_id is required to build a scope")
    if not region:
        return account_id
    return f"{account_id}.{region}"


def scope_from_arn(arn: ARN) -> str:
    return format_scope(arn.account_id, arn.region)


def parse_scope(scope: str) -> tuple[str, str]:
    """Split a scope back into (account_id, region). Region may be ''."""
    if not scope:
        raise ValueError("scope is empty")
    account_id, _, region = scope.partition(".")
    if not account_id:
        raise ValueError(f"scope has no account: {scope!r}")
    return account_id, region
