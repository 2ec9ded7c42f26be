"""ARN parsing.

Format: arn:<partition>:<service>:<region>:<account>:<resource>

The resource part may contain further ':' or '/' separators, e.g.
``dxcon/dxcon-fg5678gh`` or ``secret:prod/db-AbCdEf``. Region and account are
empty for global resources (``arn:aws:iam::123456789012:role/x`` has no
region, ``arn:aws:s3:::bucket`` has neither).
"""

from __future__ import annotations

from dataclasses import dataclass

from graphsource.errors import ParseError

_PREFIX = "arn"
_SECTIONS = 6


@dataclass(frozen=True)
class ARN:
    partition: str
    service: str
    region: str
    account_id: str
    resource: str

    @property
    def resource_type(self) -> str:
        """Part of the resource before the first '/' or ':' (may be empty)."""
        return self._split_resource()[0]

    @property
    def resource_id(self) -> str:
        """Part of the resource after the first '/' or ':'."""
        return self._split_resource()[1]

    def _split_resource(self) -> tuple[str, str]:
        for i, ch in enumerate(self.resource):
            if ch in "/:":
                return self.resource[:i], self.resource[i + 1 :]
        return "", self.resource

    def __str__(self) -> str:
        return ":".join((
            _PREFIX, self.partition, self.service,
            self.region, self.account_id, self.resource,
        ))


def parse_arn(value: str) -> ARN:
    """Parse an ARN string, raising ParseError when it is malformed."""
    if not isinstance(value, str):
        raise ParseError(f"ARN must be a string, got {type(value).__name__}")

    sections = value.split(":", _SECTIONS - 1)
    if len(sections) != _SECTIONS:
        raise ParseError(f"ARN has {len(sections)} sections, expected {_SECTIONS}: {value!r}")
    if sections[0] != _PREFIX:
        raise ParseError(f"ARN has unrecognised prefix {sections[0]!r}: {value!r}")

    _, partition, service, region, account_id, resource = sections
    if not partition:
        raise ParseError(f"ARN has empty partition: {value!r}")
    if not service:
        raise ParseError(f"ARN has empty service: {value!r}")
    if not resource:
        raise ParseError(f"ARN has empty resource: {value!r}")

    return ARN(
        partition=partition,
        service=service,
        region=region,
        account_id=account_id,
        resource=resource,
    )
