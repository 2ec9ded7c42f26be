"""Graph item data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class QueryMethod(str, Enum):
    GET = "GET"
    LIST = "LIST"
    SEARCH = "SEARCH"


@dataclass(frozen=True)
class BlastPropagation:
    """Which way a change travels along a link.

    ``in_``: a change to the linked item can affect this item.
    ``out``: a change to this item can affect the linked item.
    """

    in_: bool
    out: bool

    def to_dict(self) -> dict[str, bool]:
        return {"in": self.in_, "out": self.out}


@dataclass(frozen=True)
class Query:
    type: str
    method: QueryMethod
    query: str
    scope: str

    def to_dict(self) -> dict[str, str]:
        return {
            "type": self.type,
            "method": self.method.value,
            "query": self.query,
            "scope": self.scope,
        }


@dataclass(frozen=True)
class LinkedItemQuery:
    query: Query
    blast_propagation: BlastPropagation

    def to_dict(self) -> dict[str, Any]:
        return {
            "query": self.query.to_dict(),
            "blastPropagation": self.blast_propagation.to_dict(),
        }


@dataclass
class Item:
    """One node of the graph, built from a single provider record."""

    type: str
    unique_attribute: str
    attributes: dict[str, Any]
    scope: str
    tags: dict[str, str] = field(default_factory=dict)
    linked_item_queries: list[LinkedItemQuery] = field(default_factory=list)

    @property
    def unique_attribute_value(self) -> Any:
        return self.attributes.get(self.unique_attribute)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "uniqueAttribute": self.unique_attribute,
            "attributes": self.attributes,
            "scope": self.scope,
            "tags": self.tags,
            "linkedItemQueries": [q.to_dict() for q in self.linked_item_queries],
        }
