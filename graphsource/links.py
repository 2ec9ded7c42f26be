"""Declarative link rules: how a record field becomes a linked item query."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Union

from graphsource.arn import parse_arn
from graphsource.errors import ParseError
from graphsource.items import BlastPropagation, LinkedItemQuery, Query, QueryMethod
from graphsource.scope import scope_from_arn

logger = logging.getLogger("graphsource.links")

Extractor = Callable[[Mapping[str, Any]], Iterable[Any]]


def each(list_field: str, key: str) -> Extractor:
    """Extractor for ``record[list_field][*][key]``."""

    def extract(record: Mapping[str, Any]) -> Iterable[Any]:
        for entry in record.get(list_field) or []:
            if isinstance(entry, Mapping):
                yield entry.get(key)

    extract.__name__ = f"{list_field}[].{key}"
    return extract


@dataclass(frozen=True)
class LinkRule:
    """One relationship from a resource type to another.

    ``source`` is a record field name or an Extractor yielding candidate
    values; empty values produce no link. With ``scope_from_arn`` each value
    is parsed as an ARN and the link is scoped to the ARN's account and
    region; values that do not parse are dropped without failing the item.
    """

    item_type: str
    method: QueryMethod
    source: Union[str, Extractor]
    blast: BlastPropagation
    scope_from_arn: bool = False

    @property
    def field_name(self) -> str:
        if isinstance(self.source, str):
            return self.source
        return getattr(self.source, "__name__", repr(self.source))

    def _values(self, record: Mapping[str, Any]) -> Iterable[Any]:
        if isinstance(self.source, str):
            return [record.get(self.source)]
        return self.source(record)

    def evaluate(self, record: Mapping[str, Any], scope: str) -> list[LinkedItemQuery]:
        links: list[LinkedItemQuery] = []
        for value in self._values(record):
            if value is None or value == "":
                continue
            value = str(value)

            link_scope = scope
            if self.scope_from_arn:
                try:
                    link_scope = scope_from_arn(parse_arn(value))
                except (ParseError, ValueError) as exc:
                    logger.debug(
                        "Skipping %s link from %s: %s",
                        self.item_type, self.field_name, exc,
                    )
                    continue

            links.append(LinkedItemQuery(
                query=Query(
                    type=self.item_type,
                    method=self.method,
                    query=value,
                    scope=link_scope,
                ),
                blast_propagation=self.blast,
            ))
        return links
