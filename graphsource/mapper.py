"""Record -> Item mapping."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Sequence

from graphsource.attributes import tags_to_map, to_attributes
from graphsource.errors import AttributeProjectionError
from graphsource.items import Item
from graphsource.links import LinkRule


class ItemMapper:
    """Maps provider records of one resource type into items.

    Stateless: the output for a record depends only on the record and the
    scope passed in.
    """

    def __init__(
        self,
        item_type: str,
        unique_attribute: str,
        attribute_fields: Optional[Sequence[str]] = None,
        link_rules: Sequence[LinkRule] = (),
        tags_field: str = "tags",
    ) -> None:
        self.item_type = item_type
        self.unique_attribute = unique_attribute
        self.attribute_fields = tuple(attribute_fields) if attribute_fields is not None else None
        self.link_rules = tuple(link_rules)
        self.tags_field = tags_field

    def map(self, record: Mapping[str, Any], scope: str) -> Item:
        attributes = to_attributes(record, self.attribute_fields, exclude=(self.tags_field,))

        unique = attributes.get(self.unique_attribute)
        if unique is None or unique == "":
            raise AttributeProjectionError(
                f"record has no value for unique attribute {self.unique_attribute!r}",
                item_type=self.item_type,
                scope=scope,
            )

        item = Item(
            type=self.item_type,
            unique_attribute=self.unique_attribute,
            attributes=attributes,
            scope=scope,
            tags=tags_to_map(record.get(self.tags_field)),
        )
        for rule in self.link_rules:
            item.linked_item_queries.extend(rule.evaluate(record, scope))
        return item

    def map_all(self, records: Iterable[Mapping[str, Any]], scope: str) -> list[Item]:
        """Map a batch. Any projection error fails the whole batch."""
        items = []
        for record in records:
            try:
                items.append(self.map(record, scope))
            except AttributeProjectionError as exc:
                raise exc.with_context(item_type=self.item_type, scope=scope)
        return items
