"""Player inventory bounded by the owner's carry weight.

Total weight is the sum of carried definition weights; an item is rejected
when adding it would exceed ``owner.carry_weight``.
"""
from __future__ import annotations

import random
from typing import Iterable, List, Optional

from roomcrawl.items.catalog import Item, ItemCatalog, ItemDefinition


class Inventory:
    def __init__(self, owner=None):
        self.owner = owner
        self.items: List[Item] = []

    def __len__(self) -> int:
        return len(self.items)

    @property
    def weight(self) -> int:
        return sum(item.definition.weight for item in self.items)

    @property
    def capacity(self) -> int:
        return self.owner.carry_weight if self.owner is not None else 0

    def can_carry(self, definition: ItemDefinition) -> bool:
        return self.weight + definition.weight <= self.capacity

    def add_item(self, item: Item) -> bool:
        if not self.can_carry(item.definition):
            return False
        self.items.append(item)
        return True

    def holds(self, definition: ItemDefinition) -> bool:
        return any(item.definition == definition for item in self.items)

    def missing(self, definitions: Iterable[ItemDefinition]) -> List[ItemDefinition]:
        return [d for d in definitions if not self.holds(d)]

    def remove_one(self, definition: ItemDefinition) -> Optional[Item]:
        for idx, item in enumerate(self.items):
            if item.definition == definition:
                return self.items.pop(idx)
        return None

    def add_random_items(self, catalog: ItemCatalog, count: int, rng: Optional[random.Random] = None) -> int:
        """Add up to ``count`` random catalog items, stopping at the first rejection."""
        rng = rng or random.Random()
        if not len(catalog):
            return 0
        added = 0
        for _ in range(count):
            if not self.add_item(Item(rng.choice(list(catalog)))):
                break
            added += 1
        return added

    def to_dict(self) -> dict:
        return {
            "weight": self.weight,
            "capacity": self.capacity,
            "items": [item.definition.slug for item in self.items],
        }


__all__ = ["Inventory"]
