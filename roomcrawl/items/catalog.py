"""Item definitions and the catalog handed to the level generator.

An ``ItemDefinition`` is the immutable description (weight, use flags,
consume effects, key type); an ``Item`` is one instance lying on a room floor
or sitting in an inventory.

The catalog is built from plain records (``ItemCatalog.from_records``) so it
can be fed from JSON, a database row dump or the built-in
``DEFAULT_ITEM_RECORDS``.
"""
from __future__ import annotations

import enum
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

STAT_CAP = 100


class ItemUseFlags(enum.IntFlag):
    NONE = 0
    CONSUME = 1
    KEY = 2


@dataclass(frozen=True)
class ConsumeEffects:
    health: int = 0
    mana: int = 0
    carry_weight: int = 0
    armor: int = 0
    max_health: int = 0
    max_mana: int = 0


def _slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


@dataclass(frozen=True)
class ItemDefinition:
    name: str
    weight: int = 1
    damage: int = 0
    armor: int = 0
    num_uses: int = 0
    uses: ItemUseFlags = ItemUseFlags.NONE
    on_consume: ConsumeEffects = field(default_factory=ConsumeEffects)
    key_type: Optional[str] = None
    slug: str = ""

    def __post_init__(self):
        if not self.slug:
            object.__setattr__(self, "slug", _slugify(self.name))
        if self.weight < 0:
            raise ValueError(f"{self.name}: weight must be >= 0")

    @property
    def consumable(self) -> bool:
        return bool(self.uses & ItemUseFlags.CONSUME)

    @property
    def is_key(self) -> bool:
        return bool(self.uses & ItemUseFlags.KEY)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slug": self.slug,
            "name": self.name,
            "weight": self.weight,
            "is_key": self.is_key,
            "consumable": self.consumable,
            "key_type": self.key_type,
        }


def _clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(value, hi))


class Item:
    """An item instance; position is only meaningful while it lies in a room."""

    def __init__(self, definition: ItemDefinition, x: float = 0.0, y: float = 0.0):
        self.definition = definition
        self.uses_remaining = definition.num_uses
        self.x = x
        self.y = y

    def __repr__(self) -> str:
        return f"Item({self.definition.slug!r}, x={self.x:.2f}, y={self.y:.2f})"

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def consume(self, target) -> bool:
        """Apply consume effects to ``target`` (a Player). Returns True if used."""
        if self.uses_remaining <= 0 or not self.definition.consumable:
            return False
        fx = self.definition.on_consume
        target.max_health = _clamp(target.max_health + fx.max_health, 0, STAT_CAP)
        target.max_mana = _clamp(target.max_mana + fx.max_mana, 0, STAT_CAP)
        target.health = _clamp(target.health + fx.health, 0, target.max_health)
        target.mana = _clamp(target.mana + fx.mana, 0, target.max_mana)
        target.carry_weight = _clamp(target.carry_weight + fx.carry_weight, 0, STAT_CAP)
        target.armor = _clamp(target.armor + fx.armor, 0, STAT_CAP)
        self.uses_remaining -= 1
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slug": self.definition.slug,
            "name": self.definition.name,
            "x": round(self.x, 3),
            "y": round(self.y, 3),
            "is_key": self.definition.is_key,
        }


class ItemCatalog:
    """Immutable, ordered collection of item definitions."""

    def __init__(self, definitions: Iterable[ItemDefinition]):
        self._definitions: Tuple[ItemDefinition, ...] = tuple(definitions)
        slugs = [d.slug for d in self._definitions]
        if len(set(slugs)) != len(slugs):
            raise ValueError("duplicate item slug in catalog")
        self._by_slug = {d.slug: d for d in self._definitions}

    @classmethod
    def from_records(cls, records: Iterable[Dict[str, Any]]) -> "ItemCatalog":
        defs = []
        for rec in records:
            rec = dict(rec)
            uses = ItemUseFlags.NONE
            consume = rec.pop("consume", None)
            key_type = rec.pop("key", None)
            if consume is not None:
                uses |= ItemUseFlags.CONSUME
            if key_type is not None:
                uses |= ItemUseFlags.KEY
            defs.append(
                ItemDefinition(
                    name=rec["name"],
                    weight=int(rec.get("weight", 1)),
                    damage=int(rec.get("damage", 0)),
                    armor=int(rec.get("armor", 0)),
                    num_uses=int(rec.get("num_uses", 1 if consume is not None else 0)),
                    uses=uses,
                    on_consume=ConsumeEffects(**(consume or {})),
                    key_type=key_type,
                    slug=rec.get("slug", ""),
                )
            )
        return cls(defs)

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self) -> Iterator[ItemDefinition]:
        return iter(self._definitions)

    def __getitem__(self, index: int) -> ItemDefinition:
        return self._definitions[index]

    def get(self, slug: str) -> Optional[ItemDefinition]:
        return self._by_slug.get(slug)

    @property
    def keys(self) -> List[ItemDefinition]:
        return [d for d in self._definitions if d.is_key]

    @property
    def non_keys(self) -> List[ItemDefinition]:
        return [d for d in self._definitions if not d.is_key]


DEFAULT_ITEM_RECORDS: Tuple[Dict[str, Any], ...] = (
    {"name": "Health potion", "weight": 1, "consume": {"health": 5}},
    {"name": "Mana potion", "weight": 1, "consume": {"mana": 5}},
    {"name": "Armor potion", "weight": 1, "consume": {"armor": 2}},
    {"name": "Strength potion", "weight": 1, "consume": {"carry_weight": 5}},
    {"name": "Vitality elixir", "weight": 2, "consume": {"max_health": 5, "health": 5}},
    {"name": "Short sword", "weight": 3, "damage": 3},
    {"name": "Dagger", "weight": 2, "damage": 2},
    {"name": "Leather cap", "weight": 2, "armor": 1},
    {"name": "Bronze key", "weight": 1, "key": "bronze"},
    {"name": "Silver key", "weight": 1, "key": "silver"},
    {"name": "Gold key", "weight": 1, "key": "gold"},
    {"name": "Bone key", "weight": 1, "key": "bone"},
)


def default_catalog() -> ItemCatalog:
    return ItemCatalog.from_records(DEFAULT_ITEM_RECORDS)


__all__ = [
    "ItemUseFlags",
    "ConsumeEffects",
    "ItemDefinition",
    "Item",
    "ItemCatalog",
    "DEFAULT_ITEM_RECORDS",
    "default_catalog",
]
