from .catalog import (  # noqa: F401
    DEFAULT_ITEM_RECORDS,
    ConsumeEffects,
    Item,
    ItemCatalog,
    ItemDefinition,
    ItemUseFlags,
    default_catalog,
)
