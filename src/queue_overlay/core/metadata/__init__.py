from .catalog import (
    PropertyDefinition,
    PropertyMetadataCatalog,
    default_catalog,
    load_catalog,
)

__all__ = [
    "PropertyDefinition",
    "PropertyMetadataCatalog",
    "default_catalog",
    "load_catalog",
]
