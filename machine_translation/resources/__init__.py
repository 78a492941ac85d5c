"""
Resources - schema data loaded from YAML.

- Blueprints: field types, translate flags, subfields and fieldsets
"""

from machine_translation.resources.base import Resource
from machine_translation.resources.blueprint import (
    Blueprint,
    BlueprintField,
    Fieldset,
    Fieldsets,
    FieldKind,
    DEFAULT_FIELDSETS,
    resolve_kind,
)

__all__ = [
    "Resource",
    "Blueprint",
    "BlueprintField",
    "Fieldset",
    "Fieldsets",
    "FieldKind",
    "DEFAULT_FIELDSETS",
    "resolve_kind",
]
