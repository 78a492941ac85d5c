"""
Core module - content models, errors and shared utilities.

This module contains:
- models: Content model (ContentNode, ContentField, Block, Layout, Translation)
- errors: Error taxonomy raised by the translation engine
- utils: Shared utility functions
"""

from machine_translation.core.models import (
    ContentNode,
    ContentField,
    Block,
    LayoutColumn,
    Layout,
    Translation,
)

from machine_translation.core.errors import (
    TranslationError,
    ConfigurationError,
    ProviderError,
    NestingDepthError,
)

from machine_translation.core.utils import (
    generate_id,
    is_empty,
)

__all__ = [
    # Models
    "ContentNode",
    "ContentField",
    "Block",
    "LayoutColumn",
    "Layout",
    "Translation",
    # Errors
    "TranslationError",
    "ConfigurationError",
    "ProviderError",
    "NestingDepthError",
    # Utils
    "generate_id",
    "is_empty",
]
