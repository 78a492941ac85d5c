"""
Shared utility functions for machine translation.

This module contains common utilities used across the codebase.
"""

from __future__ import annotations

import uuid
from typing import Any


def generate_id() -> str:
    """
    Generate a fresh identifier for blocks, layouts and columns.
    
    Returns:
        A random UUID4 string like "1b2c8f2e-6f3a-4c43-9d7a-1f0c7e5a2b11"
    """
    return str(uuid.uuid4())


def is_empty(value: Any) -> bool:
    """
    Check whether a field value carries nothing to translate.
    
    None, blank strings and empty collections are empty. Numbers and
    booleans never are.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict)):
        return len(value) == 0
    return False
