"""
Error taxonomy for machine translation.

Every failure that aborts a translation request derives from
TranslationError. Pass-through cases (unknown field types, disabled
translation, empty values) are not errors and never raise.
"""

from __future__ import annotations


class TranslationError(Exception):
    """Base class for translation failures."""
    pass


class ConfigurationError(TranslationError):
    """Raised when the provider credential is missing or unusable."""
    pass


class ProviderError(TranslationError):
    """Raised when the provider responds without a usable payload."""
    
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NestingDepthError(TranslationError):
    """Raised when a content tree nests deeper than the configured limit."""
    
    def __init__(self, max_depth: int):
        super().__init__(f"Content nesting exceeds the maximum depth of {max_depth}")
        self.max_depth = max_depth
