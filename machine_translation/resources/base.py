"""
Base class for resources.

Resources are schema data the translator consumes. They're loaded from
YAML files (the CMS's blueprint format) and are immutable once loaded.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import yaml


class Resource(ABC):
    """
    Base class for all resources.
    
    Resources are data objects that can be:
    - Loaded from YAML files
    - Serialized back to the same shape
    - Referenced by ID
    
    Examples:
        - Page blueprints
    """
    
    @property
    @abstractmethod
    def resource_id(self) -> str:
        """Unique identifier for this resource."""
        pass
    
    @property
    def resource_type(self) -> str:
        """Type of resource (blueprint, ...)."""
        return self.__class__.__name__.lower()
    
    @classmethod
    @abstractmethod
    def from_dict(cls, data: dict[str, Any]) -> Resource:
        """Create a resource from a dictionary."""
        pass
    
    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary."""
        pass
    
    @classmethod
    def from_yaml(cls, path: Path | str) -> Resource:
        """Load a resource from a YAML file."""
        path = Path(path)
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls.from_dict(data)
    
    def to_yaml(self, path: Path | str) -> None:
        """Save to a YAML file."""
        path = Path(path)
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.to_dict(), f, default_flow_style=False, sort_keys=False, allow_unicode=True)
    
    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.resource_id})>"
