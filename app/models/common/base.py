"""Base entity class for all domain entities."""

from collections.abc import Sequence
from dataclasses import asdict, dataclass, fields
from typing import Any


@dataclass
class BaseEntity:
    """Base class for all entities."""

    def to_dict(self) -> dict[str, Any]:
        """Convert entity to dictionary."""
        return asdict(self)

    @classmethod
    def from_row(cls, row: Sequence[Any]):
        """Build entity from a DB row (leading fields, declaration order)."""
        names = [f.name for f in fields(cls)]
        return cls(**dict(zip(names, row)))
