"""Nominal marker base classes for model standardization.

`DomainModel` marks Pydantic-based configuration and persisted models;
`InternalDTO` marks internal dataclass-based value objects.
"""

from __future__ import annotations

from pydantic import BaseModel


class DomainModel(BaseModel):
    """Nominal marker for Pydantic-based domain models."""

    def __repr__(self) -> str:
        """Provide a concise, one-line summary of the object."""
        class_name = self.__class__.__name__
        for attr in ("name", "command"):
            attr_value = getattr(self, attr, None)
            if attr_value is not None:
                return f'<{class_name} {attr}="{attr_value}">'
        return f"<{class_name}>"


class InternalDTO:
    """Nominal marker for internal dataclass DTOs."""
