"""Canonical law firm."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from lawdir.domain.model.entity import Entity, utcnow

if TYPE_CHECKING:
    from datetime import datetime


@dataclass(eq=False, kw_only=True)
class Firm(Entity):
    """A firm deduplicated by normalized address, or by name within a city."""

    name: str
    slug: str
    address: str | None = None
    normalized_address: str | None = None
    state: str | None = None
    city: str | None = None
    phone: str | None = None
    email: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def backfill(self, **values: str | None) -> tuple[str, ...]:
        """Copy ``values`` into fields that are currently empty.

        Returns the names of the fields that changed; populated fields are left alone.
        """
        changed: list[str] = []
        for name, value in values.items():
            if value is None or getattr(self, name) is not None:
                continue
            setattr(self, name, value)
            changed.append(name)
        if changed:
            self.updated_at = utcnow()
        return tuple(changed)
