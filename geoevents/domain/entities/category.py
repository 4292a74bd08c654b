"""Domain entity representing an event category."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Category:
    id: int | None
    name: str
    description: str | None = None


__all__ = ["Category"]
