from __future__ import annotations

import uuid
from dataclasses import dataclass, replace

NAME_MAX_LENGTH = 256


@dataclass(frozen=True)
class Anime:
    id: uuid.UUID | None = None
    name: str | None = None

    def with_id(self, id: uuid.UUID | None) -> Anime:  # noqa: A002
        return replace(self, id=id)

    def with_name(self, name: str | None) -> Anime:
        return replace(self, name=name)


def validate_anime(anime: Anime) -> list[str]:
    """Return violated-field messages in check order; empty means valid."""
    violations: list[str] = []
    if anime.name is None or anime.name == "":
        violations.append("name cannot be empty")
    elif len(anime.name) > NAME_MAX_LENGTH:
        violations.append(f"name must be at most {NAME_MAX_LENGTH} characters")
    return violations
