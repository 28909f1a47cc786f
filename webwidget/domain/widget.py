from __future__ import annotations

from dataclasses import asdict, dataclass, replace


@dataclass
class Widget:
    """Snapshot of one Widget row. id is assigned by the database on insert."""

    id: int = 0
    name: str = ""
    description: str | None = None
    cost: float = 0.0
    location: str | None = None

    def with_id(self, new_id: int) -> "Widget":
        return replace(self, id=int(new_id))

    def to_dict(self) -> dict:
        return asdict(self)
