from __future__ import annotations

import math
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel


class CatalogError(Exception):
    pass


class Tier(str, Enum):
    floor = "floor"
    lower = "lower"
    upper = "upper"
    top = "top"


class Section(BaseModel):
    """A sellable section as supplied by the section catalog."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, coerce_numbers_to_str=True)

    id: str
    name: str
    tier: Tier
    # Not validated: price_min > price_max is the caller's problem.
    price_min: float = Field(default=0.0, alias="priceMin")
    price_max: float = Field(default=0.0, alias="priceMax")
    order: int = 0


class Seat(BaseModel):
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    id: str
    # Section *name*, not id.
    section: str
    row: str
    number: str


class Catalog(BaseModel):
    sections: list[Section] = Field(default_factory=list)
    seats: list[Seat] = Field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "Catalog":
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise CatalogError(f"invalid catalog data: {e}") from e


# ---------------------------------------------------------------------------
# Venue schematic (stage, floor, bowl rings and walkways described as data)
# ---------------------------------------------------------------------------


class _SchematicModel(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class SchematicPoint(_SchematicModel):
    x: float
    y: float


class SchematicRect(_SchematicModel):
    type: Literal["rect"] = "rect"
    x: float
    y: float
    width: float
    height: float
    label: Optional[str] = None
    sections: list[str] = Field(default_factory=list)
    z_index: Optional[int] = None


class SchematicRing(_SchematicModel):
    id: str
    type: Optional[Literal["walkway"]] = None
    level: Optional[str] = None
    inner_radius: SchematicPoint
    outer_radius: SchematicPoint
    section_count: int = 0
    section_start: int = 1
    interactive: bool = True


class VenueSchematic(_SchematicModel):
    venue: str
    version: str
    view_box: str = "0 0 1000 1000"
    center: SchematicPoint
    stage: SchematicRect
    floor: Optional[SchematicRect] = None
    rings: list[SchematicRing] = Field(default_factory=list)
    chase_bridge: Optional[SchematicRect] = None

    def view_box_size(self) -> tuple[float, float]:
        """Width and height from a "minX minY W H" view box; 1000 for anything unreadable."""
        parts = self.view_box.split()
        size = []
        for idx in (2, 3):
            try:
                value = float(parts[idx])
            except (IndexError, ValueError):
                value = 1000.0
            size.append(value if math.isfinite(value) else 1000.0)
        return size[0], size[1]


def index_by_name(sections: list[Section]) -> dict[str, Section]:
    """Name -> section; the first section wins when names repeat."""
    out: dict[str, Section] = {}
    for sec in sections:
        out.setdefault(sec.name, sec)
    return out
