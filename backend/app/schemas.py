from __future__ import annotations

from pydantic import BaseModel, Field

from seatmap.schemas import Section


class SvgLayoutRequest(BaseModel):
    """Sections of an event plus the venue's SVG map document."""

    sections: list[Section] = Field(default_factory=list)
    svg: str = Field(min_length=1)


class ViewBoxOut(BaseModel):
    minX: float
    minY: float
    width: float
    height: float


class LayoutOut(BaseModel):
    venueId: str
    viewBox: ViewBoxOut
    layout: dict[str, dict]


class ZoomOut(BaseModel):
    scale: float
    zoom: int
