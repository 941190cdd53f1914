"""Row-level geometry for zoomed views: row dividers, row entrance paths and row labels."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from .geometry import Bounds, ellipse_point, line_path, arc_path
from .placement import SectionRows, group_rows
from .schemas import Seat, Section
from .shapes import SectionShape, VenueLayout

# Rectangular row labels sit this far inside the section's left edge.
ROW_LABEL_INSET = 8.0
# Polar row labels sit this many degrees past the wedge start.
ROW_LABEL_ANGLE_OFFSET = 3.0


@dataclass(frozen=True)
class RowGrid:
    section_id: str
    bounds: Bounds
    row_boundary_ys: tuple[float, ...]

    def to_dict(self) -> dict:
        return {
            "sectionId": self.section_id,
            "bounds": self.bounds.to_dict(),
            "rowBoundaryYs": list(self.row_boundary_ys),
        }


@dataclass(frozen=True)
class RowEntrance:
    section_id: str
    row: str
    path: str

    def to_dict(self) -> dict:
        return {"sectionId": self.section_id, "row": self.row, "path": self.path}


@dataclass(frozen=True)
class RowLabel:
    section_id: str
    row: str
    x: float
    y: float

    def to_dict(self) -> dict:
        return {"sectionId": self.section_id, "row": self.row, "x": self.x, "y": self.y}


def _multi_row_sections(
    seats: Iterable[Seat], layout: VenueLayout, sections: list[Section]
) -> Iterator[tuple[str, SectionShape, SectionRows]]:
    for key, group in group_rows(seats, sections).items():
        shape = layout.get(key)
        if shape is None or group.row_count < 2:
            continue
        yield key, shape, group


def row_grids(seats: Iterable[Seat], layout: VenueLayout, sections: list[Section]) -> list[RowGrid]:
    """Interior row dividers of rectangular sections; curved sections use entrance arcs instead."""
    out = []
    for key, shape, group in _multi_row_sections(seats, layout, sections):
        if shape.polar is not None:
            continue
        b = shape.bounds
        cell_h = b.height / group.row_count
        ys = tuple(b.y + i * cell_h for i in range(1, group.row_count))
        out.append(RowGrid(section_id=key, bounds=b, row_boundary_ys=ys))
    return out


def row_entrances(seats: Iterable[Seat], layout: VenueLayout, sections: list[Section]) -> list[RowEntrance]:
    out = []
    for key, shape, group in _multi_row_sections(seats, layout, sections):
        n = group.row_count
        if shape.polar is not None:
            polar = shape.polar
            for i, row in enumerate(group.rows):
                rx, ry = polar.radii_at(i / n)
                path = arc_path(polar.center, rx, ry, polar.start_angle, polar.end_angle)
                out.append(RowEntrance(section_id=key, row=row, path=path))
        else:
            b = shape.bounds
            cell_h = b.height / n
            for i, row in enumerate(group.rows):
                y_front = b.y + i * cell_h
                out.append(RowEntrance(section_id=key, row=row, path=line_path(b.x, y_front, b.max_x, y_front)))
    return out


def row_labels(seats: Iterable[Seat], layout: VenueLayout, sections: list[Section]) -> list[RowLabel]:
    out = []
    for key, shape, group in _multi_row_sections(seats, layout, sections):
        n = group.row_count
        if shape.polar is not None:
            polar = shape.polar
            angle = polar.start_angle + ROW_LABEL_ANGLE_OFFSET
            for i, row in enumerate(group.rows):
                rx, ry = polar.radii_at((i + 0.5) / n)
                pt = ellipse_point(polar.center, rx, ry, angle)
                out.append(RowLabel(section_id=key, row=row, x=pt.x, y=pt.y))
        else:
            b = shape.bounds
            cell_h = b.height / n
            for i, row in enumerate(group.rows):
                out.append(RowLabel(section_id=key, row=row, x=b.x + ROW_LABEL_INSET, y=b.y + (i + 0.5) * cell_h))
    return out
