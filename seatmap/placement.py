from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Optional

from loguru import logger

from .geometry import Bounds, Point
from .schemas import Seat, Section, index_by_name
from .shapes import VenueLayout


def section_key(section_name: str, by_name: dict[str, Section]) -> str:
    """Layout key for a seat's section name; unknown names fall back to the lowercased name."""
    sec = by_name.get(section_name)
    return sec.id if sec is not None else section_name.lower()


def _as_int(label: str) -> Optional[int]:
    # ASCII digits only; int() also takes underscores, padding and other scripts.
    if not (label.isascii() and label.lstrip("+-").isdigit()):
        return None
    try:
        return int(label)
    except ValueError:
        return None


def order_rows(labels: Iterable[str]) -> list[str]:
    """Numeric order when every label is an integer, lexicographic otherwise."""
    labels = list(labels)
    if labels and all(_as_int(label) is not None for label in labels):
        return sorted(labels, key=int)
    return sorted(labels)


def _seat_number_key(seat: Seat) -> tuple:
    n = _as_int(seat.number)
    return (0, n, "") if n is not None else (1, 0, seat.number)


@dataclass
class SectionRows:
    """Seats of one section bucketed by row, both axes in display order."""

    key: str
    rows: list[str] = field(default_factory=list)
    seats_by_row: dict[str, list[Seat]] = field(default_factory=dict)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return max([1, *(len(s) for s in self.seats_by_row.values())])


def group_rows(seats: Iterable[Seat], sections: list[Section]) -> dict[str, SectionRows]:
    by_name = index_by_name(sections)
    buckets: dict[str, dict[str, list[Seat]]] = {}
    for seat in seats:
        key = section_key(seat.section, by_name)
        buckets.setdefault(key, {}).setdefault(seat.row, []).append(seat)

    out: dict[str, SectionRows] = {}
    for key, by_row in buckets.items():
        rows = order_rows(by_row.keys())
        out[key] = SectionRows(
            key=key,
            rows=rows,
            seats_by_row={row: sorted(by_row[row], key=_seat_number_key) for row in rows},
        )
    return out


def place_seats(seats: Iterable[Seat], layout: VenueLayout, sections: list[Section]) -> dict[str, Point]:
    """
    One position per seat.

    Rectangular sections: cell centers of a rows x columns grid over the section
    bounds. Polar sections: rows step outward between the inner and outer
    ellipse, seats step across the wedge's angle range. Seats whose section has
    no shape in the layout are left out.
    """
    out: dict[str, Point] = {}
    for key, group in group_rows(seats, sections).items():
        shape = layout.get(key)
        if shape is None:
            logger.debug("no shape for section key {!r}; {} rows not placed", key, group.row_count)
            continue
        n_rows = group.row_count
        n_cols = group.column_count

        if shape.polar is not None:
            polar = shape.polar
            for i, row in enumerate(group.rows):
                t_row = (i + 0.5) / n_rows
                for j, seat in enumerate(group.seats_by_row[row]):
                    out[seat.id] = polar.point_at(t_row, (j + 0.5) / n_cols)
        else:
            b = shape.bounds
            cell_w = b.width / n_cols
            cell_h = b.height / n_rows
            for i, row in enumerate(group.rows):
                for j, seat in enumerate(group.seats_by_row[row]):
                    out[seat.id] = Point(b.x + (j + 0.5) * cell_w, b.y + (i + 0.5) * cell_h)
    return out


MIN_POLAR_CELL = 8.0


def seat_cell_bounds(seats: Iterable[Seat], layout: VenueLayout, sections: list[Section]) -> dict[str, Bounds]:
    """Per-seat rectangle: the grid cell, or for polar sections a cell centered on the seat."""
    out: dict[str, Bounds] = {}
    for key, group in group_rows(seats, sections).items():
        shape = layout.get(key)
        if shape is None:
            continue
        n_rows = group.row_count
        n_cols = group.column_count

        if shape.polar is not None:
            polar = shape.polar
            rx_mid = (polar.inner_radius_x + polar.outer_radius_x) / 2
            cell_w = max(MIN_POLAR_CELL, math.radians(polar.span / n_cols) * rx_mid)
            cell_h = max(MIN_POLAR_CELL, (polar.outer_radius_y - polar.inner_radius_y) / n_rows)
            for i, row in enumerate(group.rows):
                t_row = (i + 0.5) / n_rows
                for j, seat in enumerate(group.seats_by_row[row]):
                    pt = polar.point_at(t_row, (j + 0.5) / n_cols)
                    out[seat.id] = Bounds(pt.x - cell_w / 2, pt.y - cell_h / 2, cell_w, cell_h)
        else:
            b = shape.bounds
            cell_w = b.width / n_cols
            cell_h = b.height / n_rows
            for i, row in enumerate(group.rows):
                for j, seat in enumerate(group.seats_by_row[row]):
                    out[seat.id] = Bounds(b.x + j * cell_w, b.y + i * cell_h, cell_w, cell_h)
    return out
