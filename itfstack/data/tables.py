"""Lookup tables attached to conductor layers.

Each table kind has its own, fixed lookup policy:

- ``LookupTable2D``        width × spacing, snaps to the nearest breakpoint
- ``LookupTable1D``        one axis, linear interpolation
- ``CrtVsSiWidthTable``    width → (CRT1, CRT2), linear interpolation
- ``WidthThicknessTable``  width × thickness, bilinear interpolation
- ``ProcessVariation``     polynomial thickness-variation surface

Every table clamps to its end breakpoints outside the declared range and
returns ``None`` (never raises) when it has no data for the query.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol, Sequence

log = logging.getLogger("itfstack.data.tables")


class LookupTable(Protocol):
    """Anything that can be queried for a single numeric result."""

    @property
    def is_empty(self) -> bool: ...

    def lookup(self, *args: float) -> float | None: ...


# ── Axis helpers ───────────────────────────────────────────────────


def snap_index(axis: Sequence[float], value: float) -> int | None:
    """Index of the breakpoint nearest to *value*.

    Values outside the axis clamp to the first/last breakpoint.  The lower
    breakpoint wins only when it is strictly closer; an exact midpoint
    snaps to the upper one.
    """
    if not axis:
        return None
    if value <= axis[0]:
        return 0
    last = len(axis) - 1
    if value >= axis[last]:
        return last
    for i in range(last):
        if axis[i] <= value <= axis[i + 1]:
            if abs(value - axis[i]) < abs(value - axis[i + 1]):
                return i
            return i + 1
    # Unsorted axis: fall back to a global nearest search.
    return min(range(len(axis)), key=lambda i: abs(value - axis[i]))


def bracket(axis: Sequence[float], value: float) -> tuple[int, int, float] | None:
    """Return ``(lo, hi, t)`` such that value ≈ axis[lo] + t·(axis[hi] − axis[lo]).

    Outside the axis both indices point at the end breakpoint and ``t`` is 0.
    """
    if not axis:
        return None
    if value <= axis[0]:
        return 0, 0, 0.0
    last = len(axis) - 1
    if value >= axis[last]:
        return last, last, 0.0
    for i in range(last):
        lo, hi = axis[i], axis[i + 1]
        if lo <= value <= hi:
            t = (value - lo) / (hi - lo) if hi != lo else 0.0
            return i, i + 1, t
    return None


def _cell(values: Sequence[Sequence[float]], row: int, col: int) -> float | None:
    if row >= len(values) or col >= len(values[row]):
        return None
    return float(values[row][col])


# ── Tables ─────────────────────────────────────────────────────────


@dataclass
class LookupTable2D:
    """Width × spacing table; ``values[spacing_idx][width_idx]``."""

    widths: list[float] = field(default_factory=list)
    spacings: list[float] = field(default_factory=list)
    values: list[list[float]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.widths or not self.spacings or not self.values

    def lookup(self, width: float, spacing: float) -> float | None:
        """Return the cell at the breakpoints nearest to (width, spacing)."""
        if self.is_empty:
            return None
        w_idx = snap_index(self.widths, width)
        s_idx = snap_index(self.spacings, spacing)
        if w_idx is None or s_idx is None:
            return None
        return _cell(self.values, s_idx, w_idx)


@dataclass
class LookupTable1D:
    keys: list[float] = field(default_factory=list)
    values: list[float] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.keys or not self.values

    def lookup(self, key: float) -> float | None:
        """Linear interpolation between the bracketing keys."""
        if self.is_empty:
            return None
        found = bracket(self.keys, key)
        if found is None:
            return None
        lo, hi, t = found
        if hi >= len(self.values):
            return None
        v_lo, v_hi = self.values[lo], self.values[hi]
        return v_lo + t * (v_hi - v_lo)


@dataclass
class CrtVsSiWidthTable:
    """Width-dependent temperature coefficients of resistivity."""

    widths: list[float] = field(default_factory=list)
    crt1_values: list[float] = field(default_factory=list)
    crt2_values: list[float] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.widths

    def add_point(self, width: float, crt1: float, crt2: float) -> None:
        self.widths.append(width)
        self.crt1_values.append(crt1)
        self.crt2_values.append(crt2)

    def lookup_crt_values(self, width: float) -> tuple[float, float] | None:
        """Interpolate (CRT1, CRT2) at *width*, clamped to the end rows."""
        if self.is_empty:
            return None
        n = min(len(self.widths), len(self.crt1_values), len(self.crt2_values))
        if n == 0:
            return None
        found = bracket(self.widths[:n], width)
        if found is None:
            return None
        lo, hi, t = found
        crt1 = self.crt1_values[lo] + t * (self.crt1_values[hi] - self.crt1_values[lo])
        crt2 = self.crt2_values[lo] + t * (self.crt2_values[hi] - self.crt2_values[lo])
        return crt1, crt2

    def lookup(self, width: float) -> float | None:
        """First-order coefficient only, for callers that want one number."""
        pair = self.lookup_crt_values(width)
        return pair[0] if pair else None


@dataclass
class WidthThicknessTable:
    """Width × thickness resistivity table; ``values[thickness_idx][width_idx]``."""

    widths: list[float] = field(default_factory=list)
    thicknesses: list[float] = field(default_factory=list)
    values: list[list[float]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.widths or not self.thicknesses or not self.values

    def lookup(self, width: float, thickness: float) -> float | None:
        """Bilinear interpolation, flat outside the declared axes."""
        if self.is_empty:
            return None
        w = bracket(self.widths, width)
        t = bracket(self.thicknesses, thickness)
        if w is None or t is None:
            return None
        w_lo, w_hi, w_t = w
        t_lo, t_hi, t_t = t

        corners = (
            _cell(self.values, t_lo, w_lo),
            _cell(self.values, t_lo, w_hi),
            _cell(self.values, t_hi, w_lo),
            _cell(self.values, t_hi, w_hi),
        )
        if any(c is None for c in corners):
            return None
        v11, v12, v21, v22 = corners

        v1 = v11 + w_t * (v12 - v11)
        v2 = v21 + w_t * (v22 - v21)
        result = v1 + t_t * (v2 - v1)
        log.debug(
            "width/thickness lookup (%g, %g): widths[%d..%d] thicknesses[%d..%d] -> %.6e",
            width, thickness, w_lo, w_hi, t_lo, t_hi, result,
        )
        return result


@dataclass
class ProcessVariation:
    """Polynomial thickness variation as a function of density and width."""

    density_polynomial_orders: list[int] = field(default_factory=list)
    width_polynomial_orders: list[int] = field(default_factory=list)
    width_ranges: list[float] = field(default_factory=list)
    polynomial_coefficients: list[list[float]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.polynomial_coefficients

    def width_range_index(self, width: float) -> int:
        """Row for the first range whose upper bound is ≥ width, else the last row."""
        for i, limit in enumerate(self.width_ranges):
            if width <= limit:
                return i
        return max(len(self.polynomial_coefficients) - 1, 0)

    def calculate_thickness_variation(self, density: float, width: float) -> float:
        row_idx = self.width_range_index(width)
        if row_idx >= len(self.polynomial_coefficients):
            return 0.0
        coeffs = self.polynomial_coefficients[row_idx]

        total = 0.0
        k = 0
        for d_order in self.density_polynomial_orders:
            for w_order in self.width_polynomial_orders:
                if k >= len(coeffs):
                    return total
                total += coeffs[k] * density ** d_order * width ** w_order
                k += 1
        return total

    def lookup(self, density: float, width: float) -> float | None:
        if self.is_empty:
            return None
        return self.calculate_thickness_variation(density, width)
