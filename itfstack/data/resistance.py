"""Temperature- and geometry-dependent conductor resistance.

Resistivity source priority (first configured source wins):

1. ``rho_vs_si_width_thickness``  volume resistivity, R = ρ·L / (W·t)
2. ``rho_vs_width_spacing``       sheet resistance at spacing 0, R = ρ·L / W
3. ``electrical.rpsq``            sheet resistance, R = ρ·L / W

A configured table that has no data for the query yields ``None`` rather
than falling through to the next source.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .layers import ConductorLayer

log = logging.getLogger("itfstack.data.resistance")


class ResistivitySource(str, Enum):
    VOLUME_TABLE = "rho_vs_si_width_thickness"
    SHEET_TABLE = "rho_vs_width_spacing"
    RPSQ = "rpsq"

    @property
    def is_volume(self) -> bool:
        return self is ResistivitySource.VOLUME_TABLE


@dataclass
class Resistivity:
    """Base resistivity before temperature adjustment."""

    value: float
    source: ResistivitySource


def resolve_resistivity(conductor: ConductorLayer, width: float) -> Resistivity | None:
    """Pick the base resistivity for *width* following the source priority."""
    if conductor.rho_vs_si_width_thickness is not None:
        rho = conductor.rho_vs_si_width_thickness.lookup(width, conductor.thickness)
        if rho is None:
            return None
        return Resistivity(rho, ResistivitySource.VOLUME_TABLE)

    if conductor.rho_vs_width_spacing is not None:
        rho = conductor.rho_vs_width_spacing.lookup(width, 0.0)
        if rho is None:
            return None
        return Resistivity(rho, ResistivitySource.SHEET_TABLE)

    if conductor.electrical.rpsq is not None:
        return Resistivity(conductor.electrical.rpsq, ResistivitySource.RPSQ)

    return None


def resolve_temperature_coefficients(conductor: ConductorLayer, width: float) -> tuple[float, float]:
    """(CRT1, CRT2) for *width*: the width table if it has data, else the scalars."""
    table = conductor.crt_vs_si_width
    if table is not None and not table.is_empty:
        pair = table.lookup_crt_values(width)
        if pair is not None:
            return pair
    crt1 = conductor.electrical.crt1 if conductor.electrical.crt1 is not None else 0.0
    crt2 = conductor.electrical.crt2 if conductor.electrical.crt2 is not None else 0.0
    return crt1, crt2


def temperature_factor(crt1: float, crt2: float, delta_t: float) -> float:
    return 1.0 + crt1 * delta_t + crt2 * delta_t * delta_t


def calculate_resistance(
    conductor: ConductorLayer,
    width: float,
    length: float,
    temperature: float,
    reference_temperature: float,
) -> float | None:
    """Resistance in ohms of a *width* × *length* wire at *temperature*.

    Returns ``None`` when the conductor has no usable resistivity source,
    or when the width (or, for volume resistivity, the thickness) is not
    positive.
    """
    if width <= 0:
        return None
    rho = resolve_resistivity(conductor, width)
    if rho is None:
        log.debug("%s: no resistivity source for width %g", conductor.name, width)
        return None

    crt1, crt2 = resolve_temperature_coefficients(conductor, width)
    delta_t = temperature - reference_temperature
    rho_t = rho.value * temperature_factor(crt1, crt2, delta_t)

    if rho.source.is_volume:
        if conductor.thickness <= 0:
            return None
        result = rho_t * length / (width * conductor.thickness)
    else:
        result = rho_t * length / width

    log.debug(
        "%s: %s rho0=%.6e crt1=%.6e crt2=%.6e dT=%g rho(T)=%.6e R=%.6e",
        conductor.name, rho.source.value, rho.value, crt1, crt2, delta_t, rho_t, result,
    )
    return result


def get_effective_width(conductor: ConductorLayer, nominal_width: float, spacing: float) -> float:
    """Drawn width minus the etch bias on both sidewalls, never below zero."""
    table = conductor.etch_vs_width_spacing
    etch_bias = table.lookup(nominal_width, spacing) if table is not None else None
    if etch_bias is None:
        etch_bias = 0.0
    return max(0.0, nominal_width - 2.0 * etch_bias)
