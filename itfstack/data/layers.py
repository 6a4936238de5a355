"""Layer dataclasses: dielectric and conductor variants of a process stack."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from itfstack.config import STACK_RULES
from . import resistance
from .tables import (
    CrtVsSiWidthTable, LookupTable2D, ProcessVariation, WidthThicknessTable,
)


class LayerType(str, Enum):
    DIELECTRIC = "dielectric"
    CONDUCTOR = "conductor"


# ── Property bundles ───────────────────────────────────────────────


@dataclass
class ElectricalProperties:
    """Scalar electrical parameters of a conductor."""

    crt1: float | None = None     # 1/°C
    crt2: float | None = None     # 1/°C²
    rpsq: float | None = None     # ohm/square
    rpv: float | None = None      # ohm/via


@dataclass
class PhysicalProperties:
    """Scalar geometric parameters of a conductor."""

    thickness: float = 0.0
    width_min: float | None = None
    spacing_min: float | None = None
    side_tangent: float | None = None
    dielectric_constant: float | None = None


# ── Layers ─────────────────────────────────────────────────────────


@dataclass
class DielectricLayer:
    name: str
    thickness: float
    dielectric_constant: float = STACK_RULES.default_dielectric_constant
    measured_from: str | None = None
    sw_t: float | None = None
    tw_t: float | None = None
    z_position: float = 0.0
    auto_created: bool = False

    layer_type = LayerType.DIELECTRIC

    @property
    def bottom_z(self) -> float:
        return self.z_position

    @property
    def top_z(self) -> float:
        return self.z_position + self.thickness

    @property
    def is_conductor(self) -> bool:
        return False

    @property
    def is_dielectric(self) -> bool:
        return True

    @property
    def is_auto_created(self) -> bool:
        return self.auto_created


@dataclass
class ConductorLayer:
    """A patterned conductor and every table that describes it.

    The 2D width/spacing tables snap to their nearest breakpoints; the
    width/thickness resistivity table interpolates.
    """

    name: str
    thickness: float
    electrical: ElectricalProperties = field(default_factory=ElectricalProperties)
    physical: PhysicalProperties = field(default_factory=PhysicalProperties)
    rho_vs_width_spacing: LookupTable2D | None = None
    rho_vs_si_width_thickness: WidthThicknessTable | None = None
    etch_vs_width_spacing: LookupTable2D | None = None
    etch_from_top: LookupTable2D | None = None
    thickness_vs_width_spacing: LookupTable2D | None = None
    crt_vs_si_width: CrtVsSiWidthTable | None = None
    process_variation: ProcessVariation | None = None
    resistive_only_etch: float | None = None
    capacitive_only_etch: float | None = None
    z_position: float = 0.0

    layer_type = LayerType.CONDUCTOR

    def __post_init__(self) -> None:
        self.physical.thickness = self.thickness

    @property
    def bottom_z(self) -> float:
        return self.z_position

    @property
    def top_z(self) -> float:
        return self.z_position + self.thickness

    @property
    def is_conductor(self) -> bool:
        return True

    @property
    def is_dielectric(self) -> bool:
        return False

    @property
    def is_auto_created(self) -> bool:
        return False

    @property
    def is_metal(self) -> bool:
        return STACK_RULES.is_metal_name(self.name)

    @property
    def side_tangent(self) -> float | None:
        return self.physical.side_tangent

    def is_trapezoid(self) -> bool:
        return self.physical.side_tangent is not None

    def trapezoid_angle(self) -> float:
        """Sidewall angle in radians, 0 for a vertical sidewall."""
        if self.physical.side_tangent is None:
            return 0.0
        return math.atan(self.physical.side_tangent)

    def calculate_resistance(
        self,
        width: float,
        length: float,
        temperature: float,
        reference_temperature: float = STACK_RULES.default_reference_temperature,
    ) -> float | None:
        return resistance.calculate_resistance(
            self, width, length, temperature, reference_temperature,
        )

    def get_effective_width(self, nominal_width: float, spacing: float) -> float:
        return resistance.get_effective_width(self, nominal_width, spacing)


Layer = Union[DielectricLayer, ConductorLayer]
