"""Process stack assembler: ordered layers, vias and derived geometry."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

from itfstack.config import STACK_RULES
from .layers import ConductorLayer, DielectricLayer, Layer
from .vias import ViaConnection, ViaStack

log = logging.getLogger("itfstack.data.stack")


# ── Metadata ───────────────────────────────────────────────────────


@dataclass
class TechnologyInfo:
    """Process-wide settings from the file header."""

    name: str
    global_temperature: float | None = None
    reference_direction: str | None = None
    background_er: float | None = None
    half_node_scale_factor: float | None = None
    use_si_density: bool | None = None
    drop_factor_lateral_spacing: float | None = None


@dataclass
class ParseDiagnostic:
    """A non-fatal note recorded while building a stack (e.g. a skipped line)."""

    line: int
    message: str
    text: str = ""

    def __str__(self) -> str:
        if self.text:
            return f"line {self.line}: {self.message}: {self.text}"
        return f"line {self.line}: {self.message}"


@dataclass
class ProcessSummary:
    technology_name: str
    total_layers: int
    conductor_layers: int
    dielectric_layers: int
    metal_layers: int
    poly_layers: int
    via_connections: int
    total_height: float
    global_temperature: float | None


# ── Validation errors ──────────────────────────────────────────────


class StackValidationError(Exception):
    """Base class for violated stack invariants."""

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class EmptyStackError(StackValidationError):
    def __init__(self) -> None:
        super().__init__("Stack is empty")


class InvalidThicknessError(StackValidationError):
    def __init__(self, layer: str, thickness: float) -> None:
        self.layer = layer
        self.thickness = thickness
        super().__init__(f"Layer '{layer}' has invalid thickness: {thickness}")


class LayerPositionMismatchError(StackValidationError):
    def __init__(self, layer: str, expected: float, actual: float) -> None:
        self.layer = layer
        self.expected = expected
        self.actual = actual
        super().__init__(f"Layer '{layer}' position mismatch: expected {expected}, got {actual}")


class UnknownLayerError(StackValidationError):
    def __init__(self, via: str, layer: str) -> None:
        self.via = via
        self.layer = layer
        super().__init__(f"Via '{via}' references unknown layer '{layer}'")


# ── Stack ──────────────────────────────────────────────────────────


class ProcessStack:
    """Layers in bottom-up order plus the vias between them.

    Every ``add_layer`` recomputes all z positions and then every via
    span; every ``add_via`` recomputes the via spans.  A via whose
    endpoints do not exist yet keeps a zero span until a later mutation.
    """

    def __init__(self, technology_info: TechnologyInfo) -> None:
        self.technology_info = technology_info
        self.layers: list[Layer] = []
        self.via_stack = ViaStack()
        self.layer_map: dict[str, int] = {}
        self.total_height = 0.0
        self.diagnostics: list[ParseDiagnostic] = []

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProcessStack):
            return NotImplemented
        return (
            self.technology_info == other.technology_info
            and self.layers == other.layers
            and self.via_stack.vias == other.via_stack.vias
        )

    def __repr__(self) -> str:
        return (
            f"ProcessStack({self.technology_info.name!r}, "
            f"layers={len(self.layers)}, vias={len(self.via_stack)})"
        )

    def __iter__(self) -> Iterator[Layer]:
        return iter(self.layers)

    # ── Mutation ───────────────────────────────────────────────────

    def add_layer(self, layer: Layer) -> None:
        if layer.name in self.layer_map:
            log.warning("Duplicate layer name '%s'; lookups now return the newer layer", layer.name)
        self.layers.append(layer)
        self.layer_map[layer.name] = len(self.layers) - 1
        self._rebuild_geometry()

    def add_via(self, via: ViaConnection) -> None:
        self.via_stack.add_via(via)
        self._resolve_via_spans()

    def _rebuild_geometry(self) -> None:
        z = 0.0
        for layer in self.layers:
            layer.z_position = z
            z += layer.thickness
        self.total_height = z
        self._resolve_via_spans()

    def _resolve_via_spans(self) -> None:
        for via in self.via_stack.vias:
            lower = self.get_layer(via.from_layer)
            upper = self.get_layer(via.to_layer)
            if lower is None or upper is None:
                continue
            z_lo = min(lower.top_z, upper.top_z)
            z_hi = max(lower.top_z, upper.top_z)
            via.z_position = z_lo
            via.height = z_hi - z_lo

    # ── Queries ────────────────────────────────────────────────────

    def get_layer(self, name: str) -> Layer | None:
        idx = self.layer_map.get(name)
        return self.layers[idx] if idx is not None else None

    def get_layer_by_index(self, index: int) -> Layer | None:
        if 0 <= index < len(self.layers):
            return self.layers[index]
        return None

    def get_conductor_layers(self) -> list[ConductorLayer]:
        return [l for l in self.layers if isinstance(l, ConductorLayer)]

    def get_dielectric_layers(self) -> list[DielectricLayer]:
        return [l for l in self.layers if isinstance(l, DielectricLayer)]

    def get_metal_layers(self) -> list[ConductorLayer]:
        return [l for l in self.get_conductor_layers() if l.is_metal]

    def get_layers_in_z_range(self, z_min: float, z_max: float) -> list[Layer]:
        """Layers overlapping the open interval (z_min, z_max)."""
        return [l for l in self.layers if l.bottom_z < z_max and l.top_z > z_min]

    @property
    def vias(self) -> list[ViaConnection]:
        return self.via_stack.vias

    @property
    def layer_count(self) -> int:
        return len(self.layers)

    @property
    def conductor_count(self) -> int:
        return len(self.get_conductor_layers())

    @property
    def dielectric_count(self) -> int:
        return len(self.get_dielectric_layers())

    @property
    def via_count(self) -> int:
        return len(self.via_stack)

    def get_total_height(self) -> float:
        return self.total_height

    def get_connection_path(self, start: str, goal: str) -> list[ViaConnection] | None:
        return self.via_stack.get_connection_path(start, goal)

    # ── Validation ─────────────────────────────────────────────────

    def validate_stack(self) -> StackValidationError | None:
        """Return the first violated invariant, or ``None`` if the stack is sound."""
        if not self.layers:
            return EmptyStackError()

        for layer in self.layers:
            if layer.thickness <= 0:
                return InvalidThicknessError(layer.name, layer.thickness)

        for prev, layer in zip(self.layers, self.layers[1:]):
            expected = prev.top_z
            if abs(layer.z_position - expected) > STACK_RULES.z_tolerance:
                return LayerPositionMismatchError(layer.name, expected, layer.z_position)

        for via in self.via_stack.vias:
            if via.from_layer not in self.layer_map:
                return UnknownLayerError(via.name, via.from_layer)
            if via.to_layer not in self.layer_map:
                return UnknownLayerError(via.name, via.to_layer)

        return None

    def get_process_summary(self) -> ProcessSummary:
        return ProcessSummary(
            technology_name=self.technology_info.name,
            total_layers=self.layer_count,
            conductor_layers=self.conductor_count,
            dielectric_layers=self.dielectric_count,
            metal_layers=len(self.get_metal_layers()),
            poly_layers=sum(1 for l in self.layers if STACK_RULES.poly_marker in l.name),
            via_connections=self.via_count,
            total_height=self.total_height,
            global_temperature=self.technology_info.global_temperature,
        )
