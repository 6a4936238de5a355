"""Thickness → display-height scaling for stack cross-section views.

In normal mode every layer is drawn at its real thickness.  In schematic
mode thicknesses are mapped linearly onto ``[min_ratio, max_ratio]`` of
the thickest layer so thin layers stay visible next to thick ones.
"""

from __future__ import annotations

from dataclasses import dataclass

from itfstack.config import STACK_RULES
from itfstack.data.layers import Layer
from itfstack.data.stack import ProcessStack


def _clamp(value: float, bounds: tuple[float, float]) -> float:
    lo, hi = bounds
    return min(max(value, lo), hi)


@dataclass
class ThicknessStats:
    min_thickness: float
    max_thickness: float
    thickness_ratio: float
    min_scale_factor: float
    max_scale_factor: float


class ThicknessScaler:
    def __init__(self, min_ratio: float | None = None, max_ratio: float | None = None) -> None:
        default_min, default_max = STACK_RULES.default_ratios
        self.min_ratio = default_min if min_ratio is None else _clamp(min_ratio, STACK_RULES.min_ratio_bounds)
        self.max_ratio = default_max if max_ratio is None else _clamp(max_ratio, STACK_RULES.max_ratio_bounds)
        self.thickness_range: tuple[float, float] | None = None
        self.schematic_mode = False

    def analyze_stack(self, stack: ProcessStack) -> None:
        """Record the (min, max) of the stack's positive layer thicknesses."""
        positive = [l.thickness for l in stack.layers if l.thickness > 0]
        self.thickness_range = (min(positive), max(positive)) if positive else None

    def set_schematic_mode(self, min_thickness: float, max_thickness: float) -> None:
        self.thickness_range = (min_thickness, max_thickness)
        self.min_ratio, self.max_ratio = STACK_RULES.schematic_ratios
        self.schematic_mode = True

    def set_normal_mode(self) -> None:
        self.schematic_mode = False
        self.min_ratio = self.max_ratio = 1.0

    def scale_factor(self, thickness: float) -> float:
        """Display ratio for *thickness* relative to the thickest layer."""
        if self.thickness_range is None:
            return 1.0
        lo, hi = self.thickness_range
        if hi <= lo:
            return self.max_ratio
        normalized = (thickness - lo) / (hi - lo)
        return self.min_ratio + normalized * (self.max_ratio - self.min_ratio)

    def display_thickness(self, thickness: float) -> float:
        if thickness <= 0:
            return 0.0
        if not self.schematic_mode or self.thickness_range is None:
            return thickness
        lo, hi = self.thickness_range
        if hi <= lo:
            return lo * self.max_ratio
        return hi * self.scale_factor(thickness)

    def display_thickness_for_layer(self, layer: Layer) -> float:
        if self.schematic_mode and layer.is_auto_created:
            return layer.thickness * STACK_RULES.auto_created_display_factor
        return self.display_thickness(layer.thickness)

    def display_heights(self, stack: ProcessStack) -> list[float]:
        return [self.display_thickness_for_layer(l) for l in stack.layers]

    def display_total_height(self, stack: ProcessStack) -> float:
        return sum(self.display_heights(stack))

    def stats(self) -> ThicknessStats | None:
        if self.thickness_range is None:
            return None
        lo, hi = self.thickness_range
        return ThicknessStats(
            min_thickness=lo,
            max_thickness=hi,
            thickness_ratio=hi / lo if lo > 0 else 1.0,
            min_scale_factor=self.min_ratio,
            max_scale_factor=self.max_ratio,
        )
