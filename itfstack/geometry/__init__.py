"""Renderer-facing geometry for resolved stacks."""

from .scaling import ThicknessScaler, ThicknessStats
from .cross_section import (
    LayerView,
    ViaView,
    LayerShape,
    layer_views,
    via_views,
    trapezoid,
    layer_cross_section,
    stack_cross_sections,
    shapes_at_point,
)

__all__ = [
    "ThicknessScaler",
    "ThicknessStats",
    "LayerView",
    "ViaView",
    "LayerShape",
    "layer_views",
    "via_views",
    "trapezoid",
    "layer_cross_section",
    "stack_cross_sections",
    "shapes_at_point",
]
