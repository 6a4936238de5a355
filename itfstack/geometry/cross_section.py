"""Cross-section geometry of a resolved stack.

Read-only views of layers and vias for a renderer, plus shapely polygons
for each layer: rectangles for dielectrics and vertical-wall conductors,
trapezoids for conductors with a side tangent.  Coordinates are x across
the stack and z upwards; all lengths share the stack's unit.
"""

from __future__ import annotations

from dataclasses import dataclass

from shapely.geometry import Point, Polygon, box as shapely_box

from itfstack.data.layers import ConductorLayer, LayerType
from itfstack.data.stack import ProcessStack
from itfstack.data.vias import ViaType
from .scaling import ThicknessScaler


@dataclass
class LayerView:
    index: int
    layer_type: LayerType
    name: str
    bottom_z: float
    top_z: float
    side_tangent: float | None = None

    @property
    def thickness(self) -> float:
        return self.top_z - self.bottom_z


@dataclass
class ViaView:
    name: str
    from_layer: str
    to_layer: str
    bottom_z: float
    height: float
    via_type: ViaType


@dataclass
class LayerShape:
    """A layer's polygon in display coordinates."""

    view: LayerView
    polygon: Polygon


def layer_views(stack: ProcessStack) -> list[LayerView]:
    views = []
    for i, layer in enumerate(stack.layers):
        tangent = layer.side_tangent if isinstance(layer, ConductorLayer) else None
        views.append(LayerView(i, layer.layer_type, layer.name, layer.bottom_z, layer.top_z, tangent))
    return views


def via_views(stack: ProcessStack) -> list[ViaView]:
    return [
        ViaView(v.name, v.from_layer, v.to_layer, v.bottom_z, v.height, v.via_type)
        for v in stack.vias
    ]


# ── Polygons ───────────────────────────────────────────────────────


def trapezoid(x: float, base_z: float, width: float, height: float, side_tangent: float) -> Polygon:
    """Trapezoid with its bottom edge centred on *x* at *base_z*.

    A positive side tangent widens the top edge, a negative one narrows
    it (never below zero width).
    """
    half = width / 2.0
    change = height * abs(side_tangent)
    top_half = half + change if side_tangent >= 0 else max(half - change, 0.0)
    top_z = base_z + height
    return Polygon([
        (x - half, base_z),
        (x + half, base_z),
        (x + top_half, top_z),
        (x - top_half, top_z),
    ])


def layer_cross_section(
    view: LayerView,
    width: float,
    x: float = 0.0,
    height: float | None = None,
    base_z: float | None = None,
) -> Polygon:
    """Polygon for one layer, *width* wide and centred on *x*.

    *height* and *base_z* default to the layer's real thickness and bottom.
    """
    h = view.thickness if height is None else height
    z0 = view.bottom_z if base_z is None else base_z
    if view.layer_type is LayerType.CONDUCTOR and view.side_tangent:
        return trapezoid(x, z0, width, h, view.side_tangent)
    return shapely_box(x - width / 2.0, z0, x + width / 2.0, z0 + h)


def stack_cross_sections(
    stack: ProcessStack,
    width: float,
    scaler: ThicknessScaler | None = None,
    conductor_width: float | None = None,
) -> list[LayerShape]:
    """Polygons for every layer, stacked bottom-up at their display heights.

    Dielectrics span *width*; conductors span *conductor_width* (default:
    half of *width*).
    """
    cw = width / 2.0 if conductor_width is None else conductor_width
    shapes: list[LayerShape] = []
    z = 0.0
    for view, layer in zip(layer_views(stack), stack.layers):
        h = scaler.display_thickness_for_layer(layer) if scaler else layer.thickness
        w = cw if view.layer_type is LayerType.CONDUCTOR else width
        shapes.append(LayerShape(view, layer_cross_section(view, w, height=h, base_z=z)))
        z += h
    return shapes


def shapes_at_point(shapes: list[LayerShape], x: float, z: float) -> list[LayerShape]:
    """Shapes whose polygon contains or touches (x, z), topmost first."""
    pt = Point(x, z)
    return [s for s in reversed(shapes) if s.polygon.intersects(pt)]
