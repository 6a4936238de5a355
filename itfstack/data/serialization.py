"""Process stack serialization: convert ProcessStack to and from JSON-safe dicts."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any

from .layers import (
    ConductorLayer, DielectricLayer, ElectricalProperties, Layer, LayerType,
    PhysicalProperties,
)
from .stack import ProcessStack, TechnologyInfo
from .tables import (
    CrtVsSiWidthTable, LookupTable2D, ProcessVariation, WidthThicknessTable,
)
from .vias import ViaConnection


_TABLE_2D_FIELDS = (
    "rho_vs_width_spacing",
    "etch_vs_width_spacing",
    "etch_from_top",
    "thickness_vs_width_spacing",
)


def _optional(data: dict, **values: Any) -> dict:
    """Copy *values* into *data*, skipping the ones that are None."""
    data.update({k: v for k, v in values.items() if v is not None})
    return data


# ── Serialization ──────────────────────────────────────────────────


def layer_to_dict(layer: Layer) -> dict:
    """Convert one layer to a JSON-serializable dict (derived z excluded)."""
    if isinstance(layer, DielectricLayer):
        d = {
            "type": LayerType.DIELECTRIC.value,
            "name": layer.name,
            "thickness": layer.thickness,
            "dielectric_constant": layer.dielectric_constant,
        }
        if layer.auto_created:
            d["auto_created"] = True
        return _optional(d, measured_from=layer.measured_from, sw_t=layer.sw_t, tw_t=layer.tw_t)

    d = {
        "type": LayerType.CONDUCTOR.value,
        "name": layer.name,
        "thickness": layer.thickness,
        "electrical": {k: v for k, v in asdict(layer.electrical).items() if v is not None},
        "physical": {
            k: v for k, v in asdict(layer.physical).items()
            if v is not None and k != "thickness"
        },
    }
    for key in _TABLE_2D_FIELDS + ("rho_vs_si_width_thickness", "crt_vs_si_width", "process_variation"):
        table = getattr(layer, key)
        if table is not None:
            d[key] = asdict(table)
    return _optional(
        d,
        resistive_only_etch=layer.resistive_only_etch,
        capacitive_only_etch=layer.capacitive_only_etch,
    )


def via_to_dict(via: ViaConnection) -> dict:
    return {
        "name": via.name,
        "from": via.from_layer,
        "to": via.to_layer,
        "area": via.area,
        "rpv": via.resistance_per_via,
    }


def stack_to_dict(stack: ProcessStack, include_geometry: bool = False) -> dict:
    """Convert a ProcessStack to a JSON-serializable dict.

    With *include_geometry* the resolved z positions, via spans and the
    total height are added; ``parse_stack`` ignores them and recomputes.
    """
    layers = []
    for layer in stack.layers:
        d = layer_to_dict(layer)
        if include_geometry:
            d["bottom_z"] = layer.bottom_z
            d["top_z"] = layer.top_z
        layers.append(d)

    vias = []
    for via in stack.vias:
        d = via_to_dict(via)
        if include_geometry:
            d["bottom_z"] = via.bottom_z
            d["height"] = via.height
            d["via_type"] = via.via_type.value
        vias.append(d)

    result = {
        "technology": {k: v for k, v in asdict(stack.technology_info).items() if v is not None},
        "layers": layers,
        "vias": vias,
    }
    if include_geometry:
        result["total_height"] = stack.total_height
    return result


# ── Deserialization ────────────────────────────────────────────────


def _parse_conductor(d: dict) -> ConductorLayer:
    layer = ConductorLayer(
        name=d["name"],
        thickness=float(d["thickness"]),
        electrical=ElectricalProperties(**d.get("electrical", {})),
        physical=PhysicalProperties(**d.get("physical", {})),
        resistive_only_etch=d.get("resistive_only_etch"),
        capacitive_only_etch=d.get("capacitive_only_etch"),
    )
    for key in _TABLE_2D_FIELDS:
        if key in d:
            setattr(layer, key, LookupTable2D(**d[key]))
    if "rho_vs_si_width_thickness" in d:
        layer.rho_vs_si_width_thickness = WidthThicknessTable(**d["rho_vs_si_width_thickness"])
    if "crt_vs_si_width" in d:
        layer.crt_vs_si_width = CrtVsSiWidthTable(**d["crt_vs_si_width"])
    if "process_variation" in d:
        layer.process_variation = ProcessVariation(**d["process_variation"])
    return layer


def parse_layer(d: dict) -> Layer:
    kind = d.get("type")
    if kind == LayerType.CONDUCTOR.value:
        return _parse_conductor(d)
    if kind == LayerType.DIELECTRIC.value:
        return DielectricLayer(
            name=d["name"],
            thickness=float(d["thickness"]),
            dielectric_constant=float(d.get("dielectric_constant", 1.0)),
            measured_from=d.get("measured_from"),
            sw_t=d.get("sw_t"),
            tw_t=d.get("tw_t"),
            auto_created=bool(d.get("auto_created", False)),
        )
    raise ValueError(f"Unknown layer type {kind!r} for layer {d.get('name')!r}")


def parse_stack(data: dict) -> ProcessStack:
    """Rebuild a ProcessStack from ``stack_to_dict`` output.

    Layers and vias are replayed through ``add_layer``/``add_via`` so the
    derived geometry is recomputed rather than read back.
    """
    stack = ProcessStack(TechnologyInfo(**data["technology"]))
    for d in data.get("layers", []):
        stack.add_layer(parse_layer(d))
    for d in data.get("vias", []):
        stack.add_via(ViaConnection(
            name=d["name"],
            from_layer=d.get("from", ""),
            to_layer=d.get("to", ""),
            area=float(d.get("area", 0.0)),
            resistance_per_via=float(d.get("rpv", 0.0)),
        ))
    return stack
