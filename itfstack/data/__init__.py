"""Process stack data model.

Submodules:
  tables        : lookup tables (snap 2D, linear 1D, CRT pairs, width×thickness, polynomial)
  layers        : dielectric / conductor layer dataclasses
  resistance    : temperature-dependent resistance model
  vias          : via connections and the connectivity graph
  stack         : ProcessStack assembler, validation errors, summary
  serialization : JSON-safe dict round-trip
"""

from .tables import (
    LookupTable,
    LookupTable2D,
    LookupTable1D,
    CrtVsSiWidthTable,
    WidthThicknessTable,
    ProcessVariation,
)
from .layers import (
    LayerType,
    ElectricalProperties,
    PhysicalProperties,
    DielectricLayer,
    ConductorLayer,
    Layer,
)
from .resistance import (
    ResistivitySource,
    Resistivity,
    calculate_resistance,
    get_effective_width,
    resolve_resistivity,
    resolve_temperature_coefficients,
)
from .vias import ViaType, ViaConnection, ViaStack
from .stack import (
    TechnologyInfo,
    ParseDiagnostic,
    ProcessSummary,
    ProcessStack,
    StackValidationError,
    EmptyStackError,
    InvalidThicknessError,
    LayerPositionMismatchError,
    UnknownLayerError,
)
from .serialization import stack_to_dict, parse_stack, layer_to_dict, parse_layer

__all__ = [
    # Tables
    "LookupTable",
    "LookupTable2D",
    "LookupTable1D",
    "CrtVsSiWidthTable",
    "WidthThicknessTable",
    "ProcessVariation",
    # Layers
    "LayerType",
    "ElectricalProperties",
    "PhysicalProperties",
    "DielectricLayer",
    "ConductorLayer",
    "Layer",
    # Resistance
    "ResistivitySource",
    "Resistivity",
    "calculate_resistance",
    "get_effective_width",
    "resolve_resistivity",
    "resolve_temperature_coefficients",
    # Vias
    "ViaType",
    "ViaConnection",
    "ViaStack",
    # Stack
    "TechnologyInfo",
    "ParseDiagnostic",
    "ProcessSummary",
    "ProcessStack",
    "StackValidationError",
    "EmptyStackError",
    "InvalidThicknessError",
    "LayerPositionMismatchError",
    "UnknownLayerError",
    # Serialization
    "stack_to_dict",
    "parse_stack",
    "layer_to_dict",
    "parse_layer",
]
