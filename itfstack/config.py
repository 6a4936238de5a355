"""Shared constants for parsing and modelling ITF process stacks.

The parser, the stack assembler, the via classifier and the display
scaler all read their thresholds and naming conventions from the single
``STACK_RULES`` instance below, so a change here keeps every stage in sync.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StackRules:
    """Conventions and tolerances for a process stack.

    Lengths are in microns, temperatures in °C.
    """

    z_tolerance: float = 1e-10
    """Maximum gap allowed between a layer's top and the next layer's bottom."""

    default_dielectric_constant: float = 1.0
    """ER assigned to a dielectric block that does not declare one."""

    default_reference_temperature: float = 25.0
    """Reference temperature for resistance queries when none is given."""

    metal_prefixes: tuple[str, ...] = ("metal", "alpa")
    """Name prefixes that mark a conductor as a routing metal."""

    contact_markers: tuple[str, ...] = ("diff", "poly", "SUBSTRATE")
    """Substrings that mark a via endpoint as a device-level contact."""

    poly_marker: str = "poly"
    """Substring that counts a layer as polysilicon in summaries."""

    measured_from_tag: str = "TOP_OF_CHIP"
    """Value recorded when a dielectric declares ``MEASURED_FROM``."""

    file_extension: str = "itf"
    """Extension (without dot, case-insensitive) of ITF files."""

    default_ratios: tuple[float, float] = (0.3, 1.0)
    schematic_ratios: tuple[float, float] = (0.3, 0.6)
    """Display height of the thinnest/thickest layer as a fraction of the
    thickest layer."""

    min_ratio_bounds: tuple[float, float] = (0.1, 0.9)
    max_ratio_bounds: tuple[float, float] = (0.5, 1.0)
    """Allowed range for custom thinnest/thickest display ratios."""

    auto_created_display_factor: float = 2.0
    """Extra magnification for synthesized layers in schematic mode."""

    # ── Derived helpers ────────────────────────────────────────────

    def is_metal_name(self, name: str) -> bool:
        return name.startswith(self.metal_prefixes)

    def is_contact_name(self, name: str) -> bool:
        return any(marker in name for marker in self.contact_markers)


# Module-level singleton, importable everywhere.
STACK_RULES = StackRules()
