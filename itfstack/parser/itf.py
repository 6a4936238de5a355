"""ITF declaration parser.

Turns ITF text into a validated ``ProcessStack``:

1. Header: ``TECHNOLOGY = name`` plus optional metadata statements, in
   any order, up to the first token that is not a header statement.
2. Body: dielectric, conductor and via blocks, loose metadata statements
   and loose ``CRT_VS_SI_WIDTH`` tables.  A line that matches none of them
   is skipped and recorded as a diagnostic; it never aborts the parse.
3. Stack validation; a violated invariant fails the whole parse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Union

from itfstack.config import STACK_RULES
from itfstack.data.layers import (
    ConductorLayer, DielectricLayer, ElectricalProperties, PhysicalProperties,
)
from itfstack.data.stack import (
    ParseDiagnostic, ProcessStack, StackValidationError, TechnologyInfo,
)
from itfstack.data.tables import CrtVsSiWidthTable, LookupTable2D, WidthThicknessTable
from itfstack.data.vias import ViaConnection
from .grammar import Cursor

log = logging.getLogger("itfstack.parser")


# ── Errors ─────────────────────────────────────────────────────────


class ItfError(Exception):
    """Base class for errors that abort a parse."""


class ParseError(ItfError):
    """The header or overall structure could not be parsed."""

    def __init__(self, message: str, line: int | None = None) -> None:
        self.message = message
        self.line = line
        where = f" (line {line})" if line is not None else ""
        super().__init__(f"Parse error{where}: {message}")


class ValidationError(ItfError):
    """The text parsed, but the resulting stack violates an invariant."""

    def __init__(self, error: StackValidationError) -> None:
        self.error = error
        super().__init__(f"Validation error: {error}")


# ── Declarations ───────────────────────────────────────────────────


@dataclass
class MetadataStatement:
    """A loose ``KEY = value`` that updates the technology info."""

    attribute: str
    value: float | str


@dataclass
class CrtStatement:
    """A ``CRT_VS_SI_WIDTH`` table outside any conductor block."""

    table: CrtVsSiWidthTable


Declaration = Union[DielectricLayer, ConductorLayer, ViaConnection, MetadataStatement, CrtStatement]


@dataclass
class Recognized:
    decl: Declaration


@dataclass
class Unrecognized:
    line: int
    text: str


_HEADER_IDENTIFIERS = {
    "TECHNOLOGY": "name",
    "REFERENCE_DIRECTION": "reference_direction",
}
_HEADER_NUMBERS = {
    "GLOBAL_TEMPERATURE": "global_temperature",
    "BACKGROUND_ER": "background_er",
    "HALF_NODE_SCALE_FACTOR": "half_node_scale_factor",
    "DROP_FACTOR_LATERAL_SPACING": "drop_factor_lateral_spacing",
}
_YES_NO = {"YES": True, "NO": False}

# Statements that are also legal after the header.
_LOOSE_NUMBERS = {"GLOBAL_TEMPERATURE": "global_temperature", "BACKGROUND_ER": "background_er"}
_LOOSE_IDENTIFIERS = {"REFERENCE_DIRECTION": "reference_direction"}

_CONDUCTOR_SCALARS = ("THICKNESS", "CRT1", "CRT2", "RPSQ", "WMIN", "SMIN", "SIDE_TANGENT")
_SKIPPED_BLOCKS = ("POLYNOMIAL_BASED_THICKNESS_VARIATION",)


# ── Parser ─────────────────────────────────────────────────────────


class ItfParser:
    """Single-use recursive-descent parser over one ITF text."""

    def __init__(self, text: str) -> None:
        self.cur = Cursor(text)
        self.diagnostics: list[ParseDiagnostic] = []

    def parse(self) -> ProcessStack:
        stack = ProcessStack(self.parse_header())

        while True:
            self.cur.skip_ws()
            if self.cur.at_end():
                break
            result = self.parse_declaration()
            if isinstance(result, Recognized):
                self._apply(stack, result.decl)
            else:
                self._note(result.line, "Skipping unrecognized line", result.text)

        stack.diagnostics = self.diagnostics
        error = stack.validate_stack()
        if error is not None:
            raise ValidationError(error) from error

        log.info(
            "Parsed technology '%s': %d layers, %d vias, height %.4f",
            stack.technology_info.name, stack.layer_count, stack.via_count, stack.total_height,
        )
        return stack

    def _note(self, line: int, message: str, text: str = "") -> None:
        diag = ParseDiagnostic(line, message, text)
        self.diagnostics.append(diag)
        log.warning("%s", diag)

    # ── Header ─────────────────────────────────────────────────────

    def parse_header(self) -> TechnologyInfo:
        fields: dict[str, object] = {}
        while True:
            self.cur.skip_ws()
            stmt = self._header_statement()
            if stmt is None:
                break
            attr, value = stmt
            fields[attr] = value

        if "name" not in fields:
            raise ParseError("missing 'TECHNOLOGY = <name>' statement", self.cur.line)
        return TechnologyInfo(**fields)

    def _header_statement(self) -> tuple[str, object] | None:
        cur = self.cur
        for word, attr in _HEADER_IDENTIFIERS.items():
            value = cur.assignment_identifier(word)
            if value is not None:
                return attr, value
        for word, attr in _HEADER_NUMBERS.items():
            value = cur.assignment_number(word)
            if value is not None:
                return attr, value

        start = cur.pos
        flag = cur.assignment_identifier("USE_SI_DENSITY")
        if flag is not None and flag.upper() in _YES_NO:
            return "use_si_density", _YES_NO[flag.upper()]
        cur.pos = start
        return None

    # ── Body ───────────────────────────────────────────────────────

    def parse_declaration(self) -> Recognized | Unrecognized:
        """Try each declaration kind in priority order at the current position."""
        start = self.cur.pos
        line = self.cur.line
        attempts: tuple[Callable[[], Declaration | None], ...] = (
            self.parse_dielectric,
            self.parse_conductor,
            self.parse_via,
            self._loose_statement,
            self._loose_crt_table,
        )
        for attempt in attempts:
            self.cur.pos = start
            decl = attempt()
            if decl is not None:
                return Recognized(decl)

        self.cur.pos = start
        return Unrecognized(line, self.cur.skip_line().strip())

    def _apply(self, stack: ProcessStack, decl: Declaration) -> None:
        if isinstance(decl, (DielectricLayer, ConductorLayer)):
            stack.add_layer(decl)
        elif isinstance(decl, ViaConnection):
            stack.add_via(decl)
        elif isinstance(decl, MetadataStatement):
            setattr(stack.technology_info, decl.attribute, decl.value)
        elif isinstance(decl, CrtStatement):
            last = stack.layers[-1] if stack.layers else None
            if isinstance(last, ConductorLayer):
                last.crt_vs_si_width = decl.table
                log.info("Associated CRT_VS_SI_WIDTH table with conductor '%s'", last.name)
            else:
                self._note(self.cur.line, "CRT_VS_SI_WIDTH table has no preceding conductor")

    def _loose_statement(self) -> MetadataStatement | None:
        for word, attr in _LOOSE_NUMBERS.items():
            value = self.cur.assignment_number(word)
            if value is not None:
                return MetadataStatement(attr, value)
        for word, attr in _LOOSE_IDENTIFIERS.items():
            ident = self.cur.assignment_identifier(word)
            if ident is not None:
                return MetadataStatement(attr, ident)
        return None

    def _loose_crt_table(self) -> CrtStatement | None:
        if not self.cur.keyword("CRT_VS_SI_WIDTH"):
            return None
        table = self.crt_table()
        return CrtStatement(table) if table is not None else None

    def _block_header(self, word: str) -> str | None:
        """``WORD name {`` → name."""
        if not self.cur.keyword(word):
            return None
        name = self.cur.identifier()
        if name is None or not self.cur.symbol("{"):
            return None
        return name

    def _skip_unknown(self) -> None:
        """Skip one unknown item inside a block without passing its closing brace.

        A nested ``{ ... }`` opened on the current line is skipped whole;
        otherwise the line is skipped up to a ``}`` on it, if any.
        """
        cur = self.cur
        line = cur.current_line()
        open_at = line.find("{")
        close_at = line.find("}")
        if open_at >= 0 and (close_at < 0 or open_at < close_at):
            log.debug("line %d: skipping nested block: %s", cur.line, line.strip())
            cur.skip_balanced_block()
        elif close_at > 0:
            cur.pos += close_at
        else:
            log.debug("line %d: skipping property: %s", cur.line, line.strip())
            cur.skip_line()

    # ── Dielectric ─────────────────────────────────────────────────

    def parse_dielectric(self) -> DielectricLayer | None:
        name = self._block_header("DIELECTRIC")
        if name is None:
            return None

        cur = self.cur
        props: dict[str, float] = {}
        measured_from = False
        while True:
            cur.skip_ws()
            if cur.at_end():
                return None
            if cur.symbol("}"):
                break
            start = cur.pos
            key = cur.identifier()
            if key is not None and cur.symbol("="):
                value = cur.number()
                if value is not None:
                    props[key.upper()] = value
                    continue
                if key.upper() == "MEASURED_FROM" and cur.identifier() is not None:
                    measured_from = True
                    continue
            cur.pos = start
            self._skip_unknown()

        return DielectricLayer(
            name=name,
            thickness=props.get("THICKNESS", 0.0),
            dielectric_constant=props.get("ER", STACK_RULES.default_dielectric_constant),
            measured_from=(
                STACK_RULES.measured_from_tag
                if measured_from or "MEASURED_FROM" in props else None
            ),
            sw_t=props.get("SW_T"),
            tw_t=props.get("TW_T"),
        )

    # ── Conductor ──────────────────────────────────────────────────

    def parse_conductor(self) -> ConductorLayer | None:
        name = self._block_header("CONDUCTOR")
        if name is None:
            return None

        cur = self.cur
        scalars: dict[str, float] = {}
        tables: dict[str, object] = {}
        while True:
            cur.skip_ws()
            if cur.at_end():
                return None
            if cur.symbol("}"):
                break

            word = cur.peek_keyword()
            if word in _CONDUCTOR_SCALARS:
                value = cur.assignment_number(word)
                if value is not None:
                    scalars[word] = value
                    continue
            elif word is not None and self._conductor_table(word, tables):
                continue
            self._skip_unknown()

        electrical = ElectricalProperties(
            crt1=scalars.get("CRT1"),
            crt2=scalars.get("CRT2"),
            rpsq=scalars.get("RPSQ"),
        )
        physical = PhysicalProperties(
            width_min=scalars.get("WMIN"),
            spacing_min=scalars.get("SMIN"),
            side_tangent=scalars.get("SIDE_TANGENT"),
        )
        return ConductorLayer(
            name=name,
            thickness=scalars.get("THICKNESS", 0.0),
            electrical=electrical,
            physical=physical,
            **tables,
        )

    def _conductor_table(self, word: str, tables: dict[str, object]) -> bool:
        """Parse a table property named *word* into *tables*.

        Returns False when *word* is not a table keyword.  A table keyword
        whose body does not have the expected form is skipped whole.
        """
        cur = self.cur
        line = cur.line
        if word in _SKIPPED_BLOCKS:
            cur.keyword(word)
            if cur.peek_symbol("{"):
                cur.skip_balanced_block()
                log.debug("line %d: skipped %s block", line, word)
            else:
                self._skip_unknown()
            return True

        if word in ("RHO_VS_WIDTH_AND_SPACING", "THICKNESS_VS_WIDTH_AND_SPACING"):
            cur.keyword(word)
            table = self.width_spacing_table()
            attr = "rho_vs_width_spacing" if word.startswith("RHO") else "thickness_vs_width_spacing"
        elif word == "ETCH_VS_WIDTH_AND_SPACING":
            cur.keyword(word)
            if not cur.peek_symbol("{"):
                cur.identifier()
            table = self.width_spacing_table()
            attr = "etch_vs_width_spacing"
        elif word == "RHO_VS_SI_WIDTH_AND_THICKNESS":
            cur.keyword(word)
            table = self.width_thickness_table()
            attr = "rho_vs_si_width_thickness"
        elif word == "CRT_VS_SI_WIDTH":
            cur.keyword(word)
            table = self.crt_table()
            attr = "crt_vs_si_width"
        else:
            return False

        if table is None:
            self._note(line, f"Malformed {word} table skipped")
            if cur.peek_symbol("{"):
                cur.skip_balanced_block()
            else:
                self._skip_unknown()
        else:
            tables[attr] = table
        return True

    # ── Tables ─────────────────────────────────────────────────────

    def width_spacing_table(self) -> LookupTable2D | None:
        """``{ WIDTHS{..} SPACINGS{..} VALUES{matrix} }``."""
        cur = self.cur
        start = cur.pos
        if cur.symbol("{"):
            widths = cur.number_list() if cur.keyword("WIDTHS") else None
            spacings = cur.number_list() if widths is not None and cur.keyword("SPACINGS") else None
            values = cur.number_matrix() if spacings is not None and cur.keyword("VALUES") else None
            if values is not None and cur.symbol("}"):
                return LookupTable2D(widths, spacings, values)
        cur.pos = start
        return None

    def width_thickness_table(self) -> WidthThicknessTable | None:
        """``{ WIDTH{..} THICKNESS{..} VALUES{matrix} }``, rows per thickness."""
        cur = self.cur
        start = cur.pos
        if cur.symbol("{"):
            widths = cur.number_list() if cur.keyword("WIDTH") else None
            thicknesses = cur.number_list() if widths is not None and cur.keyword("THICKNESS") else None
            values = cur.number_matrix() if thicknesses is not None and cur.keyword("VALUES") else None
            if values is not None and cur.symbol("}"):
                return WidthThicknessTable(widths, thicknesses, values)
        cur.pos = start
        return None

    def crt_table(self) -> CrtVsSiWidthTable | None:
        """``{ (width, crt1, crt2) ... }``."""
        rows = self.cur.tuple_list(3)
        if rows is None:
            return None
        table = CrtVsSiWidthTable()
        for width, crt1, crt2 in rows:
            table.add_point(width, crt1, crt2)
        return table

    # ── Via ────────────────────────────────────────────────────────

    def parse_via(self) -> ViaConnection | None:
        name = self._block_header("VIA")
        if name is None:
            return None

        cur = self.cur
        via = ViaConnection(name=name, from_layer="", to_layer="")
        while True:
            cur.skip_ws()
            if cur.at_end():
                return None
            if cur.symbol("}"):
                break
            word = cur.peek_keyword()
            if word == "FROM":
                value = cur.assignment_identifier(word)
                if value is not None:
                    via.from_layer = value
                    continue
            elif word == "TO":
                value = cur.assignment_identifier(word)
                if value is not None:
                    via.to_layer = value
                    continue
            elif word == "AREA":
                area = cur.assignment_number(word)
                if area is not None:
                    via.area = area
                    continue
            elif word == "RPV":
                rpv = cur.assignment_number(word)
                if rpv is not None:
                    via.resistance_per_via = rpv
                    continue
            self._skip_unknown()
        return via


# ── Entry points ───────────────────────────────────────────────────


def parse_itf_file(text: str) -> ProcessStack:
    """Parse ITF *text* into a validated ProcessStack.

    Raises ParseError when the header cannot be parsed and ValidationError
    when the assembled stack is inconsistent.
    """
    return ItfParser(text).parse()


def validate_itf_content(text: str) -> bool:
    """Cheap check that *text* looks like an ITF file worth parsing."""
    upper = text.upper()
    return "TECHNOLOGY" in upper and ("DIELECTRIC" in upper or "CONDUCTOR" in upper)
