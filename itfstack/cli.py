"""Command-line front end for inspecting ITF files."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .config import STACK_RULES
from .data.layers import ConductorLayer
from .data.serialization import stack_to_dict
from .data.stack import ProcessStack
from .files import FileError, load_itf_file
from .geometry.cross_section import layer_views, via_views
from .parser.lexer import LexError, tokenize


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="itfstack", description="Inspect ITF process stack files")
    p.add_argument("-v", "--verbose", action="store_true", help="Log parser and model details")
    sub = p.add_subparsers(dest="cmd", required=True)

    s = sub.add_parser("summary", help="Print technology info and layer/via counts")
    s.add_argument("file", help="Path to an .itf file")

    ly = sub.add_parser("layers", help="List layers and vias with their z positions")
    ly.add_argument("file", help="Path to an .itf file")

    pa = sub.add_parser("path", help="Shortest via path between two layers")
    pa.add_argument("file", help="Path to an .itf file")
    pa.add_argument("from_layer", help="Start layer name")
    pa.add_argument("to_layer", help="End layer name")

    r = sub.add_parser("resistance", help="Wire resistance on a conductor layer")
    r.add_argument("file", help="Path to an .itf file")
    r.add_argument("layer", help="Conductor layer name")
    r.add_argument("--width", type=float, required=True, help="Wire width")
    r.add_argument("--length", type=float, required=True, help="Wire length")
    r.add_argument("--temperature", type=float, default=None,
                   help="Operating temperature (default: file's GLOBAL_TEMPERATURE)")
    r.add_argument("--reference", type=float, default=STACK_RULES.default_reference_temperature,
                   help="Reference temperature of the resistivity data")

    j = sub.add_parser("json", help="Dump the parsed stack as JSON")
    j.add_argument("file", help="Path to an .itf file")
    j.add_argument("--geometry", action="store_true", help="Include resolved z positions")

    t = sub.add_parser("tokens", help="Tokenize a file and print one token per line")
    t.add_argument("file", help="Path to an .itf file")

    return p


def _print_summary(stack: ProcessStack) -> None:
    s = stack.get_process_summary()
    print(f"Technology:        {s.technology_name}")
    if s.global_temperature is not None:
        print(f"Temperature:       {s.global_temperature:g} C")
    print(f"Layers:            {s.total_layers} "
          f"({s.conductor_layers} conductor, {s.dielectric_layers} dielectric)")
    print(f"Metal layers:      {s.metal_layers}")
    print(f"Poly layers:       {s.poly_layers}")
    print(f"Vias:              {s.via_connections}")
    print(f"Total height:      {s.total_height:.4f}")
    for diag in stack.diagnostics:
        print(f"warning: {diag}")


def _print_layers(stack: ProcessStack) -> None:
    for view in reversed(layer_views(stack)):
        tangent = f"  side_tangent={view.side_tangent:g}" if view.side_tangent is not None else ""
        print(f"{view.index:3d}  {view.layer_type.value:10s} {view.name:20s} "
              f"{view.bottom_z:10.4f} .. {view.top_z:10.4f}{tangent}")
    for via in via_views(stack):
        print(f"via  {via.name:12s} {via.from_layer} -> {via.to_layer}  "
              f"z={via.bottom_z:.4f} h={via.height:.4f} ({via.via_type.value})")


def _run(args: argparse.Namespace) -> int:
    if args.cmd == "tokens":
        text = Path(args.file).read_text(encoding="utf-8")
        for tok in tokenize(text):
            print(f"{tok.line}:{tok.column}\t{tok.kind.value}\t{tok.text}")
        return 0

    stack = load_itf_file(args.file)

    if args.cmd == "summary":
        _print_summary(stack)
        return 0

    if args.cmd == "layers":
        _print_layers(stack)
        return 0

    if args.cmd == "json":
        print(json.dumps(stack_to_dict(stack, include_geometry=args.geometry), indent=2))
        return 0

    if args.cmd == "path":
        path = stack.get_connection_path(args.from_layer, args.to_layer)
        if path is None:
            print(f"No via path from {args.from_layer} to {args.to_layer}")
            return 1
        print(" -> ".join([args.from_layer] + [v.name for v in path] + [args.to_layer])
              if path else args.from_layer)
        return 0

    if args.cmd == "resistance":
        layer = stack.get_layer(args.layer)
        if not isinstance(layer, ConductorLayer):
            print(f"Error: '{args.layer}' is not a conductor layer", file=sys.stderr)
            return 1
        temperature = args.temperature
        if temperature is None:
            temperature = stack.technology_info.global_temperature
        if temperature is None:
            temperature = args.reference
        r = layer.calculate_resistance(args.width, args.length, temperature, args.reference)
        if r is None:
            print(f"Error: no resistivity data for '{args.layer}' at width {args.width:g}",
                  file=sys.stderr)
            return 1
        print(f"{r:.6g} ohm")
        return 0

    return 2


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return _run(args)
    except (FileError, LexError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
