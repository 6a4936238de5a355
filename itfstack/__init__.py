"""itfstack: ITF process stack parser and model.

Subpackages:
  data     : layers, vias, lookup tables, resistance model, ProcessStack
  parser   : primitive grammar, tokenizer, declaration parser
  geometry : display scaling and cross-section polygons

Modules:
  config   : STACK_RULES shared constants
  files    : loading ITF files from disk
  cli      : ``python -m itfstack``
"""

from .config import STACK_RULES, StackRules
from .data import (
    TechnologyInfo,
    ProcessStack,
    ProcessSummary,
    DielectricLayer,
    ConductorLayer,
    ViaConnection,
    StackValidationError,
)
from .parser import ParseError, ValidationError, parse_itf_file, validate_itf_content
from .files import FileError, load_itf_file

__all__ = [
    "STACK_RULES",
    "StackRules",
    "TechnologyInfo",
    "ProcessStack",
    "ProcessSummary",
    "DielectricLayer",
    "ConductorLayer",
    "ViaConnection",
    "StackValidationError",
    "ParseError",
    "ValidationError",
    "parse_itf_file",
    "validate_itf_content",
    "FileError",
    "load_itf_file",
]
