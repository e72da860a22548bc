from __future__ import annotations

from .codegen import Codegen
from .errors import CompileError, GeneratorError, LexError, ParseError
from .parser import parse_source

__all__ = ["Codegen", "CompileError", "GeneratorError", "LexError", "ParseError", "compile_source", "parse_source"]


def compile_source(src: str) -> str:
    return Codegen().generate(parse_source(src))
