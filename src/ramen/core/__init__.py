"""Core Ramen functionality: IR, lexer, parser, linker, metadata binding, validation."""

from . import ir
from .binder import bind_metadata
from .compiler import CompileResult, compile_source
from .dsl_parser_impl import parse_dsl
from .errors import (
    CompilationCancelled,
    ConfigError,
    ErrorContext,
    ParseError,
    RamenError,
    format_diagnostic,
)
from .lexer import tokenize
from .linker import link
from .lint import assemble_document
from .manifest import CompilerConfig, config_from_toml

__all__ = [
    "ir",
    "RamenError",
    "ParseError",
    "CompilationCancelled",
    "ConfigError",
    "ErrorContext",
    "format_diagnostic",
    "tokenize",
    "parse_dsl",
    "link",
    "bind_metadata",
    "assemble_document",
    "compile_source",
    "CompileResult",
    "CompilerConfig",
    "config_from_toml",
]
