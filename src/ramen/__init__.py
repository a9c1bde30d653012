"""
Ramen - a text DSL for diagrams.

This package is the compiler frontend: it turns Ramen source text into a
resolved, validated Document that a renderer can consume.
"""

from ._version import get_version
from .core import ir
from .core.compiler import CompileResult, compile_source
from .core.errors import CompilationCancelled, ConfigError, ParseError, RamenError
from .core.manifest import CompilerConfig, config_from_toml

__version__ = get_version()

__all__ = [
    "__version__",
    "ir",
    "compile_source",
    "CompileResult",
    "CompilerConfig",
    "config_from_toml",
    "RamenError",
    "ParseError",
    "CompilationCancelled",
    "ConfigError",
]
