"""Shared pytest fixtures for Ramen tests."""

from collections.abc import Callable

import pytest

from ramen.core import ir
from ramen.core.compiler import CompileResult, compile_source
from ramen.core.manifest import CompilerConfig


@pytest.fixture
def compile_text() -> Callable[..., CompileResult]:
    """Compile source text with optional config overrides."""

    def _compile(text: str, **settings) -> CompileResult:
        config = CompilerConfig(**settings) if settings else None
        return compile_source(text, config=config)

    return _compile


@pytest.fixture
def compile_document(compile_text) -> Callable[..., ir.Document]:
    """Compile source text and return the document (never None)."""

    def _compile(text: str, **settings) -> ir.Document:
        result = compile_text(text, **settings)
        assert result.document is not None
        return result.document

    return _compile


@pytest.fixture
def network_source() -> str:
    """Container with two same-named nodes told apart by ref ids."""
    return "Network {\n  router :mainRouter\n  router :backupRouter\n  switch\n}\n"
