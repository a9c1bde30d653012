"""
Compilation pipeline for Ramen.

    source text
      -> lexer            tokens + lexical diagnostics
      -> parser           syntax tree + syntax diagnostics
      -> scope tree       (pass 1) scopes, elements, structural diagnostics
      -> resolver         (pass 2) resolved edges and metadata targets
      -> binder           element properties + metadata diagnostics
      -> lint             Document with every diagnostic in source order

Every stage keeps going after errors, so one run reports as much as
possible. The cancel signal is checked between stages.

Usage:
    from ramen.core.compiler import compile_source

    result = compile_source(text)
    if result.success:
        render(result.document)
    else:
        for diagnostic in result.errors:
            print(diagnostic)
"""

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Protocol

from . import ir
from .binder import bind_metadata
from .dsl_parser_impl import Parser
from .errors import CompilationCancelled, RamenError, format_diagnostic
from .lexer import tokenize
from .linker import link
from .lint import assemble_document
from .manifest import CompilerConfig

logger = logging.getLogger(__name__)


class CancelSignal(Protocol):
    """Anything with is_set(), e.g. threading.Event."""

    def is_set(self) -> bool: ...


@dataclass(frozen=True)
class CompileResult:
    """
    Outcome of one compilation.

    Attributes:
        document: The compiled document; None only when cancelled
        diagnostics: Every diagnostic, ordered by source position
    """

    document: ir.Document | None
    diagnostics: tuple[ir.Diagnostic, ...] = field(default_factory=tuple)

    @property
    def errors(self) -> list[ir.Diagnostic]:
        return [d for d in self.diagnostics if d.is_error]

    @property
    def warnings(self) -> list[ir.Diagnostic]:
        return [d for d in self.diagnostics if not d.is_error]

    @property
    def success(self) -> bool:
        return self.document is not None and not self.errors

    @property
    def cancelled(self) -> bool:
        return any(d.code == ir.DiagnosticCode.CANCELLED for d in self.diagnostics)

    def raise_for_errors(self, source: str | None = None) -> ir.Document:
        """
        Return the document, or raise if compilation produced errors.

        Raises:
            RamenError: With every error rendered, one per block
        """
        if self.document is None or self.errors:
            rendered = "\n".join(format_diagnostic(d, source) for d in self.errors)
            raise RamenError(f"Compilation failed with {len(self.errors)} error(s):\n{rendered}")
        return self.document


@contextmanager
def _phase(name: str) -> Iterator[None]:
    started = time.perf_counter()
    yield
    logger.debug("%s finished in %.2f ms", name, (time.perf_counter() - started) * 1000)


def compile_source(
    text: str,
    config: CompilerConfig | None = None,
    cancel: CancelSignal | None = None,
) -> CompileResult:
    """
    Compile Ramen source text into a Document.

    Args:
        text: Source text
        config: Compiler configuration (defaults apply when None)
        cancel: Optional cancel signal, checked at every phase boundary

    Returns:
        CompileResult. Syntax and semantic problems are diagnostics, never
        exceptions. A cancelled run returns no document and a single
        Cancelled diagnostic.
    """
    config = config or CompilerConfig()

    def checkpoint(phase: str) -> None:
        if cancel is not None and cancel.is_set():
            raise CompilationCancelled(f"Compilation cancelled before {phase}")

    try:
        checkpoint("lexing")
        with _phase("Lexing"):
            tokens, lex_diagnostics = tokenize(text)

        checkpoint("parsing")
        with _phase("Parsing"):
            parser = Parser(tokens)
            tree = parser.parse()

        checkpoint("scope tree construction")
        with _phase("Linking"):
            scope_tree, resolved = link(tree, workers=config.workers, checkpoint=checkpoint)

        checkpoint("metadata binding")
        with _phase("Metadata binding"):
            bound = bind_metadata(scope_tree.elements, resolved.metadata, config)

        checkpoint("validation")
        with _phase("Validation"):
            document = assemble_document(
                lex_diagnostics + parser.diagnostics, scope_tree, resolved, bound
            )
    except CompilationCancelled as e:
        logger.info("%s", e.message)
        cancelled = ir.Diagnostic.error(ir.DiagnosticCode.CANCELLED, e.message)
        return CompileResult(document=None, diagnostics=(cancelled,))

    return CompileResult(document=document, diagnostics=tuple(document.diagnostics))
