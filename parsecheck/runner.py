"""Per-file parse attempts isolated from parser failures."""

from __future__ import annotations

from typing import Callable, Optional, Protocol

from .config import HarnessConfig
from .dialects import dialect_for
from .logging import get_logger
from .models import ParseOutcome, SourceFile
from .parser import (
    ErrorPolicy,
    EventSink,
    Lexer,
    ParseCancelled,
    ParseContext,
    Parser,
    SyntaxFault,
    discard_events,
    stop_on_first_error,
)

logger = get_logger("runner")

Emit = Callable[[str], None]


class SupportsParse(Protocol):
    def parse(self, ctx: ParseContext, lexer: Lexer) -> Optional[Exception]:
        ...


ParserFactory = Callable[[ErrorPolicy, EventSink], SupportsParse]


class ParseRunner:
    """Classifies one parse attempt per file without letting parser failures escape."""

    def __init__(
        self,
        config: HarnessConfig,
        *,
        parser_factory: ParserFactory = Parser,
        error_policy: ErrorPolicy = stop_on_first_error,
        event_sink: EventSink = discard_events,
        emit: Emit = print,
    ) -> None:
        self._config = config
        self._parser_factory = parser_factory
        self._error_policy = error_policy
        self._event_sink = event_sink
        self._emit = emit

    def run(self, ctx: ParseContext, source: SourceFile) -> ParseOutcome:
        """Return the outcome of parsing ``source``; never raises parser faults."""
        try:
            outcome = self._attempt(ctx, source)
        except ParseCancelled:
            raise
        except Exception as exc:
            logger.debug("Parser fault on %s", source.path, exc_info=True)
            self._emit(f"{source.path}: recovered: {type(exc).__name__}: {exc}")
            outcome = ParseOutcome.INTERNAL_FAULT
        logger.debug("%s -> %s", source.path, outcome.value)
        return outcome

    def _attempt(self, ctx: ParseContext, source: SourceFile) -> ParseOutcome:
        dialect = dialect_for(source.extension, self._config)
        if dialect is None:
            return ParseOutcome.NO_PARSER

        lexer = Lexer(source.data, dialect)
        parser = self._parser_factory(self._error_policy, self._event_sink)
        error = parser.parse(ctx, lexer)
        if error is None:
            return ParseOutcome.OK

        suffix = ""
        if isinstance(error, SyntaxFault) and error.has_valid_range(len(source.data)):
            snippet = source.data[error.offset : error.endoffset].decode("utf-8", errors="replace")
            suffix = f" on `{snippet}`"
        self._emit(f"{source.path}: {error}{suffix}")
        return ParseOutcome.PARSE_ERROR


__all__ = ["ParseRunner", "ParserFactory"]
