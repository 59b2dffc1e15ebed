"""Run orchestration: load, parse-and-count, report, inspect."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .aggregator import OutcomeAggregator
from .config import HarnessConfig
from .inspection import inspect_sources
from .loader import load_sources
from .logging import get_logger
from .models import SourceFile
from .parser import ParseContext, Parser
from .runner import ParseRunner, ParserFactory

logger = get_logger("harness")

Emit = Callable[[str], None]


@dataclass
class HarnessResult:
    """Everything a run produced, for callers that want more than stdout."""

    sources: List[SourceFile]
    aggregator: OutcomeAggregator
    repeat_aggregator: Optional[OutcomeAggregator] = None
    inspected_lines: int = 0


class Harness:
    """Coordinates the batch parse pass and the tree inspection pass."""

    def __init__(
        self,
        config: HarnessConfig | None = None,
        *,
        parser_factory: ParserFactory = Parser,
        emit: Emit = print,
    ) -> None:
        self.config = config or HarnessConfig()
        self._emit = emit
        self._runner = ParseRunner(self.config, parser_factory=parser_factory, emit=emit)

    def load(self, root: str) -> List[SourceFile]:
        sources = load_sources(root, self.config, emit=self._emit)
        self._emit(f"loaded {len(sources)} files")
        return sources

    def tally(self, ctx: ParseContext, sources: Sequence[SourceFile]) -> OutcomeAggregator:
        """Attempt every source once and count the outcomes."""
        aggregator = OutcomeAggregator()
        for source in sources:
            aggregator.record(self._runner.run(ctx, source), source.extension)
        return aggregator

    def report(self, aggregator: OutcomeAggregator) -> None:
        self._emit("")
        for line in aggregator.render():
            self._emit(line)

    def check(
        self, ctx: ParseContext, sources: Sequence[SourceFile]
    ) -> tuple[OutcomeAggregator, Optional[OutcomeAggregator]]:
        """Tally, print the report, then optionally run the repeat pass."""
        aggregator = self.tally(ctx, sources)
        self.report(aggregator)
        repeat = None
        if self.config.repeat_pass:
            logger.debug("Running repeat parse pass over %d files", len(sources))
            repeat = self.tally(ctx, sources)
            if repeat.counts != aggregator.counts:
                logger.warning("Repeat pass disagrees with the first pass: %s", repeat.render())
        return aggregator, repeat

    def inspect(self, ctx: ParseContext, sources: Sequence[SourceFile]) -> int:
        return inspect_sources(ctx, sources, self.config, emit=self._emit)

    def run(self, root: str, ctx: ParseContext | None = None) -> HarnessResult:
        """Execute the full run; discovery and inspection failures propagate."""
        ctx = ctx or ParseContext.background()
        sources = self.load(root)
        aggregator, repeat = self.check(ctx, sources)
        result = HarnessResult(sources=sources, aggregator=aggregator, repeat_aggregator=repeat)
        result.inspected_lines = self.inspect(ctx, sources)
        return result


__all__ = ["Harness", "HarnessResult"]
