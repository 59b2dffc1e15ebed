"""Lexer/parser contract over tree-sitter with pluggable error and event callbacks.

The harness talks to the parser through three small pieces:

* :class:`Lexer` holds the source bytes and the dialect they are parsed with.
* :class:`Parser` runs tree-sitter and replays the resulting tree as a stream
  of structural events. Syntax problems (``ERROR`` and ``MISSING`` nodes) are
  offered to an error policy which decides whether parsing continues.
* :class:`ParseContext` carries cancellation and an optional deadline.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Iterator, List, Optional, Union

from tree_sitter import Node as TSNode
from tree_sitter import Parser as TSParser
from tree_sitter import Tree as TSTree

from .dialects import language_for
from .models import Dialect


class ParseCancelled(Exception):
    """Raised when a parse is aborted through its context."""


class ParseContext:
    """Cancellation-aware execution context passed to every parse call."""

    def __init__(self, deadline: Optional[float] = None) -> None:
        self._deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def background(cls) -> "ParseContext":
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> "ParseContext":
        return cls(deadline=time.monotonic() + seconds)

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    @property
    def cancelled(self) -> bool:
        if self._cancelled.is_set():
            return True
        return self._deadline is not None and time.monotonic() >= self._deadline

    def cancel(self) -> None:
        self._cancelled.set()

    def check(self) -> None:
        """Raise :class:`ParseCancelled` once the context is cancelled or expired."""
        if self._cancelled.is_set():
            raise ParseCancelled("parse cancelled")
        if self._deadline is not None and time.monotonic() >= self._deadline:
            raise ParseCancelled("parse deadline exceeded")


class SyntaxFault(Exception):
    """A syntax error located by byte offsets into the parsed source."""

    def __init__(
        self,
        description: str,
        offset: Optional[int] = None,
        endoffset: Optional[int] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        super().__init__(description)
        self.description = description
        self.offset = offset
        self.endoffset = endoffset
        self.line = line
        self.column = column

    @classmethod
    def from_node(cls, node: TSNode) -> "SyntaxFault":
        row, column = node.start_point
        if node.is_missing:
            description = f"syntax error: missing {node.type} at line {row + 1}:{column + 1}"
        else:
            description = f"syntax error at line {row + 1}:{column + 1}"
        return cls(
            description,
            offset=node.start_byte,
            endoffset=node.end_byte,
            line=row + 1,
            column=column + 1,
        )

    def has_valid_range(self, size: int) -> bool:
        if self.offset is None or self.endoffset is None:
            return False
        return 0 <= self.offset <= self.endoffset <= size

    def __str__(self) -> str:
        return self.description


ErrorPolicy = Callable[[SyntaxFault], bool]
EventSink = Callable[[str, int, int], None]


def stop_on_first_error(fault: SyntaxFault) -> bool:
    """Error policy that refuses every fault, so parsing stops at the first one."""
    return False


def continue_on_error(fault: SyntaxFault) -> bool:
    return True


def discard_events(node_type: str, offset: int, endoffset: int) -> None:
    """Event sink that ignores every structural event."""


class Lexer:
    """Source bytes plus the dialect the parser should read them with."""

    def __init__(self, source: Union[bytes, str], dialect: Dialect = Dialect.TYPESCRIPT) -> None:
        self.source = source.encode("utf-8") if isinstance(source, str) else source
        self.dialect = dialect


class Parser:
    """Runs tree-sitter for one lexer and reports faults and node events."""

    def __init__(
        self,
        error_policy: ErrorPolicy = stop_on_first_error,
        event_sink: EventSink = discard_events,
    ) -> None:
        self._error_policy = error_policy
        self._event_sink = event_sink
        self.tree: Optional[TSTree] = None

    def parse(self, ctx: ParseContext, lexer: Lexer) -> Optional[SyntaxFault]:
        """Parse ``lexer``'s source; return the first fault the policy refuses."""
        ctx.check()
        ts_parser = TSParser(language_for(lexer.dialect))
        tree = ts_parser.parse(lexer.source)
        self.tree = tree
        ctx.check()

        for node in _walk_postorder(tree.root_node):
            ctx.check()
            if node.type == "ERROR" or node.is_missing:
                fault = SyntaxFault.from_node(node)
                if not self._error_policy(fault):
                    return fault
                continue
            if node.is_named:
                self._event_sink(node.type, node.start_byte, node.end_byte)
        return None


def _walk_postorder(root: TSNode) -> Iterator[TSNode]:
    """Yield nodes children-first; ERROR nodes are not descended into."""
    stack: List[tuple[TSNode, bool]] = [(root, False)]
    while stack:
        node, expanded = stack.pop()
        if expanded or node.type == "ERROR" or node.child_count == 0:
            yield node
            continue
        stack.append((node, True))
        for child in reversed(node.children):
            stack.append((child, False))


__all__ = [
    "ErrorPolicy",
    "EventSink",
    "Lexer",
    "ParseCancelled",
    "ParseContext",
    "Parser",
    "SyntaxFault",
    "continue_on_error",
    "discard_events",
    "stop_on_first_error",
]
