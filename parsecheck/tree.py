"""Navigable syntax trees built from a full parse."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional

from tree_sitter import Node as TSNode

from .models import Dialect, SourceFile
from .parser import ErrorPolicy, Lexer, ParseContext, Parser, SyntaxFault, stop_on_first_error
from .selector import Selector


class InspectionError(RuntimeError):
    """Base class for failures while building or walking an inspected tree."""


class TreeParseError(InspectionError):
    """Raised when a file cannot be turned into a syntax tree."""

    def __init__(self, path: str, message: str, fault: Optional[SyntaxFault] = None) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path
        self.fault = fault


class MissingChild(InspectionError):
    """Raised when a node has no child or descendant matching a selector."""

    def __init__(self, node: "Node", relation: str) -> None:
        super().__init__(
            f"{node.type} at offset {node.offset} has no matching {relation}"
        )
        self.node = node
        self.relation = relation


@dataclass(frozen=True, eq=False)
class Node:
    """A named syntax node; anonymous tokens and comments are never exposed."""

    tree: "Tree"
    _ts: TSNode

    @property
    def type(self) -> str:
        return self._ts.type

    @property
    def offset(self) -> int:
        return self._ts.start_byte

    @property
    def endoffset(self) -> int:
        return self._ts.end_byte

    @property
    def text(self) -> str:
        return self.tree.source[self.offset : self.endoffset].decode("utf-8", errors="replace")

    def children(self, selector: Selector) -> List["Node"]:
        """Return the direct named children matching ``selector`` in source order."""
        nodes = (Node(self.tree, child) for child in _syntax_children(self._ts))
        return [node for node in nodes if selector(node)]

    def child(self, selector: Selector) -> "Node":
        """Return the first direct child matching ``selector``."""
        for node in self.children(selector):
            return node
        raise MissingChild(self, "child")

    def first_descendant(self, selector: Selector) -> "Node":
        """Return the first descendant (pre-order, excluding self) matching ``selector``."""
        for node in self._descendants():
            if selector(node):
                return node
        raise MissingChild(self, "descendant")

    def _descendants(self) -> Iterator["Node"]:
        stack = list(reversed(_syntax_children(self._ts)))
        while stack:
            current = stack.pop()
            yield Node(self.tree, current)
            stack.extend(reversed(_syntax_children(current)))


def _syntax_children(node: TSNode) -> List[TSNode]:
    # Comments are named "extra" nodes in tree-sitter; they are not part of the syntax.
    return [child for child in node.named_children if not child.is_extra]


class Tree:
    """A parsed file anchored at its root node."""

    def __init__(self, path: str, source: bytes, root: TSNode) -> None:
        self.path = path
        self.source = source
        self._root = root

    def root(self) -> Node:
        return Node(self, self._root)


def parse_tree(
    ctx: ParseContext,
    source: SourceFile,
    dialect: Optional[Dialect],
    error_policy: ErrorPolicy = stop_on_first_error,
) -> Tree:
    """Parse ``source`` into a :class:`Tree`, raising :class:`TreeParseError` on failure."""
    if dialect is None:
        raise TreeParseError(source.path, f"no parser available for .{source.extension} files")
    parser = Parser(error_policy=error_policy)
    fault = parser.parse(ctx, Lexer(source.data, dialect))
    if fault is not None:
        raise TreeParseError(source.path, str(fault), fault)
    if parser.tree is None:
        raise TreeParseError(source.path, "parser produced no tree")
    return Tree(source.path, source.data, parser.tree.root_node)


__all__ = [
    "InspectionError",
    "MissingChild",
    "Node",
    "Tree",
    "TreeParseError",
    "parse_tree",
]
