"""Shallow structural dump of parsed files for manual inspection."""

from __future__ import annotations

from typing import Callable, Iterable, Iterator

from . import selector
from .config import HarnessConfig
from .dialects import dialect_for
from .models import SourceFile
from .parser import ParseContext
from .tree import Tree, parse_tree

Emit = Callable[[str], None]


def describe_tree(tree: Tree) -> Iterator[str]:
    """Yield the root type, then each root child's type and its first descendant's type.

    Raises :class:`~parsecheck.tree.MissingChild` when a root child has no
    named descendant.
    """
    root = tree.root()
    yield root.type
    for node in root.children(selector.ANY):
        yield node.type
        yield node.first_descendant(selector.ANY).type


def inspect_sources(
    ctx: ParseContext,
    sources: Iterable[SourceFile],
    config: HarnessConfig,
    emit: Emit = print,
) -> int:
    """Re-parse every source and emit its structure; any failure aborts the pass.

    Returns the number of lines emitted.
    """
    emitted = 0
    for source in sources:
        tree = parse_tree(ctx, source, dialect_for(source.extension, config))
        for line in describe_tree(tree):
            emit(line)
            emitted += 1
    return emitted


__all__ = ["describe_tree", "inspect_sources"]
