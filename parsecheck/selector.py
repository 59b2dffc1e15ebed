"""Predicates for choosing nodes within a parsed tree."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .tree import Node

Selector = Callable[["Node"], bool]


def ANY(node: "Node") -> bool:
    """Match every node."""
    return True


def of_type(*types: str) -> Selector:
    """Return a selector matching nodes whose type is one of ``types``."""
    wanted = frozenset(types)

    def _matches(node: "Node") -> bool:
        return node.type in wanted

    return _matches


__all__ = ["ANY", "Selector", "of_type"]
