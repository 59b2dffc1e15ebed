"""Extension to dialect selection and tree-sitter language lookup."""

from __future__ import annotations

from typing import Callable, Dict, Optional

import tree_sitter_typescript
from tree_sitter import Language

from .config import HarnessConfig
from .models import Dialect

_LANGUAGE_FACTORIES: Dict[Dialect, Callable[[], object]] = {
    Dialect.TYPESCRIPT: tree_sitter_typescript.language_typescript,
    Dialect.TSX: tree_sitter_typescript.language_tsx,
}

_LANGUAGES: Dict[Dialect, Language] = {}


def dialect_for(extension: str, config: HarnessConfig) -> Optional[Dialect]:
    """Return the dialect configured for ``extension`` or None when unmapped."""
    return config.dialects.get(extension)


def language_for(dialect: Dialect) -> Language:
    """Return the (cached) tree-sitter language backing ``dialect``."""
    language = _LANGUAGES.get(dialect)
    if language is None:
        language = Language(_LANGUAGE_FACTORIES[dialect]())
        _LANGUAGES[dialect] = language
    return language


__all__ = ["dialect_for", "language_for"]
