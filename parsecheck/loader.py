"""Directory walking and source loading for a parse run."""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Callable, Iterator, List

from .config import HarnessConfig
from .logging import get_logger
from .models import SourceFile, extension_of

logger = get_logger("loader")

PrunePredicate = Callable[[str, str], bool]
Emit = Callable[[str], None]


def _raise(error: OSError) -> None:
    raise error


def iter_files(root: str, prune: PrunePredicate) -> Iterator[str]:
    """Yield regular file paths under ``root`` depth-first in sorted name order.

    ``prune(dirpath, name)`` is consulted for every subdirectory; returning True
    drops that directory and everything beneath it. Walk errors propagate.
    """
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames.sort()
        dirnames[:] = [name for name in dirnames if not prune(dirpath, name)]

        for filename in sorted(filenames):
            path = os.path.join(dirpath, filename)
            if not stat.S_ISREG(os.lstat(path).st_mode):
                continue
            yield path


def load_sources(root: str, config: HarnessConfig, emit: Emit = print) -> List[SourceFile]:
    """Return every supported, UTF-8 decodable file under ``root`` in walk order."""
    root_path = Path(root).expanduser()
    if not root_path.exists():
        raise FileNotFoundError(f"Source root not found: {root}")
    if not root_path.is_dir():
        raise NotADirectoryError(f"Source root is not a directory: {root}")

    def _prune(dirpath: str, name: str) -> bool:
        if name in config.prune_dirs:
            emit(f"skipping {name}")
            logger.debug("Pruned %s", os.path.join(dirpath, name))
            return True
        return False

    sources: List[SourceFile] = []
    for path in iter_files(str(root_path), _prune):
        if not config.supports(extension_of(path)):
            continue
        with open(path, "rb") as handle:
            data = handle.read()
        try:
            data.decode("utf-8")
        except UnicodeDecodeError:
            emit(f"skipping a non-utf8 file: {path}")
            continue
        sources.append(SourceFile(path=path, data=data))

    logger.debug("Loaded %d source files from %s", len(sources), root)
    return sources


__all__ = ["iter_files", "load_sources"]
