"""Core data models shared across parsecheck components."""

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath


class Dialect(str, Enum):
    """Grammar variant a source file is parsed with."""

    TYPESCRIPT = "typescript"
    TSX = "tsx"


class ParseOutcome(str, Enum):
    """Classified result of one parse attempt on one file."""

    OK = "ok"
    PARSE_ERROR = "parse_err"
    INTERNAL_FAULT = "internal_fault"
    NO_PARSER = "no_parser"


def extension_of(path: str) -> str:
    """Return the text after the last dot of the base name, without the dot."""
    name = PurePath(path).name
    _, dot, ext = name.rpartition(".")
    return ext if dot else ""


@dataclass(frozen=True)
class SourceFile:
    """A loaded source file whose bytes are known to be valid UTF-8."""

    path: str
    data: bytes

    @property
    def extension(self) -> str:
        return extension_of(self.path)

    @property
    def text(self) -> str:
        return self.data.decode("utf-8")


@dataclass(frozen=True)
class OutcomeKey:
    """Aggregation key pairing an outcome with a file extension."""

    outcome: ParseOutcome
    extension: str

    def __str__(self) -> str:
        return f"{self.outcome.value} ({self.extension})"
