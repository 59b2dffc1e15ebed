"""End-to-end tests for parsecheck.harness."""

from __future__ import annotations

import pytest

from parsecheck.config import HarnessConfig
from parsecheck.harness import Harness
from parsecheck.models import OutcomeKey, ParseOutcome
from parsecheck.parser import Lexer, ParseCancelled, ParseContext, Parser
from parsecheck.tree import MissingChild, TreeParseError

VALID_TS = "const answer: number = 42;\n"


class FaultOnMarker:
    """Parser wrapper that crashes on sources containing ``boom``."""

    def __init__(self, error_policy, event_sink) -> None:
        self._inner = Parser(error_policy, event_sink)

    def parse(self, ctx: ParseContext, lexer: Lexer):
        if b"boom" in lexer.source:
            raise IndexError("index out of range [3] with length 3")
        return self._inner.parse(ctx, lexer)


def test_mixed_tree_reports_each_outcome(source_tree, emitted: list[str]) -> None:
    source_tree.write(
        {
            "a.ts": VALID_TS,
            "b.tsx": "const broken = ]];\n",
            "c.txt": "plain text\n",
        }
    )
    harness = Harness(emit=emitted.append)
    ctx = ParseContext.background()

    sources = harness.load(source_tree.path())
    aggregator, repeat = harness.check(ctx, sources)

    assert emitted[0] == "loaded 2 files"
    assert emitted[1].startswith(f"{source_tree.path('b.tsx')}: syntax error")
    assert emitted[2:] == ["", "         1 ok (ts)", "         1 parse_err (tsx)"]
    assert aggregator.total == len(sources) == 2
    assert repeat is None


def test_run_stops_when_inspection_hits_a_syntax_error(source_tree, emitted: list[str]) -> None:
    source_tree.write({"a.ts": VALID_TS, "b.tsx": "const broken = ]];\n"})
    harness = Harness(emit=emitted.append)

    with pytest.raises(TreeParseError) as excinfo:
        harness.run(source_tree.path())

    assert excinfo.value.path == source_tree.path("b.tsx")
    assert "         1 parse_err (tsx)" in emitted
    assert emitted[-3:] == ["program", "lexical_declaration", "variable_declarator"]


def test_internal_fault_does_not_abort_the_batch(source_tree, emitted: list[str]) -> None:
    source_tree.write(
        {
            "a.ts": "let first = 1;\n",
            "b.ts": "const boom = 2;\n",
            "c.ts": "let third = 3;\n",
        }
    )
    harness = Harness(parser_factory=FaultOnMarker, emit=emitted.append)

    result = harness.run(source_tree.path())

    recovered = [line for line in emitted if ": recovered: " in line]
    assert recovered == [
        f"{source_tree.path('b.ts')}: recovered: IndexError: index out of range [3] with length 3"
    ]
    assert result.aggregator.counts == {
        OutcomeKey(ParseOutcome.INTERNAL_FAULT, "ts"): 1,
        OutcomeKey(ParseOutcome.OK, "ts"): 2,
    }
    assert "         1 internal_fault (ts)" in emitted
    assert "         2 ok (ts)" in emitted


def test_every_loaded_file_gets_exactly_one_outcome(source_tree, emitted: list[str]) -> None:
    source_tree.write(
        {
            "one.ts": VALID_TS,
            "two.tsx": "const el = <span>ok</span>;\n",
            "three.ts": "function ( {\n",
            "four.ts": "const boom = 4;\n",
            "skip.md": "# notes\n",
            "bad.ts": b"\xff\xfe\x00",
        }
    )
    harness = Harness(parser_factory=FaultOnMarker, emit=emitted.append)

    sources = harness.load(source_tree.path())
    aggregator, _ = harness.check(ParseContext.background(), sources)

    assert len(sources) == 4
    assert aggregator.total == 4
    assert emitted.count(f"skipping a non-utf8 file: {source_tree.path('bad.ts')}") == 1


def test_git_directory_is_pruned_with_single_notice(source_tree, emitted: list[str]) -> None:
    source_tree.write({"main.ts": VALID_TS, ".git/tracked.ts": VALID_TS})
    harness = Harness(emit=emitted.append)

    result = harness.run(source_tree.path())

    assert [source.path for source in result.sources] == [source_tree.path("main.ts")]
    assert emitted.count("skipping .git") == 1
    assert emitted[:2] == ["skipping .git", "loaded 1 files"]


def test_extension_without_dialect_counts_as_no_parser(source_tree, emitted: list[str]) -> None:
    source_tree.write({"a.ts": VALID_TS, "b.js": "var b = 1;\n"})
    harness = Harness(HarnessConfig(extensions={"ts", "js"}), emit=emitted.append)

    sources = harness.load(source_tree.path())
    aggregator, _ = harness.check(ParseContext.background(), sources)

    assert aggregator.render() == ["         1 no_parser (js)", "         1 ok (ts)"]


def test_repeat_pass_counts_again_without_printing(source_tree, emitted: list[str]) -> None:
    source_tree.write({"a.ts": VALID_TS, "b.ts": "let b = 2;\n"})
    harness = Harness(HarnessConfig(repeat_pass=True), emit=emitted.append)

    result = harness.run(source_tree.path())

    assert result.repeat_aggregator is not None
    assert result.repeat_aggregator.counts == result.aggregator.counts
    assert emitted.count("         2 ok (ts)") == 1


def test_inspection_output_lists_root_children(source_tree, emitted: list[str]) -> None:
    source_tree.write({"a.ts": 'import fs from "fs";\n' + VALID_TS})
    harness = Harness(emit=emitted.append)

    result = harness.run(source_tree.path())

    assert emitted[-5:] == [
        "program",
        "import_statement",
        "import_clause",
        "lexical_declaration",
        "variable_declarator",
    ]
    assert result.inspected_lines == 5


def test_inspection_fails_on_child_without_descendant(source_tree, emitted: list[str]) -> None:
    source_tree.write({"a.ts": "debugger;\n"})
    harness = Harness(emit=emitted.append)

    with pytest.raises(MissingChild):
        harness.run(source_tree.path())

    assert emitted[-2:] == ["program", "debugger_statement"]


def test_cancelled_run_halts(source_tree, emitted: list[str]) -> None:
    source_tree.write({"a.ts": VALID_TS})
    ctx = ParseContext.background()
    ctx.cancel()

    with pytest.raises(ParseCancelled):
        Harness(emit=emitted.append).run(source_tree.path(), ctx)

    assert emitted == ["loaded 1 files"]


def test_inspection_skips_leading_comments(source_tree, emitted: list[str]) -> None:
    source_tree.write({"a.ts": "// Copyright header\n" + VALID_TS})
    harness = Harness(emit=emitted.append)

    result = harness.run(source_tree.path())

    assert emitted[-3:] == ["program", "lexical_declaration", "variable_declarator"]
    assert result.inspected_lines == 3
