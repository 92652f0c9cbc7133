"""Tests for banda.output.console module."""

from __future__ import annotations

import pytest

from banda.output.console import (
    ConsoleProtocol,
    MockConsole,
    OutputRecord,
    RichConsole,
    Style,
)


class TestStyle:
    def test_str_conversion(self) -> None:
        assert str(Style.SUCCESS) == "success"
        assert str(Style.ERROR) == "error"
        assert str(Style.DEFAULT) == "default"

    def test_all_styles_exist(self) -> None:
        expected = {"DEFAULT", "SUCCESS", "ERROR", "WARNING"}
        assert {s.name for s in Style} == expected


class TestMockConsole:
    """Test MockConsole for testing purposes."""

    def test_print_captures_message(self) -> None:
        console = MockConsole()
        console.print("Resuming...")
        assert console.outputs == [OutputRecord("Resuming...", Style.DEFAULT)]

    def test_shortcuts_record_raw_message_with_style(self) -> None:
        console = MockConsole()
        console.success("done")
        console.error("Tag 'v1.4.6' already exists.")
        console.warning("merge it")

        assert console.messages == ["done", "Tag 'v1.4.6' already exists.", "merge it"]
        assert [o.style for o in console.outputs] == [
            Style.SUCCESS,
            Style.ERROR,
            Style.WARNING,
        ]

    def test_last_skips_blank_lines(self) -> None:
        console = MockConsole()
        console.success("Finished!")
        console.print("")

        assert console.last == OutputRecord("Finished!", Style.SUCCESS)

    def test_last_empty(self) -> None:
        assert MockConsole().last is None

    def test_clear(self) -> None:
        console = MockConsole()
        console.print("a")
        console.clear()
        assert console.outputs == []

    def test_text_and_find(self) -> None:
        console = MockConsole()
        console.print("Merging 'develop' -> 'release/v1.4.6'")
        console.print("Pushing 'master' to remote...")

        assert console.text == (
            "Merging 'develop' -> 'release/v1.4.6'\nPushing 'master' to remote..."
        )
        assert len(console.find("Pushing")) == 1

    def test_has_error_and_count(self) -> None:
        console = MockConsole()
        console.error("bad")
        console.error("worse")
        console.print("fine")

        assert console.has_error()
        assert console.count(Style.ERROR) == 2


class TestRichConsole:
    def test_implements_protocol(self) -> None:
        console: ConsoleProtocol = RichConsole()
        assert callable(console.print)

    def test_markup_is_not_interpreted(self, capsys: pytest.CaptureFixture[str]) -> None:
        RichConsole().print("Branch '[bold]x[/bold]' missing")
        assert "[bold]x[/bold]" in capsys.readouterr().out
