"""Operator input for negotiation."""

from __future__ import annotations

from typing import Protocol

import typer

__all__ = ["InputProvider", "TerminalInput"]


class InputProvider(Protocol):
    def ask_confirm(self, prompt: str, default: bool) -> bool: ...

    def ask_text(self, prompt: str, default: str) -> str: ...


class TerminalInput:
    """Interactive prompts on the controlling terminal."""

    def ask_confirm(self, prompt: str, default: bool) -> bool:
        return typer.confirm(prompt, default=default)

    def ask_text(self, prompt: str, default: str) -> str:
        answer: str = typer.prompt(prompt, default=default) if default else typer.prompt(prompt)
        return answer.strip()
