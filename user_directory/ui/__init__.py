"""Operator-facing interfaces."""

from .terminal_app import MENU_OPTIONS, SessionState, TerminalApp, TerminalPrompter

__all__ = ["MENU_OPTIONS", "SessionState", "TerminalApp", "TerminalPrompter"]
