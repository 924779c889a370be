"""Command modules for the pyquotable CLI."""

from pyquotable.cli.commands import quotes

__all__ = ["quotes"]
