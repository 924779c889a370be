"""Shared helpers for the pyquotable CLI."""
