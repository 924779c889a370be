"""Command line interface for pyquotable."""
