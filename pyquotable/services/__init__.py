"""Service modules for pyquotable."""
