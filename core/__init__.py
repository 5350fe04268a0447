"""Core package: Paradox script parsing and requirement graph construction."""
