"""Declarative browser automation: run JSON task files against Playwright."""

__version__ = "0.1.0"
