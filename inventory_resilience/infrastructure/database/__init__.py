"""Resilient database connection bootstrap."""

from .bootstrap import DatabaseBootstrap

__all__ = ["DatabaseBootstrap"]
