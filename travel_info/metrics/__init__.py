"""Metrics helpers."""

from .core import record_source_call

__all__ = ["record_source_call"]
