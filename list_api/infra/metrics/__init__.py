"""Prometheus metrics registry and collectors."""

from .prometheus import REGISTRY

__all__ = ["REGISTRY"]
