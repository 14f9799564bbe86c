"""Concrete repository implementations using SQLModel."""

from .options import SQLModelOptionRepository

__all__ = ["SQLModelOptionRepository"]
