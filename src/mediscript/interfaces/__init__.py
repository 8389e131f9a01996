"""Abstract interfaces for the review engine."""

from __future__ import annotations

from mediscript.interfaces.reviewer import IReviewer

__all__ = ["IReviewer"]
