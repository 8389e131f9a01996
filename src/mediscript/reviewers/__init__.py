"""Prescription reviewers."""

from __future__ import annotations

from mediscript.reviewers.reviewer import ReviewerClient, build_review_prompts

__all__ = ["ReviewerClient", "build_review_prompts"]
