"""Content models."""

from postlint.models.post import Post, PostReadError

__all__ = ["Post", "PostReadError"]
