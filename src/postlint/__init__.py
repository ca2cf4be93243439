"""postlint: structural linter for static-site blog posts."""

from postlint.linter import LintReport, discover_posts, lint_posts
from postlint.models.post import Post

__version__ = "0.3.0"
__all__ = [
    "LintReport",
    "Post",
    "discover_posts",
    "lint_posts",
]
