"""Centralized exceptions for the postlint application."""


class PostlintError(Exception):
    """Base exception for all postlint errors."""


class PostPathNotFoundError(PostlintError):
    """Raised when a path given to the linter does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Path not found: {path}")


class NoPostsFoundError(PostlintError):
    """Raised when discovery yields no post files at all."""

    def __init__(self, searched: list[str]) -> None:
        self.searched = searched
        super().__init__(f"No posts found under: {', '.join(searched)}")
