"""Markdown and front matter parsing helpers."""
