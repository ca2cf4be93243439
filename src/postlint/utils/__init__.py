"""Shared helpers for postlint."""
