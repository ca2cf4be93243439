"""Shared fixtures: a throwaway Jekyll-style site with posts and assets."""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

import pytest

from postlint.config import PostlintConfig
from postlint.linter import LintReport, lint_posts

GOOD_POST = """\
---
title: Generating images with Stable Diffusion
excerpt: A walkthrough of prompts and samplers.
last_modified_at: "2023-05-01 10:00:00 +0900"
categories: [AI]
tags: [stable-diffusion, Python]
image: /assets/images/cover.png
---

Intro paragraph.

![Result]({{ site.baseurl }}/assets/images/result.png)

```python
print("hello")
```
"""


def front_matter(**fields: str) -> str:
    """Build a post header with sensible defaults for the required fields."""
    values = {
        "title": "A post",
        "excerpt": "Short summary.",
        "last_modified_at": "2023-01-01",
        **fields,
    }
    lines = [f"{key}: {value}" for key, value in values.items() if value is not None]
    return "---\n" + "\n".join(lines) + "\n---\n"


@dataclass
class SiteFixture:
    """Handle on a temporary site root."""

    root: Path

    @property
    def posts_dir(self) -> Path:
        return self.root / "_posts"

    def write_post(self, name: str, text: str) -> Path:
        path = self.posts_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    def add_asset(self, relative: str, data: bytes = b"\x89PNG\r\n") -> Path:
        path = self.root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path

    def write_config(self, toml: str) -> Path:
        path = self.root / ".postlint" / "postlint.toml"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(toml, encoding="utf-8")
        return path


@pytest.fixture(autouse=True)
def _clean_postlint_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("POSTLINT_"):
            monkeypatch.delenv(key)


@pytest.fixture
def site(tmp_path: Path) -> SiteFixture:
    fixture = SiteFixture(root=tmp_path / "site")
    fixture.posts_dir.mkdir(parents=True)
    fixture.add_asset("assets/images/cover.png")
    fixture.add_asset("assets/images/result.png")
    return fixture


@pytest.fixture
def lint(site: SiteFixture) -> Callable[..., LintReport]:
    """Lint the fixture site's posts directory."""

    def _lint(*, select: Sequence[str] | None = None, config: PostlintConfig | None = None) -> LintReport:
        return lint_posts(None, config or PostlintConfig(), site.root, select=select)

    return _lint
