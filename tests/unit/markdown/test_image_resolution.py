"""Tests for resolving image references to site files."""

from pathlib import Path

import pytest

from postlint.markdown.images import is_remote, resolve_image, strip_placeholders


@pytest.mark.parametrize(
    ("target", "expected"),
    [
        ("{{ site.baseurl }}/assets/a.png", "/assets/a.png"),
        ("{{site.url}}{{site.baseurl}}/assets/a.png", "/assets/a.png"),
        ('{{ "/assets/b.png" | relative_url }}', "/assets/b.png"),
        ("{{ '/assets/c.png' | absolute_url }}", "/assets/c.png"),
        ("/assets/plain.png", "/assets/plain.png"),
    ],
)
def test_strip_placeholders(target, expected):
    assert strip_placeholders(target) == expected


@pytest.mark.parametrize(
    "target",
    ["https://example.com/a.png", "HTTP://EXAMPLE.COM/A.PNG", "//cdn.example.com/a.png", "data:image/png;base64,AAA"],
)
def test_remote_targets_are_skipped(target):
    assert is_remote(target)
    assert resolve_image(target, Path("/site")) is None


def test_unknown_liquid_is_skipped():
    assert resolve_image("{{ page.header.image }}", Path("/site")) is None


def test_query_fragment_and_escapes():
    resolved = resolve_image("{{ site.baseurl }}/assets/images/a%20b.png?v=1#top", Path("/site"))

    assert resolved is not None
    assert resolved.url_path == "/assets/images/a b.png"
    assert resolved.path == Path("/site/assets/images/a b.png")


def test_relative_target_resolves_against_site_root():
    resolved = resolve_image("assets/a.png", Path("/site"))

    assert resolved is not None
    assert resolved.path == Path("/site/assets/a.png")


def test_fragment_only_is_skipped():
    assert resolve_image("#anchor", Path("/site")) is None


def test_path_climbing_out_of_the_site(tmp_path: Path):
    site_root = tmp_path / "site"
    site_root.mkdir()

    outside = resolve_image("../secret.png", site_root)
    inside = resolve_image("/assets/../assets/a.png", site_root)

    assert outside is not None
    assert not outside.within_site
    assert inside is not None
    assert inside.within_site
