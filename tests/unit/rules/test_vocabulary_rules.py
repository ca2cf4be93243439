"""Tests for tag and category vocabulary consistency."""

from pathlib import Path

import pytest

from postlint.config import PostlintConfig
from postlint.models import Post
from postlint.rules.vocabulary import collect_vocabulary, term_key

from conftest import front_matter


@pytest.mark.parametrize(
    ("term", "key"),
    [
        ("React Hooks", "react-hooks"),
        ("react_hooks", "react-hooks"),
        ("  Café ", "cafe"),
        ("C++", "c++"),
        ("C#", "c#"),
    ],
)
def test_term_key(term, key):
    assert term_key(term) == key


def test_collect_vocabulary_groups_spellings():
    posts = [
        Post.from_text(Path("a.md"), "---\ncategories: [Web]\ntags: [React]\n---\n"),
        Post.from_text(Path("b.md"), "---\ntags: [react, web]\n---\n"),
    ]

    vocabulary = collect_vocabulary(posts, ["categories", "tags"])

    assert list(vocabulary) == ["react", "web"]
    assert vocabulary["web"].fields == {"categories", "tags"}
    assert vocabulary["react"].count == 2
    assert vocabulary["react"].has_variants


def test_canonical_prefers_most_used_then_alphabetical():
    posts = [Post.from_text(Path(f"{n}.md"), f"---\ntags: [{tag}]\n---\n") for n, tag in enumerate(["ml", "ML", "ML"])]

    assert collect_vocabulary(posts, ["tags"])["ml"].canonical == "ML"

    tie = collect_vocabulary(posts[:2], ["tags"])["ml"]
    assert tie.canonical == "ML"


def test_duplicate_within_one_field(site, lint):
    path = site.write_post("a.md", front_matter(tags="[Python, python, Web]", categories="[AI]") + "Body\n")

    report = lint(select=["vocabulary-duplicate"])

    assert [(f.path, f.message) for f in report.findings] == [(path, "'python' repeats 'Python' in tags")]


def test_duplicate_across_categories_and_tags(site, lint):
    path = site.write_post("a.md", front_matter(categories="[React]", tags="[react, hooks]") + "Body\n")

    report = lint(select=["vocabulary-duplicate"])

    assert [(f.path, f.message) for f in report.findings] == [
        (path, "'react' repeats 'React' in tags and categories"),
    ]
    assert report.findings[0].details["first_field"] == "categories"


def test_variant_spelling_reported_on_minority_posts(site, lint):
    site.write_post("a.md", front_matter(tags="[React]") + "Body\n")
    site.write_post("b.md", front_matter(tags="[React]") + "Body\n")
    odd = site.write_post("c.md", front_matter(tags="[react]") + "Body\n")

    report = lint(select=["vocabulary-variant"])

    assert [(f.path, f.message) for f in report.findings] == [(odd, "'react' is spelled 'React' elsewhere")]
    assert report.findings[0].details["spellings"] == {"React": 2, "react": 1}


def test_variant_across_categories_and_tags(site, lint):
    site.write_post("a.md", front_matter(categories="[Machine Learning]") + "Body\n")
    site.write_post("b.md", front_matter(tags="[machine-learning]") + "Body\n")

    report = lint(select=["vocabulary-variant"])

    assert len(report.findings) == 1
    assert report.findings[0].severity.value == "warning"


def test_similar_terms(site, lint):
    site.write_post("a.md", front_matter(tags="[javascript]") + "Body\n")
    site.write_post("b.md", front_matter(tags="[javascript]") + "Body\n")
    typo = site.write_post("c.md", front_matter(tags="[javascipt]") + "Body\n")

    report = lint(select=["vocabulary-similar"])

    assert [(f.path, f.message, f.severity.value) for f in report.findings] == [
        (typo, "'javascipt' looks like 'javascript'", "info"),
    ]


def test_short_terms_are_not_compared(site, lint):
    site.write_post("a.md", front_matter(tags="[vue]") + "Body\n")
    site.write_post("b.md", front_matter(tags="[vuex]") + "Body\n")

    assert lint(select=["vocabulary-similar"]).findings == []


def test_similarity_zero_disables(site, lint):
    site.write_post("a.md", front_matter(tags="[javascript]") + "Body\n")
    site.write_post("b.md", front_matter(tags="[javascipt]") + "Body\n")
    config = PostlintConfig()
    config.vocabulary.similarity = 0

    assert lint(select=["vocabulary-similar"], config=config).findings == []


def test_unparsed_posts_are_left_out(site, lint):
    site.write_post("a.md", front_matter(tags="[React]") + "Body\n")
    site.write_post("b.md", "---\ntags: [react\n---\n")

    assert lint(select=["vocabulary"]).findings == []
