"""Tests for the front matter rules."""

from conftest import GOOD_POST, front_matter


def _codes(report):
    return [finding.rule for finding in report.findings]


def test_good_post_is_clean(site, lint):
    site.write_post("2023-05-01-good.md", GOOD_POST)

    report = lint()

    assert report.findings == []
    assert report.exit_code() == 0


def test_missing_frontmatter(site, lint):
    path = site.write_post("no-header.md", "Just a body.\n")

    report = lint(select=["frontmatter", "field"])

    assert [(f.rule, f.line, f.path) for f in report.findings] == [("frontmatter-missing", 1, path)]


def test_invalid_yaml_suppresses_field_rules(site, lint):
    site.write_post("broken.md", "---\ntitle: [oops\n---\nBody\n")

    report = lint(select=["frontmatter", "field", "timestamp"])

    assert _codes(report) == ["frontmatter-invalid"]
    assert "not valid YAML" in report.findings[0].message


def test_unterminated_block(site, lint):
    site.write_post("open.md", "---\ntitle: x\nexcerpt: y\n")

    report = lint(select=["frontmatter-invalid"])

    assert "not terminated" in report.findings[0].message


def test_missing_required_fields(site, lint):
    site.write_post("a.md", front_matter(excerpt=None, last_modified_at=None) + "Body\n")

    report = lint(select=["field-missing"])

    assert sorted(f.details["field"] for f in report.findings) == ["excerpt", "last_modified_at"]


def test_null_value_counts_as_missing(site, lint):
    site.write_post("a.md", front_matter(excerpt="") + "Body\n")

    report = lint(select=["field"])

    assert _codes(report) == ["field-missing"]
    assert report.findings[0].details == {"field": "excerpt"}


def test_blank_and_non_string_text_fields(site, lint):
    site.write_post("a.md", front_matter(title="'   '", excerpt="42") + "Body\n")

    report = lint(select=["field-empty"])
    messages = sorted(f.message for f in report.findings)

    assert messages == ["Field 'excerpt' must be a string, got int", "Field 'title' is empty"]


def test_field_types(site, lint):
    site.write_post(
        "a.md",
        front_matter(categories="{a: 1}", tags="[python, 3, true]", image="[a.png]") + "Body\n",
    )

    report = lint(select=["field-type"])
    fields = sorted(f.details["field"] for f in report.findings)

    assert fields == ["categories", "image", "tags"]


def test_scalar_string_tags_are_accepted(site, lint):
    site.write_post("a.md", front_matter(tags="python", categories="AI") + "Body\n")

    assert lint(select=["field-type"]).findings == []


def test_invalid_timestamp(site, lint):
    site.write_post("a.md", front_matter(last_modified_at="'sometime soon'") + "Body\n")

    report = lint(select=["timestamp-invalid"])

    assert _codes(report) == ["timestamp-invalid"]
    assert report.findings[0].details["field"] == "last_modified_at"


def test_yaml_datetime_is_valid(site, lint):
    site.write_post("a.md", front_matter(last_modified_at="2023-05-01T10:00:00+09:00") + "Body\n")

    assert lint(select=["timestamp-invalid"]).findings == []


def test_leading_horizontal_rule_is_missing_frontmatter(site, lint):
    site.write_post("rule.md", "----\ntitle: x\n----\nBody\n")

    report = lint(select=["frontmatter"])

    assert _codes(report) == ["frontmatter-missing"]
