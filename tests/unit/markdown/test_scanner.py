"""Tests for the post body scanner."""

from postlint.markdown.scanner import fence_language, frontmatter_images, scan_body


class TestFenceLanguage:
    def test_plain(self):
        assert fence_language("python") == "python"

    def test_extra_words_and_case(self):
        assert fence_language(" Python linenums") == "python"

    def test_braced_and_dotted(self):
        assert fence_language("{.js}") == "js"

    def test_attribute_list_is_not_a_language(self):
        assert fence_language("{: .no-highlight}") is None

    def test_empty(self):
        assert fence_language("   ") is None


class TestCodeBlocks:
    def test_backtick_and_tilde_fences_with_file_lines(self):
        body = "Intro\n```python\nprint(1)\n```\n\n~~~\nplain\n~~~\n"
        scan = scan_body(body, start_line=5)

        assert [(b.language, b.line, b.end_line) for b in scan.code_blocks] == [
            ("python", 6, 8),
            (None, 10, 12),
        ]
        assert all(b.closed for b in scan.code_blocks)

    def test_unclosed_fence(self):
        scan = scan_body("```js\nconst a = 1;\n")

        assert len(scan.code_blocks) == 1
        assert not scan.code_blocks[0].closed

    def test_closing_fence_must_be_at_least_as_long(self):
        body = "````md\n```\nnested\n```\n````\n"
        scan = scan_body(body)

        assert len(scan.code_blocks) == 1
        assert scan.code_blocks[0].language == "md"
        assert scan.code_blocks[0].end_line == 5

    def test_fence_with_info_does_not_close(self):
        scan = scan_body("```\ncode\n```js\n")

        assert not scan.code_blocks[0].closed

    def test_inline_triple_backticks_are_not_a_fence(self):
        scan = scan_body("```inline``` mention in prose\n")

        assert scan.code_blocks == []

    def test_highlight_block(self):
        scan = scan_body("{% highlight ruby linenos %}\nputs 1\n{% endhighlight %}\n")

        block = scan.code_blocks[0]
        assert block.kind == "highlight"
        assert block.language == "ruby"
        assert block.closed

    def test_liquid_inside_fence_is_flagged(self):
        scan = scan_body("```jsx\n<div style={{ color: 'red' }} />\n```\n")

        assert scan.code_blocks[0].has_liquid
        assert scan.liquid_issues == []

    def test_liquid_wrapped_in_raw_is_not_flagged(self):
        body = "{% raw %}\n```jsx\n<div style={{ color: 'red' }} />\n```\n{% endraw %}\n"
        scan = scan_body(body)

        assert not scan.code_blocks[0].has_liquid

    def test_raw_inside_fence(self):
        body = "```jsx\n{% raw %}\nstyle={{a}}\n{% endraw %}\n```\n"
        scan = scan_body(body)

        assert not scan.code_blocks[0].has_liquid


class TestImages:
    def test_markdown_and_html_images(self):
        line = "See ![diagram](/assets/images/d.png \"Title\") and <img src='{{ site.baseurl }}/assets/x.png' alt=''>"
        scan = scan_body(line, start_line=9)

        assert [(i.target, i.line, i.source) for i in scan.images] == [
            ("/assets/images/d.png", 9, "markdown"),
            ("{{ site.baseurl }}/assets/x.png", 9, "html"),
        ]

    def test_liquid_placeholder_in_markdown_target(self):
        scan = scan_body("![Result]({{ site.baseurl }}/assets/images/result.png)")

        assert scan.images[0].target == "{{ site.baseurl }}/assets/images/result.png"

    def test_angle_bracket_target(self):
        scan = scan_body("![x](<assets/my image.png>)")

        assert scan.images[0].target == "assets/my image.png"

    def test_images_in_code_are_ignored(self):
        scan = scan_body("`![not](a.png)`\n```md\n![also not](b.png)\n```\n")

        assert scan.images == []

    def test_linked_image(self):
        scan = scan_body("[![badge](/assets/badge.svg)](https://example.com)")

        assert [i.target for i in scan.images] == ["/assets/badge.svg"]


class TestLiquid:
    def test_unclosed_output_tag(self):
        scan = scan_body("Fine line\nValue {{ page.title\n", start_line=3)

        assert [(i.line, i.text) for i in scan.liquid_issues] == [(4, "Value {{ page.title")]

    def test_closed_tags(self):
        scan = scan_body("{{ ok }} and {% if x %}yes{% endif %}")

        assert scan.liquid_issues == []

    def test_unclosed_tag_after_closed_one(self):
        scan = scan_body("{{ ok }} then {% if broken")

        assert len(scan.liquid_issues) == 1


def test_frontmatter_images():
    refs = frontmatter_images(
        {"image": "/assets/a.png", "header": {"teaser": "/assets/t.png", "image": 3, "overlay_image": " "}}
    )

    assert [(r.target, r.field, r.line) for r in refs] == [
        ("/assets/a.png", "image", None),
        ("/assets/t.png", "header.teaser", None),
    ]


class TestListItems:
    def test_fence_indented_under_numbered_step(self):
        scan = scan_body("1. Install\n\n    ```bsh\n    npm i {{ x\n    ```\n")

        assert [(b.language, b.line, b.end_line) for b in scan.code_blocks] == [("bsh", 3, 5)]
        assert scan.code_blocks[0].has_liquid
        assert scan.liquid_issues == []

    def test_fence_on_the_marker_line(self):
        scan = scan_body("- ```js\n  let a;\n  ```\n")

        assert [(b.language, b.closed) for b in scan.code_blocks] == [("js", True)]

    def test_images_in_list_fence_are_ignored(self):
        scan = scan_body("* Step\n\n    ```md\n    ![x](/assets/none.png)\n    ```\n")

        assert scan.images == []
        assert scan.code_blocks[0].language == "md"

    def test_four_space_fence_outside_a_list_is_indented_code(self):
        scan = scan_body("Text\n\n    ```py\n    x\n    ```\n")

        assert scan.code_blocks == []

    def test_list_ends_at_unindented_paragraph(self):
        scan = scan_body("1. Step\n\nAfter the list.\n\n    ```py\n    x\n    ```\n")

        assert scan.code_blocks == []


class TestReferenceImages:
    def test_full_collapsed_and_shortcut_forms(self):
        body = (
            "![Logo][logo] then ![Banner][] and ![diagram]\n"
            "\n"
            "[logo]: /assets/logo.png\n"
            "[BANNER]: <{{ site.baseurl }}/assets/banner.png> \"Banner\"\n"
            "[Diagram]: /assets/diagram.png\n"
        )
        scan = scan_body(body, start_line=4)

        assert [(i.target, i.line, i.source) for i in scan.images] == [
            ("/assets/logo.png", 4, "markdown"),
            ("{{ site.baseurl }}/assets/banner.png", 4, "markdown"),
            ("/assets/diagram.png", 4, "markdown"),
        ]

    def test_undefined_label_is_not_an_image(self):
        scan = scan_body("![x][nowhere]\n")

        assert scan.images == []

    def test_usage_after_definition_keeps_line_order(self):
        scan = scan_body("![a](/assets/a.png)\n[b]: /assets/b.png\n![b][b]\n")

        assert [(i.target, i.line) for i in scan.images] == [("/assets/a.png", 1), ("/assets/b.png", 3)]

    def test_definitions_in_code_are_ignored(self):
        scan = scan_body("![x][logo]\n\n```md\n[logo]: /assets/logo.png\n```\n")

        assert scan.images == []
