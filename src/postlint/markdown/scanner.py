"""Line scanner for post bodies.

Finds the three things the body rules care about: code blocks (CommonMark
fences and Jekyll ``highlight`` blocks), image references, and Liquid
delimiters left open on a line. Line numbers are file line numbers, so the
caller passes the line on which the body starts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

FENCE_RE = re.compile(r"^(?P<indent> *)(?P<fence>`{3,}|~{3,})(?P<info>.*)$")
HIGHLIGHT_OPEN_RE = re.compile(r"\{%-?\s*highlight(?:\s+(?P<lang>[^\s%]+))?[^%]*-?%\}")
HIGHLIGHT_CLOSE_RE = re.compile(r"\{%-?\s*endhighlight\s*-?%\}")
RAW_TAG_RE = re.compile(r"\{%-?\s*(?P<tag>raw|endraw)\s*-?%\}")
INLINE_CODE_RE = re.compile(r"(`+)(?:(?!\1).)+?\1")
MD_IMAGE_RE = re.compile(
    r"!\[[^\]]*\]\(\s*"
    r"(?:<(?P<angled>[^>]+)>|(?P<bare>(?:\{\{[^}]*\}\}|\{%[^%]*%\}|[^)\s])+))"
    r"(?:\s+(?:\"[^\"]*\"|'[^']*'|\([^)]*\)))?\s*\)"
)
HTML_IMG_RE = re.compile(
    r"<img\b[^>]*?\bsrc\s*=\s*(?:\"(?P<dq>[^\"]*)\"|'(?P<sq>[^']*)')",
    re.IGNORECASE,
)
REF_IMAGE_RE = re.compile(r"!\[(?P<alt>[^\]]*)\](?:\[(?P<label>[^\]]*)\]|(?![(\[]))")
REF_DEFINITION_RE = re.compile(r"^ {0,3}\[(?P<label>[^\]]+)\]:\s*(?:<(?P<angled>[^>]*)>|(?P<bare>\S+))")
LIST_ITEM_RE = re.compile(r"^(?P<indent> *)(?P<marker>[-+*]|\d{1,9}[.)])(?P<space> +|$)")

FRONTMATTER_IMAGE_KEYS = ("image",)
HEADER_IMAGE_KEYS = ("image", "teaser", "overlay_image")


@dataclass(frozen=True, slots=True)
class CodeBlock:
    """A fenced or ``highlight`` code block."""

    language: str | None
    info: str
    line: int
    end_line: int | None
    kind: str = "fence"
    has_liquid: bool = False

    @property
    def closed(self) -> bool:
        return self.end_line is not None


@dataclass(frozen=True, slots=True)
class ImageRef:
    """An image reference found in the body or the front matter."""

    target: str
    line: int | None
    source: str
    field: str | None = None


@dataclass(frozen=True, slots=True)
class LiquidIssue:
    """A line on which ``{{`` or ``{%`` is never closed."""

    line: int
    text: str


@dataclass(frozen=True, slots=True)
class BodyScan:
    code_blocks: list[CodeBlock] = field(default_factory=list)
    images: list[ImageRef] = field(default_factory=list)
    liquid_issues: list[LiquidIssue] = field(default_factory=list)


@dataclass(slots=True)
class _OpenBlock:
    kind: str
    language: str | None
    info: str
    line: int
    fence_char: str = ""
    fence_len: int = 0
    max_indent: int = 3
    has_liquid: bool = False

    def close(self, end_line: int | None) -> CodeBlock:
        return CodeBlock(
            language=self.language,
            info=self.info,
            line=self.line,
            end_line=end_line,
            kind=self.kind,
            has_liquid=self.has_liquid,
        )


def fence_language(info: str) -> str | None:
    """Return the language named by a fence info string, if any.

    >>> fence_language(" Python linenums")
    'python'
    >>> fence_language("{.js}")
    'js'
    >>> fence_language("{: .no-highlight}") is None
    True
    """
    info = info.strip()
    if not info or info.startswith("{:"):
        return None
    token = info.split()[0].strip("{}").lstrip(".")
    return token.lower() or None


def _opening_fence(line: str, max_indent: int = 3) -> tuple[str, int, str] | None:
    match = FENCE_RE.match(line)
    if not match or len(match.group("indent")) > max_indent:
        return None
    fence = match.group("fence")
    info = match.group("info")
    if fence[0] == "`" and "`" in info:
        return None
    return fence[0], len(fence), info


def _closes_fence(line: str, block: _OpenBlock) -> bool:
    match = FENCE_RE.match(line)
    if not match or len(match.group("indent")) > block.max_indent:
        return False
    fence = match.group("fence")
    return fence[0] == block.fence_char and len(fence) >= block.fence_len and not match.group("info").strip()


def _outside_raw(line: str, in_raw: bool) -> tuple[str, bool]:
    """Return the part of ``line`` that Liquid will interpret, and the new raw state."""
    visible: list[str] = []
    pos = 0
    for match in RAW_TAG_RE.finditer(line):
        if not in_raw:
            visible.append(line[pos : match.start()])
        in_raw = match.group("tag") == "raw"
        pos = match.end()
    if not in_raw:
        visible.append(line[pos:])
    return "".join(visible), in_raw


def _has_liquid(text: str) -> bool:
    return "{{" in text or "{%" in text


def _has_unclosed_liquid(text: str) -> bool:
    for opener, closer in (("{{", "}}"), ("{%", "%}")):
        pos = 0
        while (start := text.find(opener, pos)) != -1:
            end = text.find(closer, start + len(opener))
            if end == -1:
                return True
            pos = end + len(closer)
    return False


def _line_images(line: str, lineno: int) -> list[ImageRef]:
    prose = INLINE_CODE_RE.sub("", line)
    refs = [
        ImageRef(target=(m.group("angled") or m.group("bare")).strip(), line=lineno, source="markdown")
        for m in MD_IMAGE_RE.finditer(prose)
    ]
    refs.extend(
        ImageRef(target=(m.group("dq") if m.group("dq") is not None else m.group("sq")).strip(), line=lineno, source="html")
        for m in HTML_IMG_RE.finditer(prose)
    )
    return [ref for ref in refs if ref.target]


def _reference_labels(line: str) -> list[str]:
    """Labels used by ``![alt][label]``, ``![label][]`` and ``![label]`` images."""
    prose = INLINE_CODE_RE.sub("", line)
    return [_normalize_label(m.group("label") or m.group("alt")) for m in REF_IMAGE_RE.finditer(prose)]


def _normalize_label(label: str) -> str:
    return " ".join(label.split()).casefold()


def _content_column(item: re.Match[str]) -> int:
    """Column at which the text of a list item starts."""
    marker_end = len(item.group("indent")) + len(item.group("marker"))
    spaces = len(item.group("space"))
    # No text after the marker, or an indented code block inside the item.
    if spaces == 0 or spaces > 4:
        return marker_end + 1
    return marker_end + spaces


def scan_body(body: str, start_line: int = 1) -> BodyScan:
    """Scan a Markdown body for code blocks, images and open Liquid delimiters.

    Fences nested in list items may be indented up to three columns past the
    item's text, as CommonMark allows. Reference-style images are resolved
    against the link reference definitions of the whole body.
    """
    blocks: list[CodeBlock] = []
    images: list[ImageRef] = []
    issues: list[LiquidIssue] = []
    definitions: dict[str, str] = {}
    references: list[tuple[str, int]] = []
    current: _OpenBlock | None = None
    in_raw = False
    list_column = 0
    previous_blank = False

    for offset, line in enumerate(body.split("\n")):
        lineno = start_line + offset
        visible, in_raw = _outside_raw(line, in_raw)

        if current is not None:
            if current.kind == "fence" and _closes_fence(line, current):
                blocks.append(current.close(lineno))
                current = None
            elif current.kind == "highlight" and HIGHLIGHT_CLOSE_RE.search(visible):
                blocks.append(current.close(lineno))
                current = None
            elif _has_liquid(visible):
                current.has_liquid = True
            continue

        blank = not line.strip()
        item = LIST_ITEM_RE.match(line)
        if item is not None:
            list_column = _content_column(item)
        elif not blank and previous_blank and len(line) - len(line.lstrip(" ")) < list_column:
            list_column = 0
        previous_blank = blank

        opening = _opening_fence(line, list_column + 3)
        if opening is None and item is not None:
            opening = _opening_fence(line[item.end() :])
        if opening is not None:
            char, length, info = opening
            current = _OpenBlock(
                kind="fence",
                language=fence_language(info),
                info=info.strip(),
                line=lineno,
                fence_char=char,
                fence_len=length,
                max_indent=list_column + 3,
            )
            continue

        highlight = HIGHLIGHT_OPEN_RE.search(visible)
        if highlight is not None:
            lang = highlight.group("lang")
            current = _OpenBlock(
                kind="highlight",
                language=lang.lower() if lang else None,
                info=highlight.group(0),
                line=lineno,
            )
            if HIGHLIGHT_CLOSE_RE.search(visible, highlight.end()):
                blocks.append(current.close(lineno))
                current = None
            continue

        definition = REF_DEFINITION_RE.match(line)
        if definition is not None:
            target = (definition.group("angled") or definition.group("bare") or "").strip()
            definitions.setdefault(_normalize_label(definition.group("label")), target)
        else:
            images.extend(_line_images(line, lineno))
            references.extend((label, lineno) for label in _reference_labels(line))
        if _has_unclosed_liquid(visible):
            issues.append(LiquidIssue(line=lineno, text=line.strip()))

    if current is not None:
        blocks.append(current.close(None))

    # Labels without a definition render as plain text, not as images.
    images.extend(
        ImageRef(target=definitions[label], line=lineno, source="markdown")
        for label, lineno in references
        if definitions.get(label)
    )
    images.sort(key=lambda ref: ref.line or 0)
    return BodyScan(code_blocks=blocks, images=images, liquid_issues=issues)


def frontmatter_images(metadata: dict[str, Any]) -> list[ImageRef]:
    """Collect image paths declared in front matter (``image`` and ``header.*``)."""
    refs = [
        ImageRef(target=metadata[key].strip(), line=None, source="frontmatter", field=key)
        for key in FRONTMATTER_IMAGE_KEYS
        if isinstance(metadata.get(key), str) and metadata[key].strip()
    ]
    header = metadata.get("header")
    if isinstance(header, dict):
        refs.extend(
            ImageRef(target=header[key].strip(), line=None, source="frontmatter", field=f"header.{key}")
            for key in HEADER_IMAGE_KEYS
            if isinstance(header.get(key), str) and header[key].strip()
        )
    return refs


__all__ = [
    "BodyScan",
    "CodeBlock",
    "ImageRef",
    "LiquidIssue",
    "fence_language",
    "frontmatter_images",
    "scan_body",
]
