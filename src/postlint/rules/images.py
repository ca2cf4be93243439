"""Image reference rules."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from postlint.config.settings import Severity
from postlint.markdown.images import ResolvedImage, resolve_image
from postlint.rules.base import Violation, registry

if TYPE_CHECKING:
    from postlint.markdown.scanner import ImageRef
    from postlint.models.post import Post
    from postlint.rules.base import LintContext


def _resolved_images(post: Post, context: LintContext) -> Iterator[tuple[ImageRef, ResolvedImage]]:
    for ref in context.images(post):
        resolved = resolve_image(ref.target, context.site_root)
        if resolved is not None:
            yield ref, resolved


def _details(ref: ImageRef, resolved: ResolvedImage) -> dict[str, str]:
    details = {"target": ref.target, "source": ref.source, "resolved": str(resolved.path)}
    if ref.field:
        details["field"] = ref.field
    return details


def _where(ref: ImageRef) -> str:
    return f" (front matter '{ref.field}')" if ref.field else ""


@registry.rule(
    "image-missing",
    "A referenced image does not exist under the site root",
    Severity.ERROR,
    requires_metadata=False,
)
def check_image_missing(post: Post, context: LintContext) -> Iterator[Violation]:
    for ref, resolved in _resolved_images(post, context):
        if resolved.within_site and resolved.path.is_file():
            continue
        outside = "" if resolved.within_site else " (outside the site root)"
        yield Violation(
            f"Image not found: {resolved.url_path}{outside}{_where(ref)}",
            post.path,
            line=ref.line,
            details=_details(ref, resolved),
        )


@registry.rule(
    "image-outside-assets",
    "A referenced image exists but not under the assets directory",
    Severity.WARNING,
    requires_metadata=False,
)
def check_image_outside_assets(post: Post, context: LintContext) -> Iterator[Violation]:
    assets_root = context.assets_root.resolve()
    for ref, resolved in _resolved_images(post, context):
        if not resolved.within_site or not resolved.path.is_file():
            continue
        if not resolved.path.resolve().is_relative_to(assets_root):
            yield Violation(
                f"Image {resolved.url_path} is outside {context.config.paths.assets_dir}/{_where(ref)}",
                post.path,
                line=ref.line,
                details=_details(ref, resolved),
            )
