"""Reference extraction — parse wikilinks, embeds, and markdown links.

Pure functions, no infrastructure dependencies. Consumed by the vault
when it (re)indexes a document's forward references.
"""

from __future__ import annotations

import re
from urllib.parse import unquote

from notereap.domain.documents import EdgeKind, Reference

# [[Target]], [[Target|Alias]], [[Target#Section]] with an optional leading "!".
_WIKILINK_PATTERN = re.compile(r"(!?)\[\[([^\[\]]+)\]\]")

# [label](target) / ![alt](target) — target without spaces unless <wrapped>.
_MDLINK_PATTERN = re.compile(r"(!?)\[[^\[\]]*\]\((<[^>]+>|[^)\s]+)(?:\s+\"[^\"]*\")?\)")

_URL_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")
_FENCE = re.compile(r"^\s*(```|~~~)")


def split_target(inner: str) -> tuple[str, str | None, str | None]:
    """Split wikilink contents into ``(target, anchor, alias)``.

    Examples:
        >>> split_target("Note#Heading|shown")
        ('Note', 'Heading', 'shown')
        >>> split_target("img.png")
        ('img.png', None, None)
    """
    target, _, alias = inner.partition("|")
    target, _, anchor = target.partition("#")
    return target.strip(), anchor.strip() or None, alias.strip() or None


def _extract_line(line: str, lineno: int) -> list[Reference]:
    results: list[Reference] = []
    for match in _WIKILINK_PATTERN.finditer(line):
        target, anchor, alias = split_target(match.group(2))
        if not target:
            # [[#Heading]] points into the same document.
            continue
        kind = EdgeKind.EMBED if match.group(1) else EdgeKind.LINK
        results.append(Reference(target, kind, lineno, anchor=anchor, alias=alias))

    for match in _MDLINK_PATTERN.finditer(line):
        raw = match.group(2).strip("<>")
        if _URL_SCHEME.match(raw) or raw.startswith("#"):
            continue
        target, _, anchor = unquote(raw).partition("#")
        if not target:
            continue
        kind = EdgeKind.EMBED if match.group(1) else EdgeKind.LINK
        results.append(Reference(target.strip(), kind, lineno, anchor=anchor or None))
    return results


def extract_references(body: str) -> list[Reference]:
    """Extract every link and embed from markdown *body*, line by line.

    Fenced code blocks are skipped. Returns an empty list if nothing is found.
    """
    results: list[Reference] = []
    in_fence = False
    for lineno, line in enumerate(body.split("\n")):
        if _FENCE.match(line):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        results.extend(_extract_line(line, lineno))
    return results
