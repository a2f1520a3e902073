"""Reference rewriting — pure text transforms for removed documents.

No I/O here: the backlink rewriter reads a referrer, feeds its text
through :func:`rewrite_text`, and writes it back only when something
changed. Every transform is idempotent: a second pass with the same
names and policy finds nothing left to match.
"""

from __future__ import annotations

import functools
import re
from collections.abc import Iterable
from enum import StrEnum

PLACEHOLDER = "BACKLINK REMOVED"

_LIST_ITEM = re.compile(r"^[-*+]\s+(?P<rest>.*)$")


class RewritePolicy(StrEnum):
    """How an inline reference to a removed document is transformed."""

    STRIP = "strip"  # remove the reference entirely
    KEEP_LABEL = "keep-label"  # drop the brackets, keep the visible label
    PLACEHOLDER = "placeholder"  # substitute a fixed marker


@functools.lru_cache(maxsize=256)
def reference_pattern(name: str) -> re.Pattern[str]:
    """Compile a case-insensitive pattern matching links and embeds to *name*.

    Matches ``[[name]]``, ``![[name]]``, ``[[folder/name]]``, ``[[name.md]]``,
    ``[[name#Section]]`` and ``[[name|Alias]]`` (and combinations). *name*
    is matched literally.
    """
    escaped = re.escape(name)
    return re.compile(
        r"!?\[\[(?:[^\[\]|#]*/)?"
        + escaped
        + r"(?:\.md)?(?:#[^\[\]|]*)?(?:\|(?P<alias>[^\[\]]*))?\]\]",
        re.IGNORECASE,
    )


def _patterns(names: Iterable[str]) -> list[re.Pattern[str]]:
    # Longest names first so "Note v2" is tried before "Note".
    unique = sorted({n for n in names if n}, key=lambda n: (-len(n), n))
    return [reference_pattern(n) for n in unique]


def is_standalone_reference(
    line: str,
    names: Iterable[str],
    *,
    list_items_standalone: bool = False,
) -> bool:
    """True if the trimmed *line* is nothing but one reference to one of *names*.

    With *list_items_standalone*, a bullet item (``-``, ``*``, ``+``)
    holding nothing but such a reference counts as well.
    """
    trimmed = line.strip()
    candidates = [trimmed]
    if list_items_standalone:
        item = _LIST_ITEM.match(trimmed)
        if item is not None:
            candidates.append(item.group("rest").strip())
    return any(p.fullmatch(c) for p in _patterns(names) for c in candidates)


def _replacement(match: re.Match[str], policy: RewritePolicy, placeholder: str) -> str:
    if policy == RewritePolicy.STRIP:
        return ""
    if policy == RewritePolicy.KEEP_LABEL:
        alias = match.group("alias")
        if alias and alias.strip():
            return alias.strip()
        return match.group(0).lstrip("!")[2:-2]
    return placeholder


def rewrite_line(
    line: str,
    names: Iterable[str],
    policy: RewritePolicy,
    *,
    list_items_standalone: bool = False,
    placeholder: str = PLACEHOLDER,
) -> tuple[str | None, bool]:
    """Rewrite references to *names* in a single line.

    Returns ``(new_line, changed)``. ``new_line`` is ``None`` when the
    whole line was a standalone reference and must be dropped.

    Substitution repeats until nothing matches, so nested brackets such
    as ``[[No[[Note]]te]]`` settle in one call. Each productive pass
    consumes at least one ``[[`` (the placeholder holds none), which
    bounds the passes.
    """
    names = list(names)
    new_line = line
    for _ in range(line.count("[[") + 1):
        if is_standalone_reference(new_line, names, list_items_standalone=list_items_standalone):
            return None, True
        rewritten = new_line
        for pattern in _patterns(names):
            rewritten = pattern.sub(lambda m: _replacement(m, policy, placeholder), rewritten)
        if rewritten == new_line:
            break
        new_line = rewritten
    return new_line, new_line != line


def rewrite_text(
    text: str,
    names: Iterable[str],
    policy: RewritePolicy,
    *,
    list_items_standalone: bool = False,
    placeholder: str = PLACEHOLDER,
) -> tuple[str, bool]:
    """Rewrite every line of *text*; returns ``(new_text, changed)``."""
    names = list(names)
    changed = False
    kept: list[str] = []
    for line in text.split("\n"):
        new_line, line_changed = rewrite_line(
            line,
            names,
            policy,
            list_items_standalone=list_items_standalone,
            placeholder=placeholder,
        )
        changed = changed or line_changed
        if new_line is not None:
            kept.append(new_line)
    return "\n".join(kept), changed
