"""Naming helpers for branch environments and sessions.

A branch such as ``bugfix/ABBI-1381-pending-icon-position`` is turned into
three derived names:

- a safe identifier (``bugfix-ABBI-1381-pending-icon-position``) used for the
  working-copy directory and never containing a path separator,
- a short label (``ABBI-1381 Pending Icon Position``) used in session names,
- the ticket id (``ABBI-1381``), empty when the branch carries none.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable

from .profiles.models import DEFAULT_CATEGORY_PREFIXES

SEPARATOR = "-"
_PATH_SEPARATORS = ("/", "\\")
_TICKET = re.compile(r"[A-Z]+-[0-9]+")
# tmux rewrites these characters in session names, which would defeat lookups.
_TMUX_UNSAFE = re.compile(r"[.:]")


@dataclass(frozen=True, slots=True)
class BranchNames:
    branch: str
    safe: str
    label: str
    ticket_id: str


def safe_identifier(branch: str) -> str:
    """Replace path separators so the branch can name a directory or session."""

    safe = branch
    for separator in _PATH_SEPARATORS:
        safe = safe.replace(separator, SEPARATOR)
    return safe


def extract_ticket_id(branch: str) -> str:
    match = _TICKET.search(branch)
    return match.group(0) if match else ""


def _strip_category(safe: str, prefixes: Iterable[str]) -> str:
    for prefix in prefixes:
        marker = f"{prefix}{SEPARATOR}"
        if safe.startswith(marker):
            return safe[len(marker):]
    return safe


def _hoist_ticket(text: str) -> tuple[str, str]:
    """Split the ticket token out of ``text``.

    Returns ``(ticket, remainder)``. Only the first ticket-shaped match is
    considered, the same one ``extract_ticket_id`` reports, and it is hoisted
    only when bounded by separators or the ends of the string.
    """

    match = _TICKET.search(text)
    if match is None:
        return "", text
    start, end = match.span()
    if start > 0 and text[start - 1] != SEPARATOR:
        return "", text
    if end < len(text) and text[end] != SEPARATOR:
        return "", text
    remainder = (text[:start] + SEPARATOR + text[end:]).strip(SEPARATOR)
    return match.group(0), remainder


def short_label(safe: str, prefixes: Iterable[str] = DEFAULT_CATEGORY_PREFIXES) -> str:
    """Derive a readable label: first word untouched, later words capitalised."""

    body = _strip_category(safe, prefixes)
    ticket, remainder = _hoist_ticket(body)
    words = [word for word in remainder.split(SEPARATOR) if word]
    if ticket:
        words.insert(0, ticket)
    if not words:
        return safe
    head, tail = words[0], words[1:]
    return " ".join([head, *(word[:1].upper() + word[1:] for word in tail)])


def normalize(branch: str, prefixes: Iterable[str] = DEFAULT_CATEGORY_PREFIXES) -> BranchNames:
    safe = safe_identifier(branch)
    return BranchNames(
        branch=branch,
        safe=safe,
        label=short_label(safe, tuple(prefixes)),
        ticket_id=extract_ticket_id(branch),
    )


def tmux_safe(name: str) -> str:
    return _TMUX_UNSAFE.sub("_", name)


def session_name(ordinal: int, label: str) -> str:
    return tmux_safe(f"{ordinal}) {label}")


__all__ = [
    "BranchNames",
    "extract_ticket_id",
    "normalize",
    "safe_identifier",
    "session_name",
    "short_label",
    "tmux_safe",
]
