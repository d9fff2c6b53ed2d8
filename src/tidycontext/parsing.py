"""Text extraction from R package files.

DESCRIPTION fields are matched by label at the start of a line, ignoring
case. ``Title``, ``Version``, ``Description`` and ``Depends`` take the rest of
the first matching line. ``Imports`` and ``Suggests`` also take every
continuation line up to the next line that starts with a word character, and
their whitespace runs collapse to single spaces. A missing label yields ``""``.

Roxygen blocks run from a ``#'`` marker to the nearest following
``function(...)`` header, across lines.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

NO_DOCUMENTATION = "No documentation found"
README_EXCERPT_LIMIT = 1000
TRUNCATION_MARKER = "..."

_SINGLE_LINE_FIELDS = ("title", "version", "description", "depends")
_CONTINUED_FIELDS = ("imports", "suggests")

_SINGLE_LINE = {
    name: re.compile(rf"^{name}:[ \t]*([^\r\n]*)", re.IGNORECASE | re.MULTILINE)
    for name in _SINGLE_LINE_FIELDS
}
_CONTINUED = {
    name: re.compile(rf"^{name}:[ \t]*(.*?)(?=\n\w|\Z)", re.IGNORECASE | re.MULTILINE | re.DOTALL)
    for name in _CONTINUED_FIELDS
}
_ROXYGEN_BLOCK = re.compile(r"#'.*?function\s*\([^)]*\)", re.DOTALL)


@dataclass(frozen=True, slots=True)
class DescriptionFields:
    title: str = ""
    version: str = ""
    description: str = ""
    depends: str = ""
    imports: str = ""
    suggests: str = ""


def _first(pattern: re.Pattern[str], text: str) -> str:
    match = pattern.search(text)
    return match.group(1).strip() if match else ""


def parse_description(text: str, fallback_description: str | None = None) -> DescriptionFields:
    """Extract package metadata from the text of an R DESCRIPTION file."""
    single = {name: _first(_SINGLE_LINE[name], text) for name in _SINGLE_LINE_FIELDS}
    continued = {name: " ".join(_first(_CONTINUED[name], text).split()) for name in _CONTINUED_FIELDS}
    if not single["description"]:
        single["description"] = fallback_description or ""
    return DescriptionFields(**single, **continued)


def truncate_readme(
    text: str, limit: int = README_EXCERPT_LIMIT, marker: str = TRUNCATION_MARKER
) -> str:
    """Cut to ``limit`` characters, appending ``marker`` only if anything was cut."""
    if len(text) <= limit:
        return text
    return text[:limit] + marker


def extract_roxygen_blocks(text: str) -> list[str]:
    return _ROXYGEN_BLOCK.findall(text)


def matching_blocks(blocks: list[str], query: str) -> list[str]:
    needle = query.lower()
    return [block for block in blocks if needle in block.lower()]


def render_documentation(text: str, query: str) -> str:
    """Roxygen blocks in ``text`` mentioning ``query``, joined by blank lines."""
    matches = matching_blocks(extract_roxygen_blocks(text), query)
    return "\n\n".join(matches) if matches else NO_DOCUMENTATION
