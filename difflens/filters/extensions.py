"""
Extension filters typed by users as free-form text.

``"cs, ts"`` expands to ``*.cs``, ``**/*.cs``, ``*.ts`` and ``**/*.ts``.
Tokens that already contain ``**`` or ``/`` are kept as written and must be
relative glob patterns.
"""

import logging
import re
from fnmatch import fnmatchcase

from difflens.errors import InvalidExtensionFilterError

logger = logging.getLogger(__name__)

_SEPARATORS_RE = re.compile(r"[,;\s]+")


def _is_advanced(token: str) -> bool:
    return "**" in token or "/" in token


def _validate_advanced(pattern: str) -> None:
    if pattern.startswith("/"):
        raise InvalidExtensionFilterError(pattern, "absolute patterns are not allowed")
    for segment in pattern.split("/"):
        if segment == "..":
            raise InvalidExtensionFilterError(pattern, "'..' segments are not allowed")
        if "**" in segment and segment != "**":
            raise InvalidExtensionFilterError(
                pattern, "'**' must be a whole path segment"
            )
    if not pattern.strip("/"):
        raise InvalidExtensionFilterError(pattern, "pattern is empty")


def parse_extension_filter(text: str | None) -> list[str]:
    """
    Expand a filter string into glob patterns.

    Separators are commas, semicolons and whitespace. Duplicates are dropped
    and first-seen order is kept. An empty string gives an empty list, which
    matches every path.

    Raises:
        InvalidExtensionFilterError: an advanced pattern is absolute, climbs
            with ``..`` or glues ``**`` to other characters
    """
    patterns: list[str] = []
    for token in _SEPARATORS_RE.split(text or ""):
        if not token:
            continue
        if _is_advanced(token):
            _validate_advanced(token)
            candidates = [token]
        else:
            ext = token.removeprefix("*").removeprefix(".")
            if not ext:
                logger.debug("Ignoring extension token %r with no extension", token)
                continue
            candidates = [f"*.{ext}", f"**/*.{ext}"]
        for candidate in candidates:
            if candidate not in patterns:
                patterns.append(candidate)
    return patterns


def _normalize_path(path: str) -> list[str]:
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return [segment for segment in path.split("/") if segment]


def _match_segments(pattern: list[str], path: list[str]) -> bool:
    if not pattern:
        return not path
    head = pattern[0]
    if head == "**":
        return any(_match_segments(pattern[1:], path[i:]) for i in range(len(path) + 1))
    if not path:
        return False
    return fnmatchcase(path[0], head) and _match_segments(pattern[1:], path[1:])


def matches_extension_filter(path: str, patterns: list[str]) -> bool:
    """True when ``path`` matches any pattern, or when there are no patterns.

    ``**`` spans any number of directories, including none, so ``**/*.cs``
    matches at every depth while ``*.cs`` matches top-level files only.
    """
    if not patterns:
        return True
    segments = _normalize_path(path)
    return any(
        _match_segments(_normalize_path(pattern), segments) for pattern in patterns
    )
