"""Extract module references from JavaScript / TypeScript source text."""

from __future__ import annotations

import re

from depgap.engines.gap_detector.models import ImportMatch

# import x from 'm' / import { a, b } from "m" / import type T from 'm'
_IMPORT_FROM_RE = re.compile(r"""\bimport\s+[^'";]+?\s+from\s*(['"])([^'"\n]+)\1""")

# export * from 'm' / export { a } from "m"
_EXPORT_FROM_RE = re.compile(r"""\bexport\s+[^'";]+?\s+from\s*(['"])([^'"\n]+)\1""")

# import 'm'  (side effect only)
_SIDE_EFFECT_RE = re.compile(r"""\bimport\s*(['"])([^'"\n]+)\1""")

# require('m') / import('m')
_CALL_RE = re.compile(r"""\b(?:require|import)\s*\(\s*(['"])([^'"\n]+)\1\s*\)""")

_PATTERNS = (_IMPORT_FROM_RE, _EXPORT_FROM_RE, _SIDE_EFFECT_RE, _CALL_RE)

# ./x, ../x, ".", ".." and the "@/" project alias
_RELATIVE_RE = re.compile(r"^(?:\.\.?(?:/|$)|@/)")

# Any single-line quoted string, for cursor lookups.
_QUOTED_RE = re.compile(r"""(['"])([^'"\n]+)\1""")


def is_relative(name: str) -> bool:
    """True if *name* resolves inside the project rather than to a package."""
    return _RELATIVE_RE.match(name) is not None


def is_package_name(name: str) -> bool:
    """True if *name* can refer to an installable package.

    Relative paths never can, and neither can anything starting with ``-``,
    which the package manager would read as a command-line option.
    """
    return not (is_relative(name) or name.startswith("-"))


def find_imports(text: str) -> list[ImportMatch]:
    """Return every import reference in *text*, in document order."""
    found: dict[int, ImportMatch] = {}
    for pattern in _PATTERNS:
        for m in pattern.finditer(text):
            start = m.start(1)
            if start not in found:
                found[start] = ImportMatch(name=m.group(2), start=start, end=m.end(2) + 1)
    return [found[k] for k in sorted(found)]


def extract_imports(text: str) -> list[str]:
    """Module names referenced by import statements in *text* (duplicates kept)."""
    return [m.name for m in find_imports(text)]


def external_imports(text: str) -> set[str]:
    """Deduplicated package names referenced in *text*."""
    return {name for name in extract_imports(text) if is_package_name(name)}


def module_at(text: str, offset: int) -> ImportMatch | None:
    """Return the quoted string enclosing *offset*, quotes included.

    The offset may sit on either quote. Returns None when the cursor is
    not inside a single-line quoted string.
    """
    if offset < 0 or offset > len(text):
        return None
    line_start = text.rfind("\n", 0, offset) + 1
    line_end = text.find("\n", offset)
    if line_end == -1:
        line_end = len(text)
    line = text[line_start:line_end]
    for m in _QUOTED_RE.finditer(line):
        start = line_start + m.start()
        end = line_start + m.end()
        if start <= offset < end:
            return ImportMatch(name=m.group(2), start=start, end=end)
    return None


def offset_of(text: str, line: int, column: int) -> int:
    """Convert a 1-based (line, column) position into a character offset."""
    if line < 1 or column < 1:
        raise ValueError("line and column are 1-based")
    lines = text.split("\n")
    if line > len(lines):
        raise ValueError(f"line {line} is past the end of the document ({len(lines)} lines)")
    offset = sum(len(chunk) + 1 for chunk in lines[: line - 1])
    return offset + min(column - 1, len(lines[line - 1]))
