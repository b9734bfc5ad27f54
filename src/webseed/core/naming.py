"""Project-name checks following npm's package naming rules."""

from __future__ import annotations

import re
from urllib.parse import quote

_MAX_LENGTH = 214
_SCOPED = re.compile(r"^@([^/]+)/(.+)$")
_RESERVED = frozenset({"node_modules", "favicon.ico"})


def validate_project_name(name: str) -> list[str]:
    """Return every rule *name* breaks. An empty list means the name is valid."""
    if not name:
        return ["name length must be greater than zero"]

    problems: list[str] = []
    if name.startswith("."):
        problems.append("name cannot start with a period")
    if name.startswith("_"):
        problems.append("name cannot start with an underscore")
    if name.strip() != name:
        problems.append("name cannot contain leading or trailing spaces")
    if name.lower() in _RESERVED:
        problems.append(f"{name} is a blacklisted name")
    if len(name) > _MAX_LENGTH:
        problems.append(f"name can no longer contain more than {_MAX_LENGTH} characters")
    if name.lower() != name:
        problems.append("name can no longer contain capital letters")
    if re.search(r"[~'!()*]", name.split("/")[-1]):
        problems.append('name can no longer contain special characters ("~\'!()*")')

    if quote(name, safe="") != name:
        scoped = _SCOPED.match(name)
        if not (
            scoped
            and quote(scoped.group(1), safe="") == scoped.group(1)
            and quote(scoped.group(2), safe="") == scoped.group(2)
        ):
            problems.append("name can only contain URL-friendly characters")

    return problems
