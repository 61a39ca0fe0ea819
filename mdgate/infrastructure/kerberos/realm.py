"""krb5.conf reader producing a RealmConfig."""

import re
from pathlib import Path
from typing import Any

from mdgate.domain.auth.model.value import RealmConfig

_SECTION = re.compile(r"^\[(?P<name>[^\]]+)\]$")
_ASSIGN = re.compile(r"^(?P<key>[^=]+?)\s*=\s*(?P<value>.*)$")


def parse_krb5_conf(text: str) -> dict[str, dict[str, Any]]:
    """Parse krb5.conf text into ``{section: {key: [values] | {key: [values]}}}``.

    Repeated keys accumulate (``kdc`` usually appears several times).
    Brace blocks (``REALM = { ... }``) nest one level per brace.

    Raises:
        ValueError: On assignments outside a section or unbalanced braces
    """
    sections: dict[str, dict[str, Any]] = {}
    stack: list[dict[str, Any]] = []

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith(("#", ";")):
            continue

        match = _SECTION.match(line)
        if match:
            if len(stack) > 1:
                raise ValueError(f"line {lineno}: section header inside a block")
            stack = [sections.setdefault(match["name"].strip(), {})]
            continue

        if line == "}":
            if len(stack) < 2:
                raise ValueError(f"line {lineno}: unbalanced '}}'")
            stack.pop()
            continue

        match = _ASSIGN.match(line)
        if not match or not stack:
            raise ValueError(f"line {lineno}: cannot parse {line!r}")

        key, value = match["key"].strip(), match["value"].strip()
        if value == "{":
            block: dict[str, Any] = {}
            stack[-1][key] = block
            stack.append(block)
        else:
            stack[-1].setdefault(key, []).append(value)

    if len(stack) > 1:
        raise ValueError("unterminated '{' block")
    return sections


def load_realm_config(path: str | Path) -> RealmConfig:
    """Read krb5.conf at ``path``.

    Raises:
        OSError: If the file cannot be read
        ValueError: If the file cannot be parsed
    """
    sections = parse_krb5_conf(Path(path).read_text())

    libdefaults = sections.get("libdefaults", {})
    default_realm = _first(libdefaults.get("default_realm"))
    enctypes = _first(libdefaults.get("permitted_enctypes")) or ""

    kdcs: dict[str, list[str]] = {}
    for realm, settings in sections.get("realms", {}).items():
        if isinstance(settings, dict):
            kdcs[realm] = list(settings.get("kdc", []))

    return RealmConfig(
        default_realm=default_realm,
        kdcs=kdcs,
        permitted_enctypes=enctypes.split(),
    )


def _first(values: list[str] | None) -> str | None:
    return values[0] if values else None
