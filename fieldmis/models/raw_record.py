from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

"""RawRecord model: one parsed CSV data line keyed by normalized header.

Feed column names drift between sheets ("Farmer ID", "FARMER_ID", "FID",
"bnf_section-bnf_name" ...). Call sites never index fields directly; they ask
the record to ``resolve`` an ordered list of aliases instead.
"""

__all__ = [
    "RawRecord",
    "normalize_header",
]

_WHITESPACE = re.compile(r"\s+")


def normalize_header(raw: str, *, strip_underscores: bool = False) -> str:
    """Uppercase and drop all whitespace (and underscores for budget sheets)."""
    key = _WHITESPACE.sub("", str(raw)).upper()
    if strip_underscores:
        key = key.replace("_", "")
    return key


def _alias_variants(alias: str) -> list[str]:
    key = normalize_header(alias)
    variants = [key]
    bare = key.replace("_", "")
    if bare and bare != key:
        variants.append(bare)
    return variants


@dataclass(frozen=True)
class RawRecord:
    """A single data row after header normalization.

    ``fields`` preserves column order (dict insertion order), which is what
    makes substring matching deterministic. ``values`` keeps the raw field list
    for sheets that address some columns by position.
    """
    fields: dict[str, str]
    values: tuple[str, ...] = field(default_factory=tuple)
    line_number: int = -1  # 1-based line in the source document, -1 if unknown

    def get(self, key: str, default: str = "") -> str:
        return self.fields.get(key, default)

    def at(self, index: int, default: str = "") -> str:
        """Positional access into the raw field list."""
        if 0 <= index < len(self.values):
            return self.values[index]
        return default

    def headers(self) -> list[str]:
        return list(self.fields.keys())

    def resolve(self, aliases: Iterable[str], *, skip_empty: bool = False) -> str:
        """Return the value of the first header matching the first usable alias.

        For each alias (in priority order), both its normalized form and its
        underscore-free variant are tried:
        1. a header equal to the alias
        2. otherwise the first header (column order) containing the alias

        With ``skip_empty`` an alias whose matched value is blank does not win
        and the next alias is tried. Returns "" when nothing matches.
        """
        keys = list(self.fields.keys())
        for alias in aliases:
            for variant in _alias_variants(alias):
                if not variant:
                    continue
                match = variant if variant in self.fields else None
                if match is None:
                    match = next((k for k in keys if variant in k), None)
                if match is None:
                    continue
                value = self.fields[match]
                if skip_empty and not value.strip():
                    continue
                return value
        return ""
