from __future__ import annotations

"""table_body.py — body ("data.json") normalization.

The body is an array of charts. Producers are careless, so each element is
judged on its own and silently dropped when unusable:
- not an object (null, string, nested array, ...)
- `level` that is neither a number nor a string
- no usable checksum

Checksum priority is fixed: md5 first, sha256 second. Many tables ship a valid
hash under one name and garbage ("", "null", null, wrong length) under the other,
so "whichever is non-empty" is not good enough.
"""

from dataclasses import dataclass, field
from typing import Any, Optional
import re

from .errors import BodyShapeError
from .table_head import is_level


_MD5_RE = re.compile(r"[0-9a-fA-F]{32}")
_SHA256_RE = re.compile(r"[0-9a-fA-F]{64}")


@dataclass(frozen=True)
class ChecksumIdentity:
    type: str  # md5 | sha256
    value: str


@dataclass(frozen=True)
class TableEntry:
    checksum: ChecksumIdentity
    level: Any
    content: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def md5(self) -> Optional[str]:
        return self.checksum.value if self.checksum.type == "md5" else None

    @property
    def sha256(self) -> Optional[str]:
        return self.checksum.value if self.checksum.type == "sha256" else None

    def get(self, key: str, default: Any = None) -> Any:
        return self.content.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        return dict(self.content)


@dataclass
class BodyReport:
    entries: list[TableEntry]
    total: int
    dropped: int


def _json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    return type(value).__name__


def _is_hex(value: Any, pattern: re.Pattern[str]) -> bool:
    return isinstance(value, str) and pattern.fullmatch(value) is not None


def get_entry_checksum(raw: dict[str, Any]) -> Optional[ChecksumIdentity]:
    md5 = raw.get("md5")
    if _is_hex(md5, _MD5_RE):
        return ChecksumIdentity("md5", md5)

    sha256 = raw.get("sha256")
    if _is_hex(sha256, _SHA256_RE):
        return ChecksumIdentity("sha256", sha256)

    return None


def _normalize_entry(raw: Any) -> Optional[TableEntry]:
    if not isinstance(raw, dict):
        return None
    level = raw.get("level")
    if not is_level(level):
        return None
    checksum = get_entry_checksum(raw)
    if checksum is None:
        return None
    return TableEntry(checksum=checksum, level=level, content=dict(raw))


def normalize_body_report(data: Any) -> BodyReport:
    """Like normalize_body(), but also says how many elements were dropped."""
    if not isinstance(data, list):
        raise BodyShapeError(_json_type_name(data))

    entries: list[TableEntry] = []
    for raw in data:
        entry = _normalize_entry(raw)
        if entry is not None:
            entries.append(entry)
    return BodyReport(entries=entries, total=len(data), dropped=len(data) - len(entries))


def normalize_body(data: Any) -> list[TableEntry]:
    return normalize_body_report(data).entries
