from __future__ import annotations

"""table_head.py — the table header ("head.json"): shape check + data model.

What the check DOES:
- requires name / symbol / data_url to be strings
- requires levels / level_order, when present, to be arrays of numbers or strings
- reports every problem at once (header authors fix them in one go)

What it deliberately does NOT do:
- look at unknown fields: tables carry all sorts of undocumented keys,
  and they are kept verbatim in TableHead.fields
- check levels against the body
"""

from dataclasses import dataclass, field
from typing import Any, Optional
from urllib.parse import urljoin, urlparse

from .errors import HeaderValidationError


# wire spellings, first one wins when both are present
_DATA_URL_KEYS = ("data_url", "dataLocation")
_LEVEL_ORDER_KEYS = ("level_order", "levelOrder")

KNOWN_KEYS = frozenset(("name", "symbol", "levels") + _DATA_URL_KEYS + _LEVEL_ORDER_KEYS)


@dataclass
class HeadIssue:
    path: str
    message: str


def is_level(value: Any) -> bool:
    """A level is a JSON number or a JSON string (bool is not a number here)."""
    if isinstance(value, bool):
        return False
    return isinstance(value, (int, float, str))


def _first_key(d: dict[str, Any], keys: tuple[str, ...]) -> Optional[str]:
    for k in keys:
        if k in d:
            return k
    return None


def _lint_levels(d: dict[str, Any], key: str, issues: list[HeadIssue]) -> None:
    val = d.get(key)
    if val is None and key not in d:
        return
    if not isinstance(val, list):
        issues.append(HeadIssue(key, "must be an array of numbers or strings"))
        return
    for i, lv in enumerate(val):
        if not is_level(lv):
            issues.append(HeadIssue(f"{key}.{i}", f"must be a number or string, got {type(lv).__name__}"))


def lint_head_dict(data: Any) -> list[HeadIssue]:
    if not isinstance(data, dict):
        return [HeadIssue("", f"header must be an object, got {type(data).__name__}")]

    issues: list[HeadIssue] = []
    for key in ("name", "symbol"):
        if not isinstance(data.get(key), str):
            issues.append(HeadIssue(key, "required, must be a string"))

    dk = _first_key(data, _DATA_URL_KEYS)
    if dk is None:
        issues.append(HeadIssue("data_url", "required, must be a string"))
    elif not isinstance(data.get(dk), str):
        issues.append(HeadIssue(dk, "must be a string"))

    _lint_levels(data, "levels", issues)
    lk = _first_key(data, _LEVEL_ORDER_KEYS)
    if lk is not None:
        _lint_levels(data, lk, issues)
    return issues


@dataclass(frozen=True)
class TableHead:
    name: str
    symbol: str
    data_url: str
    levels: Optional[tuple[Any, ...]] = None
    level_order: Optional[tuple[Any, ...]] = None
    # the whole header as received, unknown keys included
    fields: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def extra(self) -> dict[str, Any]:
        """Fields this package does not interpret."""
        return {k: v for k, v in self.fields.items() if k not in KNOWN_KEYS}

    def get(self, key: str, default: Any = None) -> Any:
        return self.fields.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        return dict(self.fields)


def parse_head(data: Any) -> TableHead:
    """Validate a decoded header; raise HeaderValidationError listing every issue."""
    issues = lint_head_dict(data)
    if issues:
        raise HeaderValidationError(issues)

    def to_tuple(x: Any) -> Optional[tuple[Any, ...]]:
        return tuple(x) if isinstance(x, list) else None

    lk = _first_key(data, _LEVEL_ORDER_KEYS)
    return TableHead(
        name=data["name"],
        symbol=data["symbol"],
        data_url=data[_first_key(data, _DATA_URL_KEYS)],
        levels=to_tuple(data.get("levels")),
        level_order=to_tuple(data.get(lk)) if lk else None,
        fields=dict(data),
    )


def resolve_data_location(head: TableHead, head_url: str) -> str:
    """Join head.data_url onto the header's own URL; it must give an absolute http(s) URL."""
    try:
        body_url = urljoin(head_url, head.data_url.strip())
        parsed = urlparse(body_url)
    except ValueError as e:
        raise HeaderValidationError([HeadIssue("data_url", f"cannot be resolved: {e}")]) from e

    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise HeaderValidationError([
            HeadIssue("data_url", f"{head.data_url!r} does not resolve to an absolute URL against {head_url}"),
        ])
    return body_url
