from __future__ import annotations

"""errors.py — what can go wrong while loading a table.

Every class here is terminal for one `load_table()` call.
Per-chart problems inside the body are NOT errors: such charts are simply
dropped by table_body.normalize_body().
"""

from typing import Any, Optional, Sequence


class BMSTableError(Exception):
    """Base class: catch this to handle any load failure."""


class ConfigurationError(BMSTableError):
    """The caller asked for something that cannot work (e.g. zero fetch attempts)."""


class TransportError(BMSTableError):
    def __init__(self, url: str, status_code: Optional[int], reason: Optional[str] = None) -> None:
        self.url = url
        self.status_code = status_code
        self.reason = reason
        if status_code is not None:
            msg = f"Failed to fetch {url}: {status_code}"
        else:
            msg = f"Failed to fetch {url}: {reason or 'request_failed'}"
        super().__init__(msg)


class MissingPointerError(BMSTableError):
    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"{url} returned HTML, but had no readable bmstable tag. Cannot parse table.")


class MalformedDocumentError(BMSTableError):
    def __init__(self, source: str, detail: str) -> None:
        self.source = source
        self.detail = detail
        super().__init__(f"Failed to read {source}: {detail}")


class HeaderValidationError(BMSTableError):
    """Header failed the shape check. `issues` lists every problem, not just the first."""

    def __init__(self, issues: Sequence[Any]) -> None:
        self.issues = list(issues)
        lines = [f"{i.path}: {i.message}" for i in self.issues]
        super().__init__("Invalid header: " + "; ".join(lines))


class BodyShapeError(BMSTableError):
    def __init__(self, observed_type: str) -> None:
        self.observed_type = observed_type
        super().__init__(f"Invalid body: expected array, got {observed_type}")
