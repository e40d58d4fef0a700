from __future__ import annotations

"""table.py — the loaded table: head + normalized body + level order."""

from dataclasses import dataclass
from typing import Any, Optional

from .table_body import TableEntry
from .table_head import TableHead


def _level_key(level: Any) -> tuple[str, Any]:
    # 1 and "1" are different folders
    return ("s" if isinstance(level, str) else "n", level)


@dataclass(frozen=True)
class Table:
    head: TableHead
    body: tuple[TableEntry, ...]
    url: Optional[str] = None
    head_url: Optional[str] = None
    body_url: Optional[str] = None
    dropped_entries: int = 0

    def levels_in_body(self) -> list[Any]:
        """Distinct levels in the order they first appear in the body."""
        seen: set[tuple[str, Any]] = set()
        levels: list[Any] = []
        for chart in self.body:
            key = _level_key(chart.level)
            if key not in seen:
                seen.add(key)
                levels.append(chart.level)
        return levels

    def get_level_order(self) -> list[Any]:
        """
        All levels of this table, in folder order.

        Declared `levels` (or `level_order`) win, even if they contradict the body.
        Otherwise the order of first appearance in the body is used: that is
        what other tools do, so tables are written to work under that assumption.
        """
        if self.head.levels is not None:
            return list(self.head.levels)
        if self.head.level_order is not None:
            return list(self.head.level_order)
        return self.levels_in_body()
