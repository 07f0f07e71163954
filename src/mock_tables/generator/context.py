"""
Path-scoped dependency context.

Maps dependency keys to the most recent row of each ancestor on the current
path. A context is never changed after construction: ``with_row`` returns a
new context, so sibling branches and earlier rows keep seeing their own view.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, Mapping, Optional


class DependencyContext(Mapping[str, Any]):
    """Immutable mapping of dependency key to ancestor row."""

    __slots__ = ("_rows",)

    def __init__(self, rows: Optional[Mapping[str, Any]] = None):
        self._rows: Dict[str, Any] = dict(rows) if rows else {}

    def with_row(self, key: str, row: Any) -> DependencyContext:
        """Return a copy of this context with ``key`` pointing at ``row``."""
        rows = dict(self._rows)
        rows[key] = row
        return DependencyContext(rows)

    def __getitem__(self, key: str) -> Any:
        return self._rows[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __repr__(self) -> str:
        return f"DependencyContext({self._rows!r})"
