"""
Capability contract every node generator implements.

A TableGenerator produces the rows of one table. The engine calls its
capabilities in a fixed order for each visit of the node:

1. ``visit`` once, to build per-visit state
2. ``num_rows`` once, with that state
3. ``emit`` once per row, with the same state object

Generators are never mutated by the engine; anything that has to change from
row to row belongs in the visit state.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

import numpy as np


class TableGenerator(ABC):
    """
    Base class for row generators.

    Example:
        >>> class CustomerGenerator(TableGenerator):
        ...     table_key = "customers"
        ...
        ...     def num_rows(self, rng, state=None):
        ...         return 3
        ...
        ...     def emit(self, rng, deps, state=None):
        ...         return {"id": uuid4(rng)}
    """

    @property
    @abstractmethod
    def table_key(self) -> str:
        """
        Name of the table the rows belong to.

        Must stay the same for every call on one instance. A plain class
        attribute is enough to satisfy it.
        """

    @property
    def dependency_key(self) -> str:
        """
        Key under which this generator's latest row is visible to descendants.

        Falls back on ``table_key``. Override it when two generators write to
        the same table but dependents need to tell their rows apart.
        """
        return self.table_key

    def visit(self, rng: np.random.Generator, deps: Mapping[str, Any]) -> Any:
        """
        Build per-visit state.

        Called once each time the node is entered, before any row of that
        visit is produced. The returned value is passed to ``num_rows`` and
        to every ``emit`` call of the visit.
        """
        return None

    @abstractmethod
    def num_rows(self, rng: np.random.Generator, state: Optional[Any] = None) -> int:
        """Number of rows to produce for this visit. May differ between visits."""

    @abstractmethod
    def emit(
        self,
        rng: np.random.Generator,
        deps: Mapping[str, Any],
        state: Optional[Any] = None,
    ) -> Any:
        """
        Produce a single row.

        ``deps`` holds the latest row of every ancestor keyed by its
        ``dependency_key``. ``state`` is the object returned by ``visit`` and
        may be updated so later rows depend on earlier ones.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(table_key={self.table_key!r})"
