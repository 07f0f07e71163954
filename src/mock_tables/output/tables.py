"""
Group streamed rows into per-table collections.

Tables keep the order in which they were first seen. Because a parent row is
always emitted before its dependents, a parent table always comes before any
table that only ever appears underneath it.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Tuple

import pandas as pd
from tqdm import tqdm


def group_rows(emissions: Iterable[Tuple[str, Any]], progress: bool = False) -> Dict[str, List[Any]]:
    """Group ``(table, row)`` pairs into lists of rows keyed by table."""
    grouped: Dict[str, List[Any]] = {}
    for table, row in tqdm(emissions, desc="Collecting rows", unit="row", disable=not progress):
        grouped.setdefault(table, []).append(row)
    return grouped


def collect_tables(emissions: Iterable[Tuple[str, Any]], progress: bool = False) -> Dict[str, pd.DataFrame]:
    """
    Collect ``(table, row)`` pairs into one DataFrame per table.

    Args:
        emissions: Stream of pairs, e.g. the RowStream returned by generate()
        progress: Show a tqdm progress bar while draining

    Returns:
        Dictionary mapping table names to DataFrames, in first-seen order
    """
    return {
        table: pd.DataFrame(rows)
        for table, rows in group_rows(emissions, progress=progress).items()
    }
