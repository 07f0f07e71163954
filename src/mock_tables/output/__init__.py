"""
Output module for collecting streamed rows into tables and writing them.
"""

from mock_tables.output.tables import collect_tables, group_rows
from mock_tables.output.writer import OutputWriter

__all__ = [
    "collect_tables",
    "group_rows",
    "OutputWriter",
]
