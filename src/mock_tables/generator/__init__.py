"""
Generator module: the capability contract and the generation engine.

Handles graph normalization, depth-first traversal with dependency context
propagation, and streaming of emitted rows through a bounded channel.
"""

from mock_tables.generator.base import TableGenerator
from mock_tables.generator.context import DependencyContext
from mock_tables.generator.engine import traverse
from mock_tables.generator.graph import iter_generators, load_graph, normalize_node
from mock_tables.generator.stream import Channel, RowStream, generate

__all__ = [
    "TableGenerator",
    "DependencyContext",
    "traverse",
    "iter_generators",
    "load_graph",
    "normalize_node",
    "Channel",
    "RowStream",
    "generate",
]
