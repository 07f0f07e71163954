"""
Mock Tables - relationally consistent mock data from generator graphs

Walks a user-declared dependency graph of table generators and streams the
resulting rows, so every child row references the parent row it was produced
under.

Features:
- Depth-first traversal with path-scoped dependency context
- Per-visit generator state for rows that depend on earlier rows
- Deterministic output from a single seeded numpy Generator
- Streaming through a bounded channel with failure propagation
- Collection into pandas DataFrames and CSV/Parquet output
"""

__version__ = "0.1.0"

from mock_tables.exceptions import (
    ConfigurationError,
    GenerationError,
    GeneratorContractError,
    GraphShapeError,
    MockTablesError,
)
from mock_tables.generator import (
    DependencyContext,
    RowStream,
    TableGenerator,
    generate,
    traverse,
)
from mock_tables.models import Emission, GenerationConfig, GeneratorNode, SequenceNode
from mock_tables.output import OutputWriter, collect_tables
from mock_tables.utils import as_range, resolve_rng, sample_count, seeded_faker, uuid4

__all__ = [
    # Engine
    "TableGenerator",
    "DependencyContext",
    "RowStream",
    "generate",
    "traverse",
    # Models
    "Emission",
    "GenerationConfig",
    "GeneratorNode",
    "SequenceNode",
    # Output
    "OutputWriter",
    "collect_tables",
    # Randomness
    "as_range",
    "resolve_rng",
    "sample_count",
    "seeded_faker",
    "uuid4",
    # Errors
    "MockTablesError",
    "ConfigurationError",
    "GenerationError",
    "GeneratorContractError",
    "GraphShapeError",
]
