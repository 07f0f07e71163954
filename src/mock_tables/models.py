"""
Core data models for the mock_tables package.

Defines the graph node shapes walked by the engine, the unit of streamed output
and the configuration object for a generation run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, NamedTuple, Optional, Tuple

import numpy as np
import yaml

from mock_tables.exceptions import ConfigurationError

if TYPE_CHECKING:
    from mock_tables.generator.base import TableGenerator

SUPPORTED_OUTPUT_FORMATS = ("csv", "parquet")
DEFAULT_GRAPH = "mock_tables.samples.banking:build_graph"
DEFAULT_BUFFER_SIZE = 10


class Emission(NamedTuple):
    """A single streamed row together with the table it belongs to."""
    table: str
    row: Any


@dataclass(frozen=True)
class GeneratorNode:
    """A generator paired with the ordered child nodes it feeds."""
    generator: TableGenerator
    children: Tuple[Any, ...] = ()

    def __post_init__(self):
        if not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))


@dataclass(frozen=True)
class SequenceNode:
    """Ordered sibling nodes, each traversed with the same dependency context."""
    nodes: Tuple[Any, ...] = ()

    def __post_init__(self):
        if not isinstance(self.nodes, tuple):
            object.__setattr__(self, "nodes", tuple(self.nodes))


@dataclass
class GenerationConfig:
    """Configuration for a generation run."""
    graph: str = DEFAULT_GRAPH
    seed: Optional[int] = None
    buffer_size: int = DEFAULT_BUFFER_SIZE
    output_formats: List[str] = field(default_factory=lambda: ["csv"])
    output_dir: Path = field(default_factory=lambda: Path("output"))
    run_id: Optional[str] = None

    # Keyword arguments passed to a graph factory
    graph_options: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.run_id is None:
            self.run_id = datetime.now().strftime("%Y%m%d_%H%M%S")
        if isinstance(self.output_dir, str):
            self.output_dir = Path(self.output_dir)
        if isinstance(self.output_formats, str):
            self.output_formats = [f.strip() for f in self.output_formats.split(",") if f.strip()]
        self.output_formats = [f.lower() for f in self.output_formats]
        self.validate()

    def validate(self) -> None:
        """Check field values, raising ConfigurationError on the first problem."""
        if isinstance(self.buffer_size, bool) or not isinstance(self.buffer_size, int):
            raise ConfigurationError(f"buffer_size must be an integer, got {self.buffer_size!r}")
        if self.buffer_size < 0:
            raise ConfigurationError(f"buffer_size must be >= 0, got {self.buffer_size}")
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise ConfigurationError(f"seed must be an integer, got {self.seed!r}")
        unknown = [f for f in self.output_formats if f not in SUPPORTED_OUTPUT_FORMATS]
        if unknown:
            raise ConfigurationError(
                f"Unsupported output formats {unknown}; expected any of {list(SUPPORTED_OUTPUT_FORMATS)}"
            )
        if ":" not in self.graph:
            raise ConfigurationError(f"graph must be a 'module:attribute' reference, got {self.graph!r}")

    def make_rng(self) -> Optional[np.random.Generator]:
        """Return a fresh generator for ``seed``, or None to use the default one."""
        if self.seed is None:
            return None
        return np.random.default_rng(self.seed)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "graph": self.graph,
            "seed": self.seed,
            "buffer_size": self.buffer_size,
            "output_formats": list(self.output_formats),
            "output_dir": str(self.output_dir),
            "run_id": self.run_id,
            "graph_options": dict(self.graph_options),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> GenerationConfig:
        """Create from dictionary."""
        known = {"graph", "seed", "buffer_size", "output_formats", "output_dir", "run_id", "graph_options"}
        extra = set(data) - known
        if extra:
            raise ConfigurationError(f"Unknown configuration keys: {sorted(extra)}")
        return cls(
            graph=data.get("graph", DEFAULT_GRAPH),
            seed=data.get("seed"),
            buffer_size=data.get("buffer_size", DEFAULT_BUFFER_SIZE),
            output_formats=data.get("output_formats", ["csv"]),
            output_dir=Path(data.get("output_dir", "output")),
            run_id=data.get("run_id"),
            graph_options=data.get("graph_options") or {},
        )

    @classmethod
    def from_yaml(cls, path: Path) -> GenerationConfig:
        """Load configuration from a YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Expected a mapping at the top of {path}")
        return cls.from_dict(data)
