"""
Exception hierarchy for mock_tables.

Generator failures are never recovered internally: the traversal aborts and the
streaming layer hands the original exception to the consumer wrapped in a
GenerationError.
"""

from __future__ import annotations

from typing import Optional


class MockTablesError(Exception):
    """Base exception for all mock_tables errors."""


class ConfigurationError(MockTablesError):
    """Raised when a configuration value or graph reference is invalid."""


class GraphShapeError(MockTablesError, TypeError):
    """Raised when a graph node cannot be interpreted by the engine."""

    def __init__(self, node: object, reason: str = "unsupported graph node"):
        self.node = node
        super().__init__(f"{reason}: {node!r}")


class GeneratorContractError(MockTablesError, ValueError):
    """Raised when a generator capability returns a value the engine cannot use."""


class ChannelClosedError(MockTablesError):
    """Raised when putting an item on a channel that has been closed."""


class GenerationError(MockTablesError):
    """
    Raised to a stream consumer when the producer failed.

    The original exception is kept as ``cause`` and chained as ``__cause__``.
    """

    def __init__(self, cause: Optional[BaseException]):
        self.cause = cause
        detail = f"{type(cause).__name__}: {cause}" if cause is not None else "unknown failure"
        super().__init__(f"Row generation failed: {detail}")
