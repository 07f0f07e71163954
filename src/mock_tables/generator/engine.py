"""
Depth-first traversal of a generator graph.

Handles:
- Per-visit state initialization and row-count determination
- Row emission in pre-order (a row before its dependents' rows)
- Dependency context propagation to child nodes

Every capability call receives the same RNG in traversal order, which makes a
seeded run reproducible.
"""

from __future__ import annotations

import logging
import numbers
from typing import Any, Callable, Optional

import numpy as np

from mock_tables.exceptions import GeneratorContractError
from mock_tables.generator.context import DependencyContext
from mock_tables.generator.graph import normalize_node
from mock_tables.models import GeneratorNode, SequenceNode
from mock_tables.utils.randomness import RngLike, resolve_rng

logger = logging.getLogger(__name__)

EmitCallback = Callable[[str, Any], Any]


def traverse(
    callback: EmitCallback,
    rng: RngLike,
    dag: Any,
    deps: Optional[DependencyContext] = None,
) -> None:
    """
    Traverse ``dag`` and call ``callback(table_key, row)`` for every row.

    Exceptions raised by generators or by ``callback`` propagate unchanged and
    stop the traversal.

    Args:
        callback: Receives each emitted row before its dependents are visited
        rng: Generator threaded through all capability calls (see resolve_rng)
        dag: Graph node (generator, pair, sequence)
        deps: Starting dependency context, empty by default
    """
    _traverse(callback, resolve_rng(rng), dag, deps if deps is not None else DependencyContext())


def _traverse(
    callback: EmitCallback,
    rng: np.random.Generator,
    dag: Any,
    deps: DependencyContext,
) -> None:
    node = normalize_node(dag)

    if isinstance(node, SequenceNode):
        for child in node.nodes:
            _traverse(callback, rng, child, deps)
        return

    _visit(callback, rng, node, deps)


def _visit(
    callback: EmitCallback,
    rng: np.random.Generator,
    node: GeneratorNode,
    deps: DependencyContext,
) -> None:
    gen = node.generator

    state = gen.visit(rng, deps)
    t_key, d_key = gen.table_key, gen.dependency_key
    n = _checked_row_count(gen, gen.num_rows(rng, state))
    logger.debug(f"Visiting {t_key} ({d_key}): {n} rows, {len(node.children)} child nodes")

    for _ in range(n):
        row = gen.emit(rng, deps, state)
        callback(t_key, row)

        if not node.children:
            continue

        child_deps = deps.with_row(d_key, row)
        for child in node.children:
            _traverse(callback, rng, child, child_deps)


def _checked_row_count(gen: Any, n: Any) -> int:
    if isinstance(n, bool) or not isinstance(n, numbers.Integral):
        raise GeneratorContractError(f"{gen!r}.num_rows returned {n!r}, expected an integer")
    if n < 0:
        raise GeneratorContractError(f"{gen!r}.num_rows returned {n}, expected a non-negative count")
    return int(n)
