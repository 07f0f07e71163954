"""
Graph node normalization and graph loading.

Users describe a graph with plain Python values:

- a ``TableGenerator`` on its own is a leaf
- ``(generator, children)`` pairs a generator with its dependents; ``children``
  is a list of nodes or a single node, so pairs chain as
  ``(a, (b, [c, d]))``
- a list (or any other non-tuple iterable) holds siblings

``normalize_node`` turns one level of that shorthand into either a
``GeneratorNode`` or a ``SequenceNode`` so the engine only deals with two
shapes. Nested nodes are normalized when the engine reaches them.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Mapping
from typing import Any, Iterator, Tuple, Union

from mock_tables.exceptions import ConfigurationError, GraphShapeError
from mock_tables.generator.base import TableGenerator
from mock_tables.models import GeneratorNode, SequenceNode

logger = logging.getLogger(__name__)

Node = Union[GeneratorNode, SequenceNode]


def normalize_node(node: Any) -> Node:
    """
    Normalize a single graph node.

    Raises:
        GraphShapeError: If ``node`` is not a generator, pair or sequence
    """
    if isinstance(node, (GeneratorNode, SequenceNode)):
        return node
    if isinstance(node, TableGenerator):
        return GeneratorNode(node, ())
    if isinstance(node, tuple):
        return _normalize_pair(node)
    if isinstance(node, (str, bytes, Mapping)):
        raise GraphShapeError(node)
    try:
        nodes = tuple(node)
    except TypeError:
        raise GraphShapeError(node) from None
    return SequenceNode(nodes)


def _normalize_pair(pair: Tuple[Any, ...]) -> GeneratorNode:
    if len(pair) != 2 or not isinstance(pair[0], TableGenerator):
        raise GraphShapeError(pair, "expected a (TableGenerator, children) pair")

    generator, children = pair
    if isinstance(children, SequenceNode):
        return GeneratorNode(generator, children.nodes)
    if isinstance(children, list):
        return GeneratorNode(generator, tuple(children))
    # Any other right-hand side is a single child, e.g. a chained pair
    return GeneratorNode(generator, (children,))


def iter_generators(dag: Any, depth: int = 0) -> Iterator[Tuple[int, TableGenerator]]:
    """Yield ``(depth, generator)`` for every generator in declaration order."""
    node = normalize_node(dag)
    if isinstance(node, SequenceNode):
        for child in node.nodes:
            yield from iter_generators(child, depth)
        return
    yield depth, node.generator
    for child in node.children:
        yield from iter_generators(child, depth + 1)


def load_graph(ref: str, **options: Any) -> Any:
    """
    Resolve a ``module:attribute`` reference to a graph.

    A callable attribute is treated as a graph factory and called with
    ``options``; anything else is returned as the graph itself.
    """
    module_name, _, attr = ref.partition(":")
    if not module_name or not attr:
        raise ConfigurationError(f"Graph reference must look like 'module:attribute', got {ref!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import graph module {module_name!r}: {e}") from e

    try:
        target = getattr(module, attr)
    except AttributeError:
        raise ConfigurationError(f"Module {module_name!r} has no attribute {attr!r}") from None

    if callable(target) and not isinstance(target, TableGenerator):
        logger.debug(f"Building graph from factory {ref} with options {options}")
        try:
            return target(**options)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Graph factory {ref} rejected options {options}: {e}") from e
    if options:
        logger.warning(f"Ignoring graph options for non-factory reference {ref}")
    return target
