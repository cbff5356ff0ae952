"""Permission implication graph and closure.

Provides:
- ``HierarchyGraph`` — immutable parent → implied-children mapping.
- ``expand()`` — transitive closure of a seed set over a graph.

The graph is not required to be acyclic. ``expand`` keeps a visited guard
so every token is expanded at most once.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Iterator, Mapping

from ..exceptions import ConfigurationError, InvalidPermissionError
from .permission_set import PermissionSet
from .tokens import WILDCARD, validate_permission

logger = logging.getLogger(__name__)

_NO_CHILDREN: frozenset[str] = frozenset()


class HierarchyGraph:
    """Static directed graph: permission → permissions it implies.

    Built once at process start and never mutated. Several graphs may
    coexist (e.g. one per tenant); nothing in the engine reads a global
    table.

    Example::

        graph = HierarchyGraph.from_mapping({
            "user.edit": ["user.view"],
            "user.archive": ["user.delete"],
            "user.delete": ["user.view"],
        })
        graph.implied("user.archive")  # frozenset({'user.delete'})
    """

    __slots__ = ("_edges",)

    def __init__(self, edges: Mapping[str, frozenset[str]] | None = None) -> None:
        self._edges: dict[str, frozenset[str]] = dict(edges or {})

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Iterable[str]]) -> HierarchyGraph:
        """Build a graph from a plain mapping, validating every token.

        Raises:
            InvalidPermissionError: If a parent or child token is malformed.
        """
        edges: dict[str, frozenset[str]] = {}
        for parent, children in mapping.items():
            validate_permission(parent)
            if isinstance(children, str):
                raise InvalidPermissionError(
                    f"Implied permissions of {parent!r} must be a list, got a string",
                    token=parent,
                )
            merged = edges.get(parent, _NO_CHILDREN) | frozenset(validate_permission(c) for c in (children or ()))
            edges[parent] = merged
        return cls(edges)

    @classmethod
    def from_json_file(cls, path: str | Path) -> HierarchyGraph:
        """Load a graph from a JSON object of ``{"parent": ["child", ...]}``.

        Raises:
            ConfigurationError: If the file cannot be read or is not a JSON object.
            InvalidPermissionError: If a token in the file is malformed.
        """
        file_path = Path(path)
        try:
            raw = json.loads(file_path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigurationError(f"Cannot read hierarchy file {file_path}: {e}", path=str(file_path)) from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Hierarchy file {file_path} is not valid JSON: {e}", path=str(file_path)) from e

        if not isinstance(raw, dict):
            raise ConfigurationError(
                f"Hierarchy file {file_path} must contain a JSON object",
                path=str(file_path),
            )
        graph = cls.from_mapping(raw)
        logger.info("Loaded permission hierarchy from %s (%d parents)", file_path, len(graph))
        return graph

    def implied(self, token: str) -> frozenset[str]:
        """Direct children of ``token``; empty for unknown tokens."""
        return self._edges.get(token, _NO_CHILDREN)

    def merged(self, other: HierarchyGraph) -> HierarchyGraph:
        """New graph holding the edges of both graphs."""
        edges = dict(self._edges)
        for parent, children in other._edges.items():
            edges[parent] = edges.get(parent, _NO_CHILDREN) | children
        return HierarchyGraph(edges)

    def __contains__(self, token: object) -> bool:
        return token in self._edges

    def __iter__(self) -> Iterator[str]:
        return iter(self._edges)

    def __len__(self) -> int:
        return len(self._edges)

    def __repr__(self) -> str:
        return f"HierarchyGraph(parents={len(self._edges)})"


def expand(seed: PermissionSet, graph: HierarchyGraph) -> PermissionSet:
    """Expand permissions by resolving inheritance.

    Returns every token reachable from ``seed`` (seed included). The
    wildcard is kept as-is and never expanded.

    Example::

        >>> graph = HierarchyGraph.from_mapping({"a": ["b"], "b": ["a", "c"]})
        >>> sorted(expand(PermissionSet(["a"]), graph))
        ['a', 'b', 'c']
    """
    expanded: set[str] = set(seed)
    queue = list(expanded)

    while queue:
        perm = queue.pop()
        if perm == WILDCARD:
            continue
        for child in graph.implied(perm):
            if child not in expanded:
                expanded.add(child)
                queue.append(child)

    return PermissionSet(expanded)


__all__ = [
    "HierarchyGraph",
    "expand",
]
