"""
Traversal Module for latsearch

This module implements the algorithms that walk a lattice in topological order:
- Depth-first topological ordering
- Single-source shortest path over a DAG
- Source-to-sink path counting

All functions take the successor lists of a lattice, keyed by source node
and sorted by destination, and only consider nodes inside [start, end].
"""

import logging
from typing import Dict, List, Sequence, Tuple

import numpy as np

from .types import Edge
from ..errors import NoPathError

logger = logging.getLogger(__name__)

Successors = Dict[int, List[Tuple[int, Edge]]]

def topological_sort(
    successors: Successors,
    start: int,
    end: int
) -> Tuple[int, ...]:
    """
    Order nodes so that every edge points forward

    Runs a depth-first search from each unvisited node in ascending index
    order and returns the reversed post-order.

    Args:
        successors: Outgoing (destination, edge) pairs per source node
        start: First node index of the range
        end: Last node index of the range

    Returns:
        Tuple of node indices in topological order
    """
    visited = set()
    post_order: List[int] = []

    for root in range(start, end + 1):
        if root in visited:
            continue
        visited.add(root)
        stack = [(root, iter(successors.get(root, ())))]

        while stack:
            node, children = stack[-1]
            for child, _ in children:
                if start <= child <= end and child not in visited:
                    visited.add(child)
                    stack.append((child, iter(successors.get(child, ()))))
                    break
            else:
                # All successors finished
                stack.pop()
                post_order.append(node)

    post_order.reverse()
    return tuple(post_order)

def shortest_path(
    successors: Successors,
    order: Sequence[int],
    start: int,
    end: int,
    lm_scale: float,
    node_count: int
) -> Tuple[List[int], float]:
    """
    Find the lowest-cost path from start to end

    Args:
        successors: Outgoing (destination, edge) pairs per source node
        order: Topological order of the nodes in [start, end]
        start: Source node
        end: Sink node
        lm_scale: Language model weight used for edge costs
        node_count: Total number of nodes in the lattice

    Returns:
        Tuple of (node indices from start to end, total path cost)

    Raises:
        NoPathError: If end cannot be reached from start
    """
    distance = np.full(node_count, np.inf)
    predecessor = np.full(node_count, -1, dtype=np.int64)
    distance[start] = 0.0

    for node in order:
        if np.isinf(distance[node]):
            continue
        for successor, edge in successors.get(node, ()):
            if not start <= successor <= end:
                continue
            candidate = distance[node] + edge.combined_score(lm_scale)
            # Strict comparison keeps the first edge that reached the minimum
            if candidate < distance[successor]:
                distance[successor] = candidate
                predecessor[successor] = node

    if np.isinf(distance[end]):
        raise NoPathError(f"node {end} is unreachable from node {start}")

    path = [end]
    while path[-1] != start:
        path.append(int(predecessor[path[-1]]))
    path.reverse()

    logger.debug("Best path visits %d nodes with cost %s", len(path), distance[end])
    return path, float(distance[end])

def count_paths(
    successors: Successors,
    order: Sequence[int],
    start: int,
    end: int
) -> int:
    """
    Count distinct directed paths from start to end

    Args:
        successors: Outgoing (destination, edge) pairs per source node
        order: Topological order of the nodes in [start, end]
        start: Source node
        end: Sink node

    Returns:
        Number of paths as an unbounded integer
    """
    counts = dict.fromkeys(order, 0)
    counts[start] = 1

    for node in order:
        if counts[node] == 0:
            continue
        for successor, _ in successors.get(node, ()):
            if start <= successor <= end:
                counts[successor] += counts[node]

    return counts.get(end, 0)
