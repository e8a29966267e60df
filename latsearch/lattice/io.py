"""
Lattice text format parser

The format is a whitespace-separated token stream:

    id <string>
    start <int>
    end <int>
    numNodes <int>
    numEdges <int>
    node <int> <float>                        (numNodes times)
    edge <int> <int> <string> <int> <int>     (numEdges times)

Keywords are consumed but not checked; only the value tokens are converted.
"""

import logging
from typing import Dict, Iterator, NamedTuple, Tuple

import numpy as np

from .types import Edge
from ..errors import MalformedInputError

logger = logging.getLogger(__name__)

class LatticeFields(NamedTuple):
    """Raw content of a parsed lattice description"""
    utterance_id: str
    start_node: int
    end_node: int
    node_times: np.ndarray
    edges: Dict[Tuple[int, int], Edge]
    edge_count: int

class TokenStream:
    """Sequential reader over the whitespace tokens of a text"""

    def __init__(self, text: str, source: str = "<string>"):
        self.source = source
        self._tokens: Iterator[str] = iter(text.split())

    def next(self) -> str:
        try:
            return next(self._tokens)
        except StopIteration:
            raise MalformedInputError(self.source, "unexpected end of input") from None

    def next_int(self) -> int:
        token = self.next()
        try:
            return int(token)
        except ValueError as err:
            raise MalformedInputError(
                self.source, f"expected an integer, got {token!r}"
            ) from err

    def next_float(self) -> float:
        token = self.next()
        try:
            return float(token)
        except ValueError as err:
            raise MalformedInputError(
                self.source, f"expected a number, got {token!r}"
            ) from err

    def next_index(self, node_count: int) -> int:
        """Read a node index and check it lies in [0, node_count)"""
        index = self.next_int()
        if not 0 <= index < node_count:
            raise MalformedInputError(
                self.source, f"node index {index} outside 0..{node_count - 1}"
            )
        return index

def parse_lattice_text(text: str, source: str = "<string>") -> LatticeFields:
    """
    Parse a lattice description

    Args:
        text: Lattice description in the canonical text format
        source: Name reported in errors (usually the file path)

    Returns:
        LatticeFields holding the parsed header, node times and edges

    Raises:
        MalformedInputError: If the stream ends early or a value is invalid
    """
    tokens = TokenStream(text, source)

    tokens.next()  # id
    utterance_id = tokens.next()
    tokens.next()  # start
    start_node = tokens.next_int()
    tokens.next()  # end
    end_node = tokens.next_int()
    tokens.next()  # numNodes
    node_count = tokens.next_int()
    tokens.next()  # numEdges
    edge_count = tokens.next_int()

    if node_count < 1 or edge_count < 0:
        raise MalformedInputError(
            source, f"invalid sizes: {node_count} nodes, {edge_count} edges"
        )
    if not 0 <= start_node <= end_node < node_count:
        raise MalformedInputError(
            source, f"start {start_node} and end {end_node} do not fit {node_count} nodes"
        )

    node_times = np.zeros(node_count, dtype=np.float64)
    seen_nodes = set()
    for _ in range(node_count):
        tokens.next()  # node
        index = tokens.next_index(node_count)
        if index in seen_nodes:
            raise MalformedInputError(source, f"duplicate node {index}")
        seen_nodes.add(index)
        node_times[index] = tokens.next_float()

    edges: Dict[Tuple[int, int], Edge] = {}
    for _ in range(edge_count):
        tokens.next()  # edge
        source_node = tokens.next_index(node_count)
        target_node = tokens.next_index(node_count)
        label = tokens.next()
        acoustic_score = tokens.next_int()
        language_score = tokens.next_int()

        if (source_node, target_node) in edges:
            raise MalformedInputError(
                source, f"duplicate edge {source_node} -> {target_node}"
            )
        edges[(source_node, target_node)] = Edge(label, acoustic_score, language_score)

    logger.debug(
        "Parsed lattice %s from %s: %d nodes, %d edges",
        utterance_id, source, node_count, edge_count
    )

    return LatticeFields(
        utterance_id=utterance_id,
        start_node=start_node,
        end_node=end_node,
        node_times=node_times,
        edges=edges,
        edge_count=edge_count
    )
