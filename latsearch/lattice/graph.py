"""
Lattice Module for latsearch

This module implements the word lattice of one utterance:
- Construction from the canonical text format
- Best path decoding and path counting
- Density and time-based word queries
- Text and DOT serialization

A lattice is read-only once constructed. Its topological order is computed
in the constructor and shared by every traversal.
"""

import logging
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Set, Tuple, Union

import graphviz
import numpy as np

from .io import parse_lattice_text
from .traversal import count_paths, shortest_path, topological_sort
from .types import Edge
from ..config import SILENCE_TOKEN, WORD_DELIMITER
from ..decoder.hypothesis import Hypothesis
from ..errors import DegenerateInputError
from ..files import read_text, write_text

logger = logging.getLogger(__name__)

class Lattice:
    """
    Weighted DAG of word hypotheses between a single start and end node

    Example:
        >>> lattice = Lattice.from_file("utt1.lattice")
        >>> hypothesis = lattice.decode(lm_scale=8.0)
        >>> hypothesis.hypothesis_string()
    """

    def __init__(
        self,
        utterance_id: str,
        start_node: int,
        end_node: int,
        node_times,
        edges: Mapping[Tuple[int, int], Edge],
        edge_count: Optional[int] = None,
        silence_token: str = SILENCE_TOKEN,
        word_delimiter: str = WORD_DELIMITER
    ):
        """
        Initialize lattice

        Args:
            utterance_id: Identifier echoed in all output
            start_node: Index of the source node
            end_node: Index of the sink node
            node_times: Timestamp of every node, indexed by node
            edges: Edge for each (source, target) node pair
            edge_count: Declared number of edges (defaults to len(edges))
            silence_token: Label of non-speech edges
            word_delimiter: Separator inside multiword labels
        """
        times = np.array(node_times, dtype=np.float64)
        times.setflags(write=False)
        node_count = len(times)

        if not 0 <= start_node <= end_node < node_count:
            raise ValueError(
                f"start {start_node} and end {end_node} do not fit {node_count} nodes"
            )
        for source, target in edges:
            if not (0 <= source < node_count and 0 <= target < node_count):
                raise ValueError(f"edge {source} -> {target} references a missing node")

        self.utterance_id = utterance_id
        self.start_node = start_node
        self.end_node = end_node
        self.node_count = node_count
        self.edge_count = len(edges) if edge_count is None else edge_count
        self.node_times = times
        self.edges: Mapping[Tuple[int, int], Edge] = MappingProxyType(dict(edges))
        self.silence_token = silence_token
        self.word_delimiter = word_delimiter

        # Successor lists sorted by target, mirroring a row scan of the adjacency
        successors: Dict[int, List[Tuple[int, Edge]]] = {}
        for (source, target), edge in sorted(self.edges.items(), key=lambda item: item[0]):
            successors.setdefault(source, []).append((target, edge))
        self._successors = successors

        self.topological_order: Tuple[int, ...] = topological_sort(
            self._successors, start_node, end_node
        )

    @classmethod
    def parse(cls, text: str, source: str = "<string>", **kwargs) -> "Lattice":
        """
        Build a lattice from its text description

        Args:
            text: Lattice description
            source: Name reported in parse errors
            **kwargs: Passed to the constructor (silence_token, word_delimiter)
        """
        fields = parse_lattice_text(text, source)
        return cls(
            utterance_id=fields.utterance_id,
            start_node=fields.start_node,
            end_node=fields.end_node,
            node_times=fields.node_times,
            edges=fields.edges,
            edge_count=fields.edge_count,
            **kwargs
        )

    @classmethod
    def from_file(cls, path: Union[str, Path], **kwargs) -> "Lattice":
        """
        Read a lattice file

        Raises:
            FileAccessError: If the file cannot be opened
            MalformedInputError: If the content cannot be parsed
        """
        lattice = cls.parse(read_text(path), source=str(path), **kwargs)
        logger.info(
            "Read lattice %s with %d nodes and %d edges",
            lattice.utterance_id, lattice.node_count, lattice.edge_count
        )
        return lattice

    def _in_range(self, node: int) -> bool:
        return self.start_node <= node <= self.end_node

    def iter_edges(self) -> Iterator[Tuple[int, int, Edge]]:
        """Edges inside [start_node, end_node], ordered by source then target"""
        for source in range(self.start_node, self.end_node + 1):
            for target, edge in self._successors.get(source, ()):
                if self._in_range(target):
                    yield source, target, edge

    def decode(self, lm_scale: float) -> Hypothesis:
        """
        Find the best scoring path from start to end

        Args:
            lm_scale: Weight of the language model score in each edge cost

        Returns:
            Hypothesis holding the words and total cost of the best path

        Raises:
            NoPathError: If the end node is unreachable
        """
        path, cost = shortest_path(
            self._successors,
            self.topological_order,
            self.start_node,
            self.end_node,
            lm_scale,
            self.node_count
        )

        hypothesis = Hypothesis(
            silence_token=self.silence_token,
            word_delimiter=self.word_delimiter
        )
        for source, target in zip(path, path[1:]):
            edge = self.edges[(source, target)]
            hypothesis.add_word(edge.label, edge.combined_score(lm_scale))

        logger.debug("Decoded %s with cost %s", self.utterance_id, cost)
        return hypothesis

    def count_all_paths(self) -> int:
        """Number of distinct paths from the start node to the end node"""
        return count_paths(
            self._successors,
            self.topological_order,
            self.start_node,
            self.end_node
        )

    def lattice_density(self) -> float:
        """
        Non-silence edges per second

        Multiword labels count once. The denominator is the end node time,
        so the start node is assumed to sit at time zero.

        Raises:
            DegenerateInputError: If the end node time is zero
        """
        word_edges = sum(
            1 for _, _, edge in self.iter_edges()
            if edge.label != self.silence_token
        )
        duration = float(self.node_times[self.end_node])
        if duration == 0.0:
            raise DegenerateInputError(
                f"lattice {self.utterance_id} has zero duration; density is undefined"
            )
        return word_edges / duration

    def unique_words_at_time(self, time: float) -> Set[str]:
        """
        Distinct labels of edges spanning a point in time

        Args:
            time: Query time in seconds

        Returns:
            Set of labels, empty if time lies outside the lattice
        """
        times = self.node_times
        if not times[self.start_node] <= time <= times[self.end_node]:
            return set()

        return {
            edge.label
            for source, target, edge in self.iter_edges()
            if times[source] <= time <= times[target]
        }

    def sorted_hits(self, word: str) -> List[float]:
        """Ascending midpoint times of every edge labeled exactly word"""
        times = self.node_times
        midpoints = [
            (times[source] + times[target]) / 2
            for source, target, edge in self.iter_edges()
            if edge.label == word
        ]
        return [float(t) for t in np.sort(np.array(midpoints, dtype=np.float64))]

    def format_sorted_hits(self, word: str) -> str:
        """Sorted hit times of word with two decimals, separated by spaces"""
        return " ".join(f"{t:.2f}" for t in self.sorted_hits(word))

    def to_string(self) -> str:
        """
        Render the lattice in the canonical text format

        The text is rebuilt from the fields rather than cached from the input.
        The header always names 0 and node_count - 1 as start and end.
        """
        lines = [
            f"id {self.utterance_id}",
            "start 0",
            f"end {self.node_count - 1}",
            f"numNodes {self.node_count}",
            f"numEdges {self.edge_count}",
        ]
        for node in range(self.start_node, self.end_node + 1):
            lines.append(f"node {node} {self.node_times[node]:.2f}")
        for source, target, edge in self.iter_edges():
            lines.append(
                f"edge {source} {target} {edge.label} "
                f"{edge.acoustic_score} {edge.language_score}"
            )
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.to_string()

    def save_as_file(self, path: Union[str, Path]) -> None:
        """Write the canonical text form of the lattice to path"""
        write_text(path, self.to_string())

    def to_dot(self) -> graphviz.Digraph:
        """
        Build a left-to-right DOT graph with one labeled edge per arc

        Returns:
            graphviz.Digraph whose source can be rendered or saved
        """
        dot = graphviz.Digraph(
            comment=self.utterance_id,
            graph_attr={"rankdir": "LR"}
        )
        for source, target, edge in self.iter_edges():
            dot.edge(str(source), str(target), label=edge.label)
        return dot

    def write_as_dot(self, path: Union[str, Path]) -> None:
        """Write the DOT description of the lattice to path"""
        write_text(path, self.to_dot().source)

    def __repr__(self) -> str:
        return (
            f"Lattice(utterance_id={self.utterance_id!r}, "
            f"nodes={self.node_count}, edges={self.edge_count})"
        )
