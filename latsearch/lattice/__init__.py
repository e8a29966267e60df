"""Lattice graph module"""

from .types import Edge
from .io import LatticeFields, parse_lattice_text
from .traversal import topological_sort, shortest_path, count_paths
from .graph import Lattice

__all__ = [
    'Edge',
    'LatticeFields',
    'parse_lattice_text',
    'topological_sort',
    'shortest_path',
    'count_paths',
    'Lattice'
]
