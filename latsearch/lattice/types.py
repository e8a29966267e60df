"""
Common types for lattice modules
"""

from dataclasses import dataclass

@dataclass(frozen=True, eq=False)
class Edge:
    """Weighted word arc between two lattice nodes

    Edges are identified by their position in the lattice adjacency, so two
    edges with the same label and scores are still distinct objects.
    """
    label: str
    acoustic_score: int
    language_score: int

    def combined_score(self, lm_scale: float) -> int:
        """
        Combine both scores into a single edge cost

        Args:
            lm_scale: Weight applied to the language model score

        Returns:
            acoustic_score + lm_scale * language_score, truncated toward zero
        """
        return self.acoustic_score + int(lm_scale * self.language_score)
