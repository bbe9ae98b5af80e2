"""
GeneAlign
Pairwise gene sequence alignment under a fixed match/mismatch/indel cost model
"""

from .seq_alignment import (
    AlignmentResult,
    Direction,
    PairwiseAligner,
    pairwise,
    reconstruct,
    score
)
from .result_table import compute_score_matrix, score_cell, should_compute

__all__ = [
    "AlignmentResult",
    "Direction",
    "PairwiseAligner",
    "pairwise",
    "reconstruct",
    "score",
    "compute_score_matrix",
    "score_cell",
    "should_compute"
]
