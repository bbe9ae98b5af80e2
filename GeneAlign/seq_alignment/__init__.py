"""
Sequence Alignment Module
Provides scoring and alignment reconstruction for pairs of sequences
"""

from .pairwise import (
    PairwiseAligner,
    AlignmentResult,
    Direction,
    score,
    reconstruct,
    pairwise
)

__all__ = [
    "PairwiseAligner",
    "AlignmentResult",
    "Direction",
    "score",
    "reconstruct",
    "pairwise"
]
