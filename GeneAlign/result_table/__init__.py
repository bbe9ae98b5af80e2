"""
Result Table Module
Pairwise score tables following the lower-triangle convention
"""

from .score_matrix import (
    PLACEHOLDER,
    compute_score_matrix,
    score_cell,
    should_compute
)

__all__ = [
    "PLACEHOLDER",
    "compute_score_matrix",
    "score_cell",
    "should_compute"
]
