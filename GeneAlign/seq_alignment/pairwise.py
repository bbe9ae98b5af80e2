"""
Pairwise Sequence Alignment Module
Minimum-cost global alignment with a fixed match/mismatch/indel cost model
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

import numpy as np


logger = logging.getLogger(__name__)

# Cost model (lower is better, matches are rewarded)
MATCH_COST = -3
MISMATCH_COST = 1
INDEL_COST = 5

GAP = "-"

# Align only the first 5000 symbols of each sequence when scoring
MAX_CHARACTERS_TO_ALIGN = 5000
# The full table is O(cap^2), so extraction works on a much shorter prefix
MAX_CHARACTERS_TO_EXTRACT = 100


class Direction(IntEnum):
    """Predecessor move recorded for each cell of the alignment table"""
    ORIGIN = 0
    DIAGONAL = 1
    VERTICAL = 2
    HORIZONTAL = 3


SymbolSequence = Sequence[Any]
# one alignment column, _GAP_CELL marks a gap
Column = Tuple[Any, Any]
_GAP_CELL = object()
RowCallback = Callable[[int, int], None]


@dataclass
class AlignmentResult:
    """Store alignment results and metadata"""
    seq1_aligned: str
    seq2_aligned: str
    score: int
    match_string: str
    identity: float
    similarity: float
    gaps: int
    length: int
    matches: int
    seq1_original: str
    seq2_original: str

    def __str__(self) -> str:
        """String representation of alignment"""
        return (
            f"Alignment Score: {self.score}\n"
            f"Identity: {self.identity:.2%}\n"
            f"Similarity: {self.similarity:.2%}\n"
            f"Gaps: {self.gaps}\n"
            f"Length: {self.length}\n"
        )

    def plot(self, width: int = 80) -> None:
        """Display alignment with match indicators"""
        lines = []
        lines.append("")
        lines.append(f"Identity: {self.identity:.2%}")
        lines.append(f"Similarity: {self.similarity:.2%}")
        lines.append(f"Gaps: {self.gaps}")
        lines.append("")
        lines.append(f"Score: {self.score}")
        lines.append("")

        for start in range(0, len(self.seq1_aligned), width):
            end = min(start + width, len(self.seq1_aligned))
            lines.append(f"seqA: {self.seq1_aligned[start:end]}")
            lines.append(f"      {self.match_string[start:end]}")
            lines.append(f"seqB: {self.seq2_aligned[start:end]}")
            lines.append("")

        for line in lines:
            print(line)

    def view(self, width: int = 80) -> None:
        """Alias for plot method"""
        self.plot(width)

    def nmatch(self) -> int:
        """Number of matching columns"""
        return self.matches


def _check_cap(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return int(value)


def _encode(
    seq1: SymbolSequence,
    seq2: SymbolSequence
) -> Tuple[Optional[np.ndarray], Optional[np.ndarray]]:
    """
    Map the symbols of both sequences onto shared integer codes

    Returns (None, None) when a symbol is unhashable; callers then compare
    symbols with == row by row.
    """
    try:
        return _encode_hashable(seq1, seq2)
    except TypeError:
        return None, None


def _encode_hashable(seq1: SymbolSequence, seq2: SymbolSequence) -> Tuple[np.ndarray, np.ndarray]:
    codes = {}
    a = np.fromiter((codes.setdefault(s, len(codes)) for s in seq1),
                    dtype=np.int64, count=len(seq1))
    b = np.fromiter((codes.setdefault(s, len(codes)) for s in seq2),
                    dtype=np.int64, count=len(seq2))
    return a, b


class PairwiseAligner:
    """Global pairwise aligner with a linear-space scorer and a full-table extractor"""

    def __init__(
        self,
        align_cap: int = MAX_CHARACTERS_TO_ALIGN,
        extract_cap: int = MAX_CHARACTERS_TO_EXTRACT,
        verbose: bool = False
    ):
        """
        Initialize aligner

        Parameters:
        -----------
        align_cap : int
            Number of leading symbols of each sequence used by score()
            (default 5000). Anything beyond it is ignored without notice.
        extract_cap : int
            Number of leading symbols of each sequence used by reconstruct()
            (default 100). Memory grows with the square of this value.
        verbose : bool
            Print progress while filling tables
        """
        self.align_cap = _check_cap(align_cap, "align_cap")
        self.extract_cap = _check_cap(extract_cap, "extract_cap")
        self.verbose = verbose

    def _get_score(self, a: Any, b: Any) -> int:
        """Get alignment cost for two symbols"""
        return MATCH_COST if a == b else MISMATCH_COST

    def _bounded(
        self,
        seq1: SymbolSequence,
        seq2: SymbolSequence,
        cap: int
    ) -> Tuple[SymbolSequence, SymbolSequence]:
        """Truncate both sequences to cap symbols"""
        if len(seq1) > cap or len(seq2) > cap:
            logger.debug("Truncating %d x %d input to cap %d", len(seq1), len(seq2), cap)
        return seq1[:cap], seq2[:cap]

    def score(
        self,
        seq1: SymbolSequence,
        seq2: SymbolSequence,
        row_callback: Optional[RowCallback] = None
    ) -> int:
        """
        Minimum alignment cost of the first align_cap symbols of each sequence

        Only two rows of the table are alive at any time. Within a row the
        vertical and diagonal candidates are computed in one vectorised step;
        the horizontal moves form a chain along the row, which is resolved as
        a running minimum of E[i][k] - INDEL*k.

        Parameters:
        -----------
        seq1, seq2 : sequence
            Sequences of comparable symbols (usually str)
        row_callback : callable, optional
            Called as row_callback(i, m) after row i of m is complete.
            Raising from it aborts the computation.

        Returns:
        --------
        int
            Alignment cost E[m][n]
        """
        a, b = self._bounded(seq1, seq2, self.align_cap)
        m, n = len(a), len(b)
        a_codes, b_codes = _encode(a, b)

        offsets = np.arange(n + 1, dtype=np.int64) * INDEL_COST
        previous = offsets.copy()
        active = np.empty(n + 1, dtype=np.int64)

        if self.verbose:
            print(f"\nScoring {m} x {n} symbols ({m * n} cells)")
            print("Computing ", end="")

        for i in range(1, m + 1):
            if a_codes is None:
                same = np.fromiter((x == a[i - 1] for x in b), dtype=bool, count=n)
            else:
                same = b_codes == a_codes[i - 1]
            diff = np.where(same, MATCH_COST, MISMATCH_COST)
            active[0] = INDEL_COST * i
            np.minimum(previous[1:] + INDEL_COST, previous[:-1] + diff, out=active[1:])
            active -= offsets
            np.minimum.accumulate(active, out=active)
            active += offsets

            # swap, the old row gets overwritten next iteration
            previous, active = active, previous

            if row_callback is not None:
                row_callback(i, m)
            if self.verbose and i % max(1, m // 10) == 0:
                print("█", end="", flush=True)

        result = int(previous[n])
        if self.verbose:
            print(" 100.0%")
            print(f"Final score: {result}")
        logger.debug("Scored %d x %d symbols: %d", m, n, result)
        return result

    def _initialize_matrix(self, len1: int, len2: int) -> Tuple[np.ndarray, np.ndarray]:
        """Initialize cost and traceback tables with indel borders"""
        cost = np.zeros((len1 + 1, len2 + 1), dtype=np.int64)
        trace = np.full((len1 + 1, len2 + 1), Direction.ORIGIN, dtype=np.int8)

        cost[:, 0] = np.arange(len1 + 1) * INDEL_COST
        cost[0, :] = np.arange(len2 + 1) * INDEL_COST
        trace[1:, 0] = Direction.VERTICAL
        trace[0, 1:] = Direction.HORIZONTAL
        return cost, trace

    def _fill_matrix(
        self,
        seq1: SymbolSequence,
        seq2: SymbolSequence,
        cost: np.ndarray,
        trace: np.ndarray
    ) -> int:
        """Fill the cost table, recording the chosen move for every cell"""
        len1, len2 = len(seq1), len(seq2)

        for i in range(1, len1 + 1):
            for j in range(1, len2 + 1):
                vertical = cost[i - 1, j] + INDEL_COST
                horizontal = cost[i, j - 1] + INDEL_COST
                diagonal = cost[i - 1, j - 1] + self._get_score(seq1[i - 1], seq2[j - 1])

                # ties go diagonal, then vertical, then horizontal
                if diagonal <= vertical and diagonal <= horizontal:
                    cost[i, j] = diagonal
                    trace[i, j] = Direction.DIAGONAL
                elif vertical <= horizontal:
                    cost[i, j] = vertical
                    trace[i, j] = Direction.VERTICAL
                else:
                    cost[i, j] = horizontal
                    trace[i, j] = Direction.HORIZONTAL

            if self.verbose and i % max(1, len1 // 10) == 0:
                print("█", end="", flush=True)

        return int(cost[len1, len2])

    def _traceback(
        self,
        seq1: SymbolSequence,
        seq2: SymbolSequence,
        trace: np.ndarray
    ) -> List[Column]:
        """Walk the recorded moves from the last cell back to the origin"""
        columns = []
        i, j = len(seq1), len(seq2)

        while True:
            move = trace[i, j]
            if move == Direction.ORIGIN:
                break
            if move == Direction.DIAGONAL:
                # match or substitution
                i -= 1
                j -= 1
                columns.append((seq1[i], seq2[j]))
            elif move == Direction.VERTICAL:
                # delete from seq1
                i -= 1
                columns.append((seq1[i], _GAP_CELL))
            elif move == Direction.HORIZONTAL:
                # insert into seq2
                j -= 1
                columns.append((_GAP_CELL, seq2[j]))
            else:
                raise RuntimeError(f"Corrupt traceback table at ({i}, {j}): {move!r}")

        columns.reverse()
        return columns

    def _render(self, columns: List[Column]) -> Tuple[str, str, str]:
        """
        Render columns as two aligned rows plus a match row

        Every column is as wide as its widest symbol, so symbols whose str()
        is longer than one character keep both rows the same length. Gaps
        fill the whole column, a shorter symbol is padded with spaces.
        """
        row1, row2, marks = [], [], []
        for x, y in columns:
            text1 = GAP if x is _GAP_CELL else str(x)
            text2 = GAP if y is _GAP_CELL else str(y)
            width = max(len(text1), len(text2))
            row1.append(GAP * width if x is _GAP_CELL else text1.ljust(width))
            row2.append(GAP * width if y is _GAP_CELL else text2.ljust(width))
            if x is _GAP_CELL or y is _GAP_CELL:
                marks.append(' ' * width)
            elif x == y:
                marks.append('|' * width)
            else:
                marks.append('.' * width)
        return ''.join(row1), ''.join(row2), ''.join(marks)

    def _reconstruct(
        self,
        seq1: SymbolSequence,
        seq2: SymbolSequence
    ) -> Tuple[List[Column], int]:
        a, b = self._bounded(seq1, seq2, self.extract_cap)

        if self.verbose:
            print(f"\nFilling alignment table of {len(a) + 1} x {len(b) + 1}")
            print("Computing ", end="")

        cost, trace = self._initialize_matrix(len(a), len(b))
        total = self._fill_matrix(a, b, cost, trace)
        columns = self._traceback(a, b, trace)

        if self.verbose:
            print(" 100.0%")
            print(f"✓ Traceback complete! Alignment length: {len(columns)} columns")
        logger.debug("Reconstructed %d x %d alignment with cost %d", len(a), len(b), total)
        return columns, total

    def reconstruct(self, seq1: SymbolSequence, seq2: SymbolSequence) -> Tuple[str, str]:
        """
        One optimal alignment of the first extract_cap symbols of each sequence

        Returns:
        --------
        (aligned1, aligned2) : tuple of str
            Equal-length strings with '-' marking gaps. Symbols are shown
            with str(); see _render for multi-character symbols.
        """
        columns, _ = self._reconstruct(seq1, seq2)
        aligned1, aligned2, _ = self._render(columns)
        return aligned1, aligned2

    def _column_statistics(self, columns: List[Column]) -> Tuple[int, int, int]:
        """Count matched, paired (no gap) and gapped columns"""
        matches = paired = 0
        for x, y in columns:
            if x is _GAP_CELL or y is _GAP_CELL:
                continue
            paired += 1
            if x == y:
                matches += 1
        return matches, paired, len(columns) - paired

    def align(
        self,
        seq1: SymbolSequence,
        seq2: SymbolSequence,
        score_only: bool = False
    ) -> Union[AlignmentResult, int]:
        """
        Perform pairwise sequence alignment

        Parameters:
        -----------
        seq1 : sequence
            First sequence
        seq2 : sequence
            Second sequence
        score_only : bool
            If True, return only the linear-space cost over align_cap symbols

        Returns:
        --------
        AlignmentResult or int
            Alignment over the extract_cap prefixes, or the cost if score_only=True
        """
        if score_only:
            return self.score(seq1, seq2)

        columns, total = self._reconstruct(seq1, seq2)
        aligned1, aligned2, match_string = self._render(columns)
        matches, paired, gaps = self._column_statistics(columns)
        length = len(columns)

        return AlignmentResult(
            seq1_aligned=aligned1,
            seq2_aligned=aligned2,
            score=total,
            match_string=match_string,
            identity=matches / length if length else 0.0,
            similarity=paired / length if length else 0.0,
            gaps=gaps,
            length=length,
            matches=matches,
            seq1_original=''.join(map(str, seq1)),
            seq2_original=''.join(map(str, seq2))
        )


def score(seq1: SymbolSequence, seq2: SymbolSequence, cap: int = MAX_CHARACTERS_TO_ALIGN) -> int:
    """
    Alignment cost of the first `cap` symbols of two sequences

    >>> score("AGT", "AT")
    -1
    """
    return PairwiseAligner(align_cap=cap).score(seq1, seq2)


def reconstruct(
    seq1: SymbolSequence,
    seq2: SymbolSequence,
    cap: int = MAX_CHARACTERS_TO_EXTRACT
) -> Tuple[str, str]:
    """
    Optimal alignment of the first `cap` symbols of two sequences

    >>> reconstruct("AGT", "AT")
    ('AGT', 'A-T')
    """
    return PairwiseAligner(extract_cap=cap).reconstruct(seq1, seq2)


def pairwise(
    seq1: SymbolSequence,
    seq2: SymbolSequence,
    cap: int = MAX_CHARACTERS_TO_EXTRACT,
    verbose: bool = False
) -> AlignmentResult:
    """
    Align two sequences and collect identity statistics

    Examples:
    ---------
    >>> result = pairwise("GATTACA", "GCATGCA")
    >>> result.view()
    >>> print(result.score)
    >>> print(result.nmatch())
    """
    aligner = PairwiseAligner(extract_cap=cap, verbose=verbose)
    return aligner.align(seq1, seq2)
