"""
Tests for the linear-space alignment scorer.
"""

import pytest

from GeneAlign.seq_alignment.pairwise import (
    INDEL_COST,
    MATCH_COST,
    MAX_CHARACTERS_TO_ALIGN,
    MISMATCH_COST,
    PairwiseAligner,
    score,
)


def full_table_score(a, b):
    """Plain O(m*n) reference recurrence."""
    E = [[0] * (len(b) + 1) for _ in range(len(a) + 1)]
    for i in range(len(a) + 1):
        E[i][0] = INDEL_COST * i
    for j in range(len(b) + 1):
        E[0][j] = INDEL_COST * j
    for i in range(1, len(a) + 1):
        for j in range(1, len(b) + 1):
            diff = MATCH_COST if a[i - 1] == b[j - 1] else MISMATCH_COST
            E[i][j] = min(E[i - 1][j] + INDEL_COST,
                          E[i][j - 1] + INDEL_COST,
                          E[i - 1][j - 1] + diff)
    return E[len(a)][len(b)]


PAIRS = [
    ("AGT", "AT"),
    ("GATTACA", "GCATGCA"),
    ("ACGTACGTTA", "TTACG"),
    ("AAAA", "TTTT"),
    ("ATATATAT", "TATATATA"),
    ("C", "CCCCCC"),
    ("polynomial", "exponential"),
]


class TestBasicScores:
    """Known costs for small inputs."""

    def test_identical_sequences(self):
        assert score("AGT", "AGT") == -9

    def test_identical_sequences_all_diagonal(self):
        seq = "ACGTTGCA" * 4
        assert score(seq, seq) == MATCH_COST * len(seq)

    def test_single_deletion(self):
        # A/A, G/-, T/T
        assert score("AGT", "AT") == -1

    def test_empty_first(self):
        assert score("", "CAT") == 15

    def test_empty_second(self):
        assert score("CAT", "") == 15

    def test_both_empty(self):
        assert score("", "") == 0

    def test_single_mismatch(self):
        assert score("A", "G") == MISMATCH_COST

    def test_cost_can_be_negative(self):
        assert score("GATTACA", "GATTACA") < 0

    @pytest.mark.parametrize("a,b", PAIRS)
    def test_matches_full_table(self, a, b):
        assert score(a, b) == full_table_score(a, b)

    @pytest.mark.parametrize("a,b", PAIRS)
    def test_symmetric(self, a, b):
        assert score(a, b) == score(b, a)

    def test_non_string_symbols(self):
        codons = ["ATG", "GCC", "TAA"]
        assert score(codons, ["ATG", "TAA"]) == MATCH_COST * 2 + INDEL_COST
        assert score(tuple(codons), codons) == MATCH_COST * 3

    def test_unhashable_symbols(self):
        assert score([[1], [2]], [[1]]) == MATCH_COST + INDEL_COST

    def test_unhashable_symbols_match_full_table(self):
        a = [[1], [2], [3], [1]]
        b = [[1], [3], [3]]
        assert score(a, b) == full_table_score(a, b)
        assert score(a, b) == score([1, 2, 3, 1], [1, 3, 3])


class TestTruncation:
    """Symbols beyond the cap are ignored without notice."""

    def test_default_cap(self):
        aligner = PairwiseAligner()
        assert aligner.align_cap == MAX_CHARACTERS_TO_ALIGN

    def test_identical_beyond_cap(self):
        cap = 40
        seq = ("ACGT" * 30)[:cap + 50]
        assert score(seq, seq, cap=cap) == MATCH_COST * cap
        assert score(seq, seq, cap=cap) == score(seq[:cap], seq[:cap], cap=cap)

    def test_differences_after_cap_ignored(self):
        assert score("AAAAC", "AAAAG", cap=4) == MATCH_COST * 4

    def test_only_longer_sequence_truncated(self):
        assert score("ACGTACGT", "AC", cap=4) == score("ACGT", "AC")

    def test_default_cap_end_to_end(self):
        seq = ("ACGT" * 1263)[:MAX_CHARACTERS_TO_ALIGN + 50]
        assert len(seq) == 5050
        assert score(seq, seq) == MATCH_COST * MAX_CHARACTERS_TO_ALIGN

    def test_default_cap_ignores_differing_tails(self):
        head = ("GATTACA" * 720)[:MAX_CHARACTERS_TO_ALIGN]
        assert score(head + "A" * 50, head + "C" * 50) == score(head, head)

    def test_zero_cap(self):
        assert score("ACGT", "TT", cap=0) == 0

    def test_input_not_mutated(self):
        seq = list("GATTACA")
        score(seq, list("GATT"), cap=3)
        assert seq == list("GATTACA")


class TestScorerBehaviour:
    """Configuration, callbacks and repeat calls."""

    def test_idempotent(self):
        aligner = PairwiseAligner()
        first = aligner.score("GATTACA", "GCATGCA")
        second = aligner.score("GATTACA", "GCATGCA")
        assert first == second

    def test_returns_python_int(self):
        assert type(score("AGT", "AT")) is int

    def test_row_callback_called_per_row(self):
        rows = []
        PairwiseAligner().score("ACGT", "AC", row_callback=lambda i, m: rows.append((i, m)))
        assert rows == [(1, 4), (2, 4), (3, 4), (4, 4)]

    def test_row_callback_can_abort(self):
        class Stop(Exception):
            pass

        def stop_after_two(i, m):
            if i == 2:
                raise Stop()

        with pytest.raises(Stop):
            PairwiseAligner().score("ACGTACGT", "ACGT", row_callback=stop_after_two)

    def test_verbose_output(self, capsys):
        PairwiseAligner(verbose=True).score("AGT", "AT")
        out = capsys.readouterr().out
        assert "Scoring 3 x 2 symbols" in out
        assert "Final score: -1" in out

    @pytest.mark.parametrize("cap", [-1, 2.5, "10", True, None])
    def test_invalid_align_cap(self, cap):
        with pytest.raises(ValueError, match="align_cap"):
            PairwiseAligner(align_cap=cap)

    def test_invalid_cap_in_module_function(self):
        with pytest.raises(ValueError):
            score("A", "A", cap=-5)
