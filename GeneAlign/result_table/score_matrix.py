"""
Pairwise alignment score tables for a collection of gene sequences.

Fitur:
- Konvensi segitiga: hanya sel dengan row > column yang dihitung
- Sel diagonal / segitiga atas berisi placeholder 0 (tanpa komputasi)
- Opsi `mirror` untuk menyalin skor ke segitiga atas (skor simetris)

Catatan:
- Skor memakai PairwiseAligner.score (linear space, dibatasi `cap` simbol).
- Sekuensial, satu thread; pemanggil yang mengatur batching/pembatalan.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

import numpy as np

from ..seq_alignment.pairwise import (
    MAX_CHARACTERS_TO_ALIGN,
    PairwiseAligner,
    SymbolSequence,
)

logger = logging.getLogger(__name__)

# nilai untuk sel yang sengaja tidak dihitung
PLACEHOLDER = 0


def should_compute(row: int, col: int) -> bool:
    """True hanya untuk sel di bawah diagonal (row > col)."""
    return row > col


def score_cell(seq1: SymbolSequence,
               seq2: SymbolSequence,
               row: int,
               col: int,
               aligner: Optional[PairwiseAligner] = None) -> int:
    """
    Skor untuk satu sel tabel hasil.

    Koordinat tidak divalidasi: sel pada/di atas diagonal langsung
    mengembalikan PLACEHOLDER tanpa menjalankan DP.
    """
    if not should_compute(row, col):
        return PLACEHOLDER
    if aligner is None:
        aligner = PairwiseAligner()
    return aligner.score(seq1, seq2)


def compute_score_matrix(sequences: Dict[str, SymbolSequence],
                         cap: int = MAX_CHARACTERS_TO_ALIGN,
                         mirror: bool = False
                         ) -> Tuple[np.ndarray, List[str]]:
    """
    Hitung matriks skor alignment.

    Parameters
    ----------
    sequences : dict
        {nama: sekuens}. Urutan dict menentukan urutan baris/kolom.
    cap : int
        Jumlah simbol awal tiap sekuens yang di-align (default 5000).
    mirror : bool
        False = segitiga atas tetap PLACEHOLDER; True = salin S[i, j] ke S[j, i].

    Returns
    -------
    (S, names) : (np.ndarray, list)
        S matriks skor int64 (n,n), names urutan label.
    """
    aligner = PairwiseAligner(align_cap=cap)
    names = list(sequences.keys())
    n = len(names)
    S = np.full((n, n), PLACEHOLDER, dtype=np.int64)

    for row in range(n):
        for col in range(n):
            if not should_compute(row, col):
                continue
            S[row, col] = score_cell(sequences[names[row]], sequences[names[col]],
                                     row, col, aligner=aligner)
            if mirror:
                S[col, row] = S[row, col]

    logger.debug("Computed %d pairwise scores for %d sequences", n * (n - 1) // 2, n)
    return S, names
