from __future__ import annotations
from typing import Tuple

import numpy as np
from sklearn.model_selection import train_test_split

from .config.settings import SplitConfig
from .core.errors import EmptyDatasetError

"""
Splitting-Strategie (Train/Test).

Zufälliger, aber geseedeter Split:
gleiche Anzahl Zeilen + gleicher Seed -> exakt gleiche Partition.
Der Split hängt nur von (n_rows, test_ratio, seed) ab, nicht vom Inhalt.
"""


def train_test_split_seeded(n_rows: int, config: SplitConfig = SplitConfig()) -> Tuple[np.ndarray, np.ndarray]:
    """
    Returns positional (train_idx, test_idx), both sorted ascending.

    Raises:
        EmptyDatasetError: if fewer than 2 rows are available.
    """
    if n_rows < 2:
        raise EmptyDatasetError(f"Not enough samples for split: n={n_rows}")

    idx = np.arange(n_rows)
    idx_tr, idx_te = train_test_split(
        idx,
        test_size=config.test_ratio,
        random_state=config.seed,
        shuffle=True,
    )
    return np.sort(idx_tr), np.sort(idx_te)
