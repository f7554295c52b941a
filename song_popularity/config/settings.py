# song_popularity/config/settings.py
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

# Year filter (songs at or before the cutoff are dropped)
CUTOFF_YEAR = 1920

# Train / test split
TRAIN_RATIO = 0.8
TEST_RATIO = 0.2
SPLIT_SEED = 11

# Model names (closed set, see models/classifiers.py)
MODEL_NAME_LR = "Logistic Regression"
MODEL_NAME_RF = "Random Forest classifier"

CONFIG_ENV_VAR = "SONG_POPULARITY_CONFIG"


@dataclass(frozen=True)
class PreprocessConfig:
    cutoff_year: int = CUTOFF_YEAR


@dataclass(frozen=True)
class SplitConfig:
    train_ratio: float = TRAIN_RATIO
    test_ratio: float = TEST_RATIO
    seed: int = SPLIT_SEED

    def __post_init__(self):
        if not (0.0 < self.train_ratio < 1.0 and 0.0 < self.test_ratio < 1.0):
            raise ValueError(f"Split ratios must lie in (0, 1): train={self.train_ratio}, test={self.test_ratio}")
        if abs(self.train_ratio + self.test_ratio - 1.0) > 1e-9:
            raise ValueError(f"Split ratios must sum to 1: train={self.train_ratio}, test={self.test_ratio}")


class RunConfig(BaseModel):
    model_name: str = MODEL_NAME_LR
    evaluate: bool = True

    # data source
    use_csv: bool = True
    csv_path: Optional[str] = None
    csv_header: bool = False
    folder_path: Optional[str] = None

    cutoff_year: int = CUTOFF_YEAR
    train_ratio: float = Field(TRAIN_RATIO, gt=0.0, lt=1.0)
    seed: int = SPLIT_SEED

    track_mlflow: bool = False
    output_dir: str = "reports"

    def preprocess_config(self) -> PreprocessConfig:
        return PreprocessConfig(cutoff_year=self.cutoff_year)

    def split_config(self) -> SplitConfig:
        return SplitConfig(train_ratio=self.train_ratio, test_ratio=round(1.0 - self.train_ratio, 10), seed=self.seed)


def load_run_config(path: Optional[Path | str] = None) -> RunConfig:
    """
    Reads the run configuration from a JSON file.

    Falls back to the path in $SONG_POPULARITY_CONFIG; without any file the
    defaults are returned.
    """
    if path is None:
        path = os.getenv(CONFIG_ENV_VAR)
    if not path:
        return RunConfig()

    cfg_path = Path(path)
    raw = json.loads(cfg_path.read_text(encoding="utf-8"))
    return RunConfig(**raw)
