from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from song_popularity.data.schema import apply_schema, get_schema

DATA_DIR = Path(__file__).parent / "data"

N_POPULAR = 454
N_UNPOPULAR = 546


def make_songs(n: int, seed: int = 0, popular=None) -> pd.DataFrame:
    """
    Synthetic, fully populated training records (all years > 1920, geolocation set).

    `popular` (bool array) pushes song_hotness into [0.7, 0.9] vs [0.1, 0.3]
    and shifts artist_hotttnesss so the label is learnable but not separable.
    """
    rng = np.random.default_rng(seed)
    if popular is None:
        popular = rng.random(n) < 0.45
    popular = np.asarray(popular, dtype=bool)

    hotness = np.where(popular, rng.uniform(0.7, 0.9, n), rng.uniform(0.1, 0.3, n))
    df = pd.DataFrame({
        "song_hotness": hotness,
        "artist_familiarity": rng.uniform(0.2, 0.9, n),
        "artist_hotttnesss": 0.3 + 0.2 * popular + rng.normal(0, 0.15, n),
        "artist_id": [f"AR{i:06d}" for i in range(n)],
        "artist_latitude": rng.uniform(-60, 60, n).round(4),
        "artist_location": "Somewhere, Earth",
        "artist_longitude": rng.uniform(-150, 150, n).round(4),
        "artist_name": [f"artist {i}" for i in range(n)],
        "title": [f"song {i}" for i in range(n)],
        "danceability": rng.uniform(0, 1, n),
        "duration": rng.uniform(120, 400, n),
        "end_of_fade_in": rng.uniform(0, 5, n),
        "energy": rng.uniform(0, 1, n),
        "key": rng.integers(0, 12, n),
        "key_confidence": rng.uniform(0, 1, n),
        "loudness": rng.uniform(-30, 0, n),
        "mode": rng.integers(0, 2, n),
        "mode_confidence": rng.uniform(0, 1, n),
        "start_of_fade_out": rng.uniform(100, 390, n),
        "tempo": rng.uniform(60, 200, n),
        "time_signature": rng.integers(3, 6, n),
        "time_signature_confidence": rng.uniform(0, 1, n),
        "artist_terms": "rock,indie rock,pop",
        "artist_terms_freq": "1.0,0.8,0.5",
        "artist_terms_weight": "1.0,0.7,0.4",
        "year": rng.integers(1950, 2011, n),
    })
    return apply_schema(df, is_train_data=True)


def make_fixture_songs() -> pd.DataFrame:
    """
    1000 valid songs (454 popular) plus rows that cleaning must drop.
    The dropped rows carry very high scores so they would shift the mean if kept.
    """
    popular = np.array([True] * N_POPULAR + [False] * N_UNPOPULAR)
    popular = np.random.default_rng(7).permutation(popular)
    valid = make_songs(len(popular), seed=11, popular=popular)

    dropped = make_songs(40, seed=3, popular=np.ones(40, dtype=bool))
    dropped["song_hotness"] = 0.99
    dropped.loc[0:9, "year"] = 1920
    dropped.loc[10:19, "year"] = 1899
    dropped.loc[20:29, "artist_latitude"] = np.nan
    dropped.loc[30:34, "artist_longitude"] = np.nan
    dropped.loc[35:39, "year"] = pd.NA

    return pd.concat([valid, dropped], ignore_index=True)


def write_csv(df: pd.DataFrame, path: Path) -> Path:
    # header-less, schema order
    df[list(get_schema(True))].to_csv(path, header=False, index=False)
    return path


@pytest.fixture
def songs_df() -> pd.DataFrame:
    return make_songs(300, seed=1)


@pytest.fixture
def fixture_songs() -> pd.DataFrame:
    return make_fixture_songs()


@pytest.fixture
def sample_songs_csv(tmp_path, fixture_songs) -> Path:
    return write_csv(fixture_songs, tmp_path / "sample_songs.csv")


@pytest.fixture
def sample_json_path() -> Path:
    return DATA_DIR / "sample.json"


@pytest.fixture(autouse=True)
def _allow_mlflow_file_store(monkeypatch):
    # Recent MLflow releases refuse file:// tracking stores unless opted in.
    monkeypatch.setenv("MLFLOW_ALLOW_FILE_STORE", "true")
