import numpy as np
import pandas as pd
import pytest

from song_popularity.cleaning.core import clean_songs
from song_popularity.config.settings import PreprocessConfig
from song_popularity.core.errors import EmptyDatasetError, SchemaMismatchError
from song_popularity.targets.popularity import (
    apply_popularity_labels,
    build_popularity_labels,
    fit_popularity_threshold,
)

from conftest import N_POPULAR, make_songs


def test_clean_postcondition(fixture_songs):
    cleaned = clean_songs(fixture_songs)

    assert len(cleaned) == 1000
    assert (cleaned["year"] > 0).all()
    assert cleaned[["artist_latitude", "artist_longitude"]].notna().all().all()
    assert list(cleaned.index) == list(range(len(cleaned)))


def test_clean_rebases_year_and_keeps_input():
    df = make_songs(4, seed=2)
    df["year"] = pd.array([1920, 1921, 2000, None], dtype="Int64")
    before = df.copy()

    cleaned = clean_songs(df, PreprocessConfig(cutoff_year=1920))

    assert cleaned["year"].tolist() == [1, 80]
    pd.testing.assert_frame_equal(df, before)


def test_clean_keeps_other_missing_numerics():
    df = make_songs(3, seed=2)
    df.loc[1, "danceability"] = np.nan
    assert len(clean_songs(df)) == 3


def test_clean_can_return_zero_rows():
    df = make_songs(5, seed=2)
    df["artist_latitude"] = np.nan
    cleaned = clean_songs(df)
    assert cleaned.empty
    assert list(cleaned.columns) == list(df.columns)


def test_clean_requires_geolocation_columns():
    df = make_songs(5, seed=2).drop(columns=["artist_longitude"])
    with pytest.raises(SchemaMismatchError):
        clean_songs(df)


def test_fixture_labels_exactly_454_popular(fixture_songs):
    labeled, threshold = build_popularity_labels(clean_songs(fixture_songs))

    assert int(labeled["label"].sum()) == N_POPULAR
    assert 0.3 < threshold.mean < 0.7
    assert threshold.n_rows == 1000


def test_label_is_monotonic_in_score():
    rng = np.random.default_rng(5)
    df = pd.DataFrame({"song_hotness": rng.uniform(0, 1, 200)})
    labeled, _ = build_popularity_labels(df)

    ordered = labeled.sort_values("song_hotness")["label"].to_numpy()
    assert (np.diff(ordered) >= 0).all()


def test_threshold_is_row_order_independent():
    rng = np.random.default_rng(9)
    df = pd.DataFrame({"song_hotness": rng.uniform(0, 1, 500)})
    shuffled = df.sample(frac=1.0, random_state=3)

    assert fit_popularity_threshold(df).mean == fit_popularity_threshold(shuffled).mean


def test_score_equal_to_mean_is_popular():
    df = pd.DataFrame({"song_hotness": [0.25, 0.5, 0.75]})
    labeled, threshold = build_popularity_labels(df)
    assert threshold.mean == 0.5
    assert labeled["label"].tolist() == [0, 1, 1]


def test_missing_score_gets_label_zero():
    df = pd.DataFrame({"song_hotness": [0.2, np.nan, 0.8]})
    labeled, threshold = build_popularity_labels(df)
    assert threshold.mean == pytest.approx(0.5)
    assert labeled["label"].tolist() == [0, 0, 1]


def test_threshold_on_empty_dataset_raises():
    with pytest.raises(EmptyDatasetError):
        fit_popularity_threshold(pd.DataFrame({"song_hotness": pd.Series([], dtype="float64")}))
    with pytest.raises(EmptyDatasetError):
        fit_popularity_threshold(pd.DataFrame({"song_hotness": [np.nan, np.nan]}))


def test_labels_require_score_column():
    with pytest.raises(SchemaMismatchError):
        fit_popularity_threshold(pd.DataFrame({"x": [1.0]}))
    with pytest.raises(SchemaMismatchError):
        apply_popularity_labels(pd.DataFrame({"x": [1.0]}), fit_popularity_threshold(pd.DataFrame({"song_hotness": [1.0]})))
