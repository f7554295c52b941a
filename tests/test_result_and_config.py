import json

import pytest
from pydantic import ValidationError

from song_popularity.config.settings import (
    CONFIG_ENV_VAR,
    PreprocessConfig,
    RunConfig,
    SplitConfig,
    load_run_config,
)
from song_popularity.core.errors import EmptyDatasetError
from song_popularity.core.result import StageResult


def _boom(_):
    raise EmptyDatasetError("no rows")


def test_attempt_captures_error():
    res = StageResult.attempt(_boom, 1)
    assert not res.ok
    assert res.value is None
    with pytest.raises(EmptyDatasetError):
        res.unwrap()


def test_and_then_short_circuits():
    calls = []

    def step(x):
        calls.append(x)
        return StageResult.success(x + 1)

    failed = StageResult.attempt(_boom, 1).and_then(step)
    assert not failed.ok and calls == []

    ok = StageResult.success(1).and_then(step).and_then(step)
    assert ok.unwrap() == 3 and calls == [1, 2]


def test_map_wraps_exceptions():
    assert StageResult.success(2).map(lambda x: x * 10).unwrap() == 20
    assert isinstance(StageResult.success(2).map(_boom).error, EmptyDatasetError)


def test_default_run_config(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    cfg = load_run_config()

    assert cfg == RunConfig()
    assert cfg.preprocess_config() == PreprocessConfig(cutoff_year=1920)
    assert cfg.split_config() == SplitConfig(train_ratio=0.8, test_ratio=0.2, seed=11)


def test_run_config_from_env(tmp_path, monkeypatch):
    path = tmp_path / "run.json"
    path.write_text(json.dumps({"model_name": "Random Forest classifier", "cutoff_year": 1950,
                                "train_ratio": 0.7, "seed": 3}), encoding="utf-8")
    monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

    cfg = load_run_config()

    assert cfg.model_name == "Random Forest classifier"
    assert cfg.preprocess_config().cutoff_year == 1950
    split = cfg.split_config()
    assert split.seed == 3 and split.test_ratio == pytest.approx(0.3)


def test_run_config_rejects_bad_types(tmp_path):
    path = tmp_path / "run.json"
    path.write_text(json.dumps({"cutoff_year": "not a year"}), encoding="utf-8")
    with pytest.raises(ValidationError):
        load_run_config(path)


@pytest.mark.parametrize("ratio", [0.0, 1.0, 1.5, -0.2])
def test_run_config_rejects_out_of_range_train_ratio(tmp_path, ratio):
    path = tmp_path / "run.json"
    path.write_text(json.dumps({"train_ratio": ratio}), encoding="utf-8")
    with pytest.raises(ValidationError):
        load_run_config(path)
