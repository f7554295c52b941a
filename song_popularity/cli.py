# song_popularity/cli.py
import logging
from pathlib import Path

import click
import mlflow
from rich import print
from rich.markup import escape

from .config.settings import MODEL_NAME_LR, MODEL_NAME_RF, load_run_config
from .data.loading import df_from_json
from .evaluation.metrics import binary_metrics
from .models.trainer import PopularityTrainer
from .pipeline import data, score_songs
from .core.result import StageResult
from .reporting.reporting import save_joblib, save_json


def _fail(result: StageResult) -> None:
    print(f"[red]Pipeline failed:[/red] {type(result.error).__name__}: {escape(str(result.error))}")
    raise SystemExit(1)


@click.command()
@click.option("--config", "-c", "config_path", type=click.Path(dir_okay=False), default=None,
              help="JSON run config (defaults to $SONG_POPULARITY_CONFIG).")
@click.option("--model", "-m", "model_name", type=click.Choice([MODEL_NAME_LR, MODEL_NAME_RF]), default=None)
@click.option("--evaluate/--no-evaluate", default=None)
@click.option("--csv", "csv_path", type=click.Path(dir_okay=False), default=None,
              help="Training CSV, overrides the config source.")
@click.option("--output-dir", type=click.Path(file_okay=False), default=None)
@click.option("--save-model", is_flag=True, default=False, help="Dump the fitted model + scaler with joblib.")
@click.option("--predict-json", type=click.Path(dir_okay=False), default=None,
              help="Score the songs in this JSON file with the trained model.")
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]), default="INFO")
def main(config_path, model_name, evaluate, csv_path, output_dir, save_model, predict_json, log_level):
    logging.basicConfig(level=getattr(logging, log_level), format="%(levelname)s - %(name)s - %(message)s")

    cfg_result = StageResult.attempt(load_run_config, config_path)
    if not cfg_result.ok:
        _fail(cfg_result)
    cfg = cfg_result.value
    overrides = {}
    if model_name is not None:
        overrides["model_name"] = model_name
    if evaluate is not None:
        overrides["evaluate"] = evaluate
    if csv_path is not None:
        overrides.update(use_csv=True, csv_path=csv_path)
    if output_dir is not None:
        overrides["output_dir"] = output_dir
    if overrides:
        cfg = cfg.model_copy(update=overrides)

    data_result = data(cfg)
    if not data_result.ok:
        _fail(data_result)
    ds = data_result.value

    fit_result = (
        StageResult.attempt(cfg.split_config)
        .map(lambda split: PopularityTrainer(split=split))
        .and_then(lambda trainer: StageResult.attempt(trainer.fit_eval, ds, cfg.model_name, cfg.evaluate))
    )
    if not fit_result.ok:
        _fail(fit_result)
    outcome = fit_result.value

    print(f"[green]Trained {outcome.model_name.value}[/green] on {outcome.n_train} rows "
          f"({ds.n_features} features, {outcome.n_test} held out)")

    report = {
        "model_name": outcome.model_name.value,
        "n_rows": ds.n_rows,
        "n_features": ds.n_features,
        "feature_names": ds.feature_names,
        "n_train": outcome.n_train,
        "n_test": outcome.n_test,
        "train_auc": outcome.train_auc,
        "test_auc": outcome.test_auc,
    }
    if outcome.test_prediction is not None:
        print(f"[cyan]Area under ROC[/cyan] train={outcome.train_auc:.4f} test={outcome.test_auc:.4f}")
        report["test_metrics"] = binary_metrics(
            outcome.test_prediction["label"], outcome.test_prediction["rawPrediction"]
        )

    out_dir = Path(cfg.output_dir)
    save_json(report, out_dir / "metrics.json")
    if save_model:
        save_joblib({"model": outcome.model, "scaler": ds.scaler, "feature_names": ds.feature_names},
                    out_dir / "model.joblib")

    if cfg.track_mlflow:
        with mlflow.start_run():
            mlflow.log_param("model_name", outcome.model_name.value)
            mlflow.log_param("seed", cfg.seed)
            mlflow.log_param("cutoff_year", cfg.cutoff_year)
            if outcome.train_auc is not None:
                mlflow.log_metric("train_auc", outcome.train_auc)
                mlflow.log_metric("test_auc", outcome.test_auc)

    if predict_json:
        payload = Path(predict_json).read_text(encoding="utf-8")
        scored = (
            StageResult.attempt(df_from_json, payload)
            .and_then(lambda raw: score_songs(outcome.model, raw, ds.scaler, cfg.preprocess_config()))
        )
        if not scored.ok:
            _fail(scored)
        print("[cyan]Predictions:[/cyan]", scored.value[["rawPrediction", "prediction"]].to_dict("records"))


if __name__ == "__main__":
    main()
