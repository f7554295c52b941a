# song_popularity/core/errors.py
from __future__ import annotations


class PipelineError(Exception):
    """Base class for every failure raised by a pipeline stage."""


class DataAccessError(PipelineError):
    """Source data could not be read or parsed."""


class EmptyDatasetError(PipelineError, ValueError):
    """An aggregate (mean, scaler fit, split, metric) was requested over zero rows."""


class InvalidModelSelectorError(PipelineError, ValueError):
    """Model name outside the supported enumeration."""


class SchemaMismatchError(PipelineError):
    """A column a stage depends on is absent."""


class MissingFeatureValueError(PipelineError):
    """A feature column holds nulls at assembly time."""


def require_columns(df, columns, stage: str) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise SchemaMismatchError(f"{stage}: missing required column(s) {missing}")
