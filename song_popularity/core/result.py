# song_popularity/core/result.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class StageResult(Generic[T]):
    """
    Success/failure container for one pipeline stage.

    Exactly one of `value` / `error` is meaningful: a failed result never
    carries a partial value.

    Usage:
        res = StageResult.attempt(clean_songs, raw_df)
        res = res.and_then(lambda df: StageResult.attempt(build_features, df))
        ds = res.unwrap()   # re-raises the first failure
    """
    value: Optional[T] = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T) -> "StageResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: BaseException) -> "StageResult[T]":
        return cls(value=None, error=error)

    @classmethod
    def attempt(cls, fn: Callable[..., T], *args: Any, **kwargs: Any) -> "StageResult[T]":
        try:
            return cls.success(fn(*args, **kwargs))
        except Exception as e:
            logger.error("Stage %s failed: %s", getattr(fn, "__name__", repr(fn)), e)
            return cls.failure(e)

    def and_then(self, fn: Callable[[T], "StageResult[U]"]) -> "StageResult[U]":
        if not self.ok:
            return StageResult.failure(self.error)
        return fn(self.value)

    def map(self, fn: Callable[[T], U]) -> "StageResult[U]":
        if not self.ok:
            return StageResult.failure(self.error)
        return StageResult.attempt(fn, self.value)

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value
