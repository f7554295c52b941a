from __future__ import annotations
import json
import math
from pathlib import Path
from joblib import dump
from typing import Any

"""
Reporting & Artefakt-Speicherung.

Aufgabe:
- Speichert Modelle (joblib)
- Speichert Metriken/Configs (json)

Wichtig:
Kein Training, keine Datenaufbereitung.
Nur persistieren. Wird nur von der CLI aufgerufen, die Pipeline selbst speichert nichts.
"""


def _json_safe(obj: Any) -> Any:
    # NaN is not valid JSON
    if isinstance(obj, float) and math.isnan(obj):
        return None
    if isinstance(obj, dict):
        return {k: _json_safe(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_json_safe(v) for v in obj]
    return obj


def save_json(obj: dict, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(_json_safe(obj), f, indent=2, ensure_ascii=False)
    return path


def save_joblib(obj, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    dump(obj, path)
    return path
