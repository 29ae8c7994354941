from __future__ import annotations

from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any

import numpy as np

from markercluster.errors import ClusterDataError
from markercluster.series import Point, SeriesData, points_from_series


try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except Exception:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def normalize_xy(
    x: Any,
    y: Any,
    *,
    data: Any = None,
    source_name: str | None = None,
) -> SeriesData:
    x_values = _resolve_column(x, key="x", data=data)
    y_values = _resolve_column(y, key="y", data=data)
    x_arr = _coerce_1d_numeric(x_values, label="x")
    y_arr = _coerce_1d_numeric(y_values, label="y")
    if x_arr.shape != y_arr.shape:
        raise ClusterDataError(f"x and y length mismatch: {x_arr.size} != {y_arr.size}")
    mask = np.isfinite(x_arr) & np.isfinite(y_arr)
    return SeriesData(x=x_arr, y=y_arr, mask=mask, source_name=source_name)


def normalize_points(
    x: Any,
    y: Any,
    *,
    data: Any = None,
    point_options: Sequence[Mapping[str, Any] | None] | None = None,
) -> list[Point]:
    """Coerce x/y input into finite ``Point`` records; non-finite rows are skipped."""
    series = normalize_xy(x, y, data=data)
    return points_from_series(series, point_options)


def _resolve_column(value: Any, key: str, data: Any) -> Any:
    if data is None:
        if value is None:
            raise ClusterDataError(f"{key} input is required")
        return value
    if pd is None:
        raise ClusterDataError("pandas is required when using `data=`")
    if not isinstance(data, pd.DataFrame):
        raise ClusterDataError("`data` must be a pandas DataFrame")
    if isinstance(value, str):
        if value not in data.columns:
            raise ClusterDataError(f"column not found: {value}")
        return data[value]
    if value is None:
        raise ClusterDataError(f"{key} column name is required when using `data=`")
    return value


def _coerce_1d_numeric(value: Any, *, label: str) -> np.ndarray:
    if torch is not None and isinstance(value, torch.Tensor):
        tensor = value.detach()
        if tensor.ndim != 1:
            raise ClusterDataError(f"{label} must be 1-D")
        if tensor.is_cuda:
            tensor = tensor.cpu()
        return tensor.to(torch.float64).numpy()

    if pd is not None and isinstance(value, pd.Series):
        return _coerce_ndarray(value.to_numpy(), label=label)

    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise ClusterDataError(f"{label} must be 1-D")
        return _coerce_ndarray(value, label=label)

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        arr = np.asarray(value, dtype=object)
        if arr.ndim != 1:
            raise ClusterDataError(f"{label} must be 1-D")
        return _coerce_ndarray(arr, label=label)

    raise ClusterDataError(f"unsupported {label} input type: {type(value)!r}")


def _coerce_ndarray(arr: np.ndarray, *, label: str) -> np.ndarray:
    if arr.dtype.kind in {"i", "u", "f", "b"}:
        return arr.astype(np.float64, copy=False)

    out = np.empty(arr.shape[0], dtype=np.float64)
    for i, raw in enumerate(arr.tolist()):
        if raw is None:
            out[i] = np.nan
            continue
        if isinstance(raw, Decimal):
            out[i] = float(raw)
            continue
        try:
            out[i] = float(raw)
        except (TypeError, ValueError) as exc:
            raise ClusterDataError(f"{label} contains non-numeric value at index {i}: {raw!r}") from exc
    return out
