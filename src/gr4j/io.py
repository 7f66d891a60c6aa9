"""File readers and writers for GR4J inputs and outputs.

- load_forcing(): daily ``date,rainfall,pet`` CSV into ForcingData
- load_parameters(): JSON object with the six parameters into Parameters
- save_flow(): dates and simulated flow back to a ``date,flow`` CSV
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike

from .inputs import ForcingData
from .model.constants import PARAM_NAMES
from .model.types import Parameters

logger = logging.getLogger(__name__)

FORCING_COLUMNS: tuple[str, ...] = ("date", "rainfall", "pet")


def load_forcing(path: str | Path) -> ForcingData:
    """Read daily forcing from a CSV file.

    Args:
        path: CSV file with a header containing ``date``, ``rainfall`` and ``pet``.

    Returns:
        Validated ForcingData.

    Raises:
        ValueError: If a required column is missing or the values are invalid.
    """
    df = pd.read_csv(path)

    missing = [column for column in FORCING_COLUMNS if column not in df.columns]
    if missing:
        msg = f"{path}: missing required columns {missing}"
        raise ValueError(msg)

    forcing = ForcingData(
        time=pd.to_datetime(df["date"]).to_numpy(),
        precip=df["rainfall"].to_numpy(dtype=np.float64),
        pet=df["pet"].to_numpy(dtype=np.float64),
    )
    logger.debug("Loaded %d forcing rows from %s", len(forcing), path)
    return forcing


def load_parameters(path: str | Path) -> Parameters:
    """Read model parameters from a JSON document.

    Args:
        path: JSON file holding an object keyed by PARAM_NAMES.

    Returns:
        Validated Parameters.

    Raises:
        ValueError: If a parameter is missing or not numeric, or the set is
            not a valid model configuration.
    """
    data = json.loads(Path(path).read_text())
    if not isinstance(data, dict):
        msg = f"{path}: expected a JSON object, got {type(data).__name__}"
        raise ValueError(msg)

    missing = [name for name in PARAM_NAMES if name not in data]
    if missing:
        msg = f"{path}: missing parameters {missing}"
        raise ValueError(msg)

    values: dict[str, float] = {}
    for name in PARAM_NAMES:
        value = data[name]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            msg = f"{path}: parameter {name} must be a number, got {value!r}"
            raise ValueError(msg)
        values[name] = float(value)

    unknown = sorted(set(data) - set(PARAM_NAMES))
    if unknown:
        logger.warning("Ignoring unknown parameters in %s: %s", path, unknown)

    return Parameters(**values)


def save_flow(time: ArrayLike, flow: ArrayLike, path: str | Path) -> None:
    """Write dates and simulated flow to a CSV file.

    Args:
        time: Date of each timestep (anything pandas can parse as datetimes).
        flow: Simulated streamflow [mm/day], one value per date.
        path: Destination CSV file, overwritten if present.

    Raises:
        ValueError: If time and flow differ in length.
    """
    dates = pd.to_datetime(np.asarray(time))
    flow_arr = np.asarray(flow, dtype=np.float64)
    if len(dates) != len(flow_arr):
        msg = f"time length {len(dates)} does not match flow length {len(flow_arr)}"
        raise ValueError(msg)

    df = pd.DataFrame({"date": dates.strftime("%Y-%m-%d"), "flow": flow_arr})
    df.to_csv(path, index=False)
    logger.debug("Wrote %d flow rows to %s", len(df), path)
