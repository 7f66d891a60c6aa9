"""Input data structures for the GR4J model.

This module defines the validated forcing container handed to run().
"""

from __future__ import annotations

import numpy as np
from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator, model_validator


class ForcingData(BaseModel):
    """Validated forcing data for the GR4J model.

    All arrays must be 1D with the same length. NaN and negative values are
    rejected. Numeric arrays are coerced to float64.

    Attributes:
        time: Datetime array for each timestep (datetime64).
        precip: Precipitation [mm/day].
        pet: Potential evapotranspiration [mm/day].
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    time: np.ndarray  # datetime64
    precip: np.ndarray  # [mm/day]
    pet: np.ndarray  # [mm/day]

    @field_validator("time", mode="before")
    @classmethod
    def validate_time(cls, v: np.ndarray) -> np.ndarray:
        """Validate time array: must be 1D and coerced to datetime64."""
        arr = np.asarray(v)
        if arr.ndim != 1:
            msg = f"time array must be 1D, got {arr.ndim}D"
            raise ValueError(msg)
        return arr.astype("datetime64[ns]")

    @field_validator("precip", "pet", mode="before")
    @classmethod
    def validate_flux(cls, v: np.ndarray, info: ValidationInfo) -> np.ndarray:
        """Validate a forcing array: 1D float64, no NaN, no negative values."""
        arr = np.asarray(v, dtype=np.float64)
        if arr.ndim != 1:
            msg = f"{info.field_name} array must be 1D, got {arr.ndim}D"
            raise ValueError(msg)
        if np.any(np.isnan(arr)):
            msg = f"{info.field_name} array contains NaN values"
            raise ValueError(msg)
        if np.any(arr < 0.0):
            msg = f"{info.field_name} array contains negative values"
            raise ValueError(msg)
        return arr

    @model_validator(mode="after")
    def validate_array_lengths(self) -> ForcingData:
        """Ensure all arrays have the same length."""
        n = len(self.time)
        if len(self.precip) != n:
            msg = f"precip length {len(self.precip)} does not match time length {n}"
            raise ValueError(msg)
        if len(self.pet) != n:
            msg = f"pet length {len(self.pet)} does not match time length {n}"
            raise ValueError(msg)
        return self

    def __len__(self) -> int:
        """Return the number of timesteps."""
        return len(self.time)
