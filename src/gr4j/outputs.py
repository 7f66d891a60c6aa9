"""Structured output dataclasses for GR4J model results.

This module provides dataclasses for organizing and accessing model outputs:
- GR4JFluxes: GR4J model flux outputs
- ModelOutput: Model output with time index (generic over flux type)
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Generic, TypeVar

import numpy as np
import pandas as pd

# Type variable for flux types
F = TypeVar("F")


@dataclass(frozen=True)
class GR4JFluxes:
    """GR4J model flux outputs as arrays.

    All arrays have the same length as the input forcing data.

    Attributes:
        pet: Potential evapotranspiration [mm/day].
        precip: Precipitation input [mm/day].
        production_store: Production store level after timestep [mm].
        net_rainfall: Net rainfall P - E, 0 when E > P [mm/day].
        storage_infiltration: Water infiltrating to production store [mm/day].
        actual_et: Actual evapotranspiration [mm/day].
        percolation: Percolation from production store [mm/day].
        effective_rainfall: Total water handed to routing [mm/day].
        q9: Slow branch output, 90% of UH1 output [mm/day].
        q1: Fast branch output, 10% of UH2 output [mm/day].
        routing_store: Routing store level after timestep [mm].
        exchange: Groundwater exchange [mm/day].
        qr: Outflow from routing store [mm/day].
        qd: Direct branch outflow [mm/day].
        streamflow: Total simulated streamflow [mm/day].
    """

    pet: np.ndarray
    precip: np.ndarray
    production_store: np.ndarray
    net_rainfall: np.ndarray
    storage_infiltration: np.ndarray
    actual_et: np.ndarray
    percolation: np.ndarray
    effective_rainfall: np.ndarray
    q9: np.ndarray
    q1: np.ndarray
    routing_store: np.ndarray
    exchange: np.ndarray
    qr: np.ndarray
    qd: np.ndarray
    streamflow: np.ndarray

    def to_dict(self) -> dict[str, np.ndarray]:
        """Convert to dictionary of arrays.

        Returns:
            Dictionary mapping field names to their numpy array values.
        """
        return {field.name: getattr(self, field.name) for field in fields(self)}


# Field order shared with the compiled kernel's output columns
FLUX_NAMES: tuple[str, ...] = tuple(field.name for field in fields(GR4JFluxes))


@dataclass(frozen=True)
class ModelOutput(Generic[F]):
    """Model output combining flux outputs with their time index.

    Attributes:
        time: Datetime array for each timestep.
        fluxes: Model flux outputs.
    """

    time: np.ndarray
    fluxes: F

    @property
    def streamflow(self) -> np.ndarray:
        """Return the streamflow array from flux outputs.

        Returns:
            Streamflow array [mm/day].
        """
        return self.fluxes.streamflow  # type: ignore[attr-defined, no-any-return]

    def __len__(self) -> int:
        """Return the number of timesteps."""
        return len(self.time)

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to DataFrame with time index.

        Returns:
            DataFrame with all flux outputs and time as index.
        """
        data = self.fluxes.to_dict()  # type: ignore[attr-defined]

        df = pd.DataFrame(data, index=self.time)
        df.index.name = "time"

        return df
