"""GR4J data structures for parameters and state variables.

This module defines the core data types used by the GR4J hydrological model:
- Parameters: The 4 model parameters plus the 2 initial store contents
- State: The mutable state variables tracked during simulation
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from .constants import DEFAULT_BOUNDS, PARAM_NAMES, STATE_SCALARS
from .unit_hydrographs import uh_lengths

logger = logging.getLogger(__name__)


def _validate_parameters(params: Parameters) -> None:
    """Reject parameter sets the model cannot run with.

    Raises ValueError on the first violated constraint.
    """
    for name in PARAM_NAMES:
        value = getattr(params, name)
        if not math.isfinite(value):
            msg = f"{name} must be finite, got {value}"
            raise ValueError(msg)
    if not params.production_store_capacity > 0:
        msg = f"production_store_capacity must be positive, got {params.production_store_capacity}"
        raise ValueError(msg)
    if not params.routing_store_capacity > 0:
        msg = f"routing_store_capacity must be positive, got {params.routing_store_capacity}"
        raise ValueError(msg)
    if not params.days > 0:
        msg = f"days must be positive, got {params.days}"
        raise ValueError(msg)
    if not 0.0 <= params.production_store_content <= params.production_store_capacity:
        msg = (
            f"production_store_content must be within [0, {params.production_store_capacity}], "
            f"got {params.production_store_content}"
        )
        raise ValueError(msg)
    if not params.routing_store_content >= 0.0:
        msg = f"routing_store_content must be non-negative, got {params.routing_store_content}"
        raise ValueError(msg)


def _warn_if_outside_bounds(params: Parameters) -> None:
    """Log warnings for parameters outside typical calibration ranges.

    This does not raise errors - values outside bounds may still be valid
    for specific catchments or research purposes.
    """
    for name, (lower, upper) in DEFAULT_BOUNDS.items():
        value = getattr(params, name)
        if value < lower or value > upper:
            logger.warning(
                "Parameter %s=%.4f is outside typical range [%.2f, %.2f]",
                name,
                value,
                lower,
                upper,
            )


@dataclass(frozen=True)
class Parameters:
    """GR4J model parameters.

    The four GR4J parameters and the initial contents of both stores. This is
    a frozen dataclass to prevent accidental modification during simulation.

    Attributes:
        production_store_capacity: X1 - production store capacity [mm].
        exchange_coefficient: X2 - groundwater exchange coefficient [mm/day].
            Positive imports water, negative exports it.
        routing_store_capacity: X3 - routing store capacity [mm].
        days: X4 - unit hydrograph time base [days].
        production_store_content: Initial production store level [mm].
        routing_store_content: Initial routing store level [mm].

    Raises:
        ValueError: If a capacity or days is not positive, or an initial
            content lies outside its store.
    """

    production_store_capacity: float  # X1 [mm]
    exchange_coefficient: float  # X2 [mm/day]
    routing_store_capacity: float  # X3 [mm]
    days: float  # X4 [days]
    production_store_content: float  # S0 [mm]
    routing_store_content: float  # R0 [mm]

    def __post_init__(self) -> None:
        """Validate parameters and warn if outside typical ranges."""
        _validate_parameters(self)
        _warn_if_outside_bounds(self)

    @property
    def uh_lengths(self) -> tuple[int, int]:
        """Return the number of (UH1, UH2) ordinates implied by ``days``."""
        return uh_lengths(self.days)

    def __array__(self, dtype: np.dtype | None = None, copy: bool | None = None) -> np.ndarray:
        """Convert parameters to a 1D array for array protocol.

        Layout: PARAM_NAMES order (6 elements)
        """
        arr = np.array([getattr(self, name) for name in PARAM_NAMES], dtype=np.float64)
        if dtype is not None:
            arr = arr.astype(dtype)
        return arr

    @classmethod
    def from_array(cls, arr: np.ndarray) -> Parameters:
        """Reconstruct Parameters from array."""
        if len(arr) != len(PARAM_NAMES):
            msg = f"Expected array of length {len(PARAM_NAMES)}, got {len(arr)}"
            raise ValueError(msg)
        return cls(**{name: float(value) for name, value in zip(PARAM_NAMES, arr, strict=True)})


@dataclass
class State:
    """GR4J model state variables.

    Mutable state that evolves during simulation. Contains the two stores
    and the unit hydrograph convolution states.

    Attributes:
        production_store: S - soil moisture store level [mm].
        routing_store: R - groundwater/routing store level [mm].
        uh1_states: Convolution states for UH1 (ceil(days) elements).
        uh2_states: Convolution states for UH2 (ceil(2 * days) elements).
    """

    production_store: float  # S - soil moisture [mm]
    routing_store: float  # R - groundwater [mm]
    uh1_states: np.ndarray
    uh2_states: np.ndarray

    @classmethod
    def initialize(cls, params: Parameters) -> State:
        """Create initial state from parameters.

        Stores start at the configured contents, unit hydrograph buffers
        are zeroed and sized to their ordinate counts.

        Args:
            params: Model parameters to derive initial state from.

        Returns:
            Initialized State object ready for simulation.
        """
        n1, n2 = params.uh_lengths
        return cls(
            production_store=params.production_store_content,
            routing_store=params.routing_store_content,
            uh1_states=np.zeros(n1),
            uh2_states=np.zeros(n2),
        )

    def __array__(self, dtype: np.dtype | None = None, copy: bool | None = None) -> np.ndarray:
        """Convert state to a 1D array for array protocol.

        Layout: [production_store, routing_store, uh1_states[n1], uh2_states[n2]]
        """
        arr = np.concatenate(
            [
                np.array([self.production_store, self.routing_store], dtype=np.float64),
                np.asarray(self.uh1_states, dtype=np.float64),
                np.asarray(self.uh2_states, dtype=np.float64),
            ]
        )
        if dtype is not None:
            arr = arr.astype(dtype)
        return arr

    @classmethod
    def from_array(cls, arr: np.ndarray, params: Parameters) -> State:
        """Reconstruct State from array using the buffer sizes implied by params."""
        n1, n2 = params.uh_lengths
        expected = STATE_SCALARS + n1 + n2
        if len(arr) != expected:
            msg = f"Expected array of length {expected}, got {len(arr)}"
            raise ValueError(msg)
        return cls(
            production_store=float(arr[0]),
            routing_store=float(arr[1]),
            uh1_states=np.array(arr[STATE_SCALARS : STATE_SCALARS + n1], dtype=np.float64),
            uh2_states=np.array(arr[STATE_SCALARS + n1 :], dtype=np.float64),
        )
