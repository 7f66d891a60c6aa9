"""GR4J unit hydrograph functions.

This module implements the S-curve based unit hydrographs (UH1 and UH2) used
in the GR4J rainfall-runoff model for temporal distribution of effective rainfall.

UH1 spans ceil(days) timesteps, UH2 spans ceil(2 * days) timesteps.
"""

import math

import numpy as np
from numba import njit

from .constants import D


def s_curve1(t: float, days: float) -> float:
    """Compute the UH1 S-curve value at time t.

    Args:
        t: Time since the input pulse (days).
        days: Unit hydrograph time base (days).

    Returns:
        Cumulative response between 0 and 1.
    """
    if t <= 0:
        return 0.0
    elif t < days:
        return (t / days) ** D
    else:
        return 1.0


def s_curve2(t: float, days: float) -> float:
    """Compute the UH2 S-curve value at time t.

    Args:
        t: Time since the input pulse (days).
        days: Unit hydrograph time base (days).

    Returns:
        Cumulative response between 0 and 1.
    """
    if t <= 0:
        return 0.0
    elif t < days:
        return 0.5 * (t / days) ** D
    elif t < 2 * days:
        return 1.0 - 0.5 * (2.0 - t / days) ** D
    else:
        return 1.0


def uh_lengths(days: float) -> tuple[int, int]:
    """Return the number of ordinates of UH1 and UH2 for a time base."""
    return math.ceil(days), math.ceil(2.0 * days)


def compute_uh_ordinates(days: float) -> tuple[np.ndarray, np.ndarray]:
    """Compute unit hydrograph ordinates for UH1 and UH2.

    The ordinates are derived from S-curve functions that describe the
    cumulative response. UH1 has a faster response (base time ``days``) while
    UH2 has a slower, symmetric response (base time ``2 * days``).

    Args:
        days: Unit hydrograph time base (days). Must be positive.

    Returns:
        Tuple of (uh1_ordinates, uh2_ordinates) where:
            - uh1_ordinates: Array of length ceil(days)
            - uh2_ordinates: Array of length ceil(2 * days)

    Raises:
        ValueError: If days is not strictly positive.

    Notes:
        Ordinates are computed as: UH(i) = S(i + 1) - S(i) for i = 0..N-1,
        so each set sums to 1.
    """
    if not math.isfinite(days):
        msg = f"days must be finite, got {days}"
        raise ValueError(msg)
    if not days > 0:
        msg = f"days must be positive, got {days}"
        raise ValueError(msg)

    n1, n2 = uh_lengths(days)
    uh1_ordinates = np.zeros(n1, dtype=np.float64)
    uh2_ordinates = np.zeros(n2, dtype=np.float64)

    for i in range(n1):
        uh1_ordinates[i] = s_curve1(i + 1, days) - s_curve1(i, days)

    for i in range(n2):
        uh2_ordinates[i] = s_curve2(i + 1, days) - s_curve2(i, days)

    return uh1_ordinates, uh2_ordinates


@njit(cache=True)
def convolve_uh(uh_states: np.ndarray, pr_input: float, uh_ordinates: np.ndarray) -> tuple[np.ndarray, float]:
    """Perform unit hydrograph convolution for one time step.

    Shifts the pending amounts one slot towards the outlet and spreads the new
    input over the buffer according to the ordinates.

    Args:
        uh_states: Current unit hydrograph state array (will not be modified).
        pr_input: Input to the unit hydrograph for this time step (mm/day).
        uh_ordinates: Unit hydrograph ordinates (from compute_uh_ordinates).

    Returns:
        Tuple of (new_states, output) where:
            - new_states: Updated state array after convolution
            - output: The UH output for this time step (mm/day), which is
              the value of new_states[0], i.e. read AFTER the shift so that
              today's input already contributes its first ordinate

    Notes:
        The convolution follows the algorithm:
            1. For k = 0 to len-2: new_states[k] = uh_states[k+1] + uh_ordinates[k] * pr_input
            2. For the last element: new_states[-1] = uh_ordinates[-1] * pr_input
            3. Output is the first element of the new states
    """
    n = len(uh_states)
    new_states = np.zeros(n)

    for k in range(n - 1):
        new_states[k] = uh_states[k + 1] + uh_ordinates[k] * pr_input

    new_states[n - 1] = uh_ordinates[n - 1] * pr_input

    return new_states, new_states[0]
