"""GR4J core process functions.

Numba-compiled pure functions implementing the water-balance equations of the
two GR4J reservoirs. All inputs and outputs are floats; stores are passed in
and the updated level is returned alongside the flux.
"""

import numpy as np
from numba import njit

from .constants import EXCHANGE_EXPONENT, PERC_SCALE


@njit(cache=True)
def production_store_fill(production_store: float, net_rainfall: float, x1: float) -> tuple[float, float]:
    """Infiltrate net rainfall into the production store.

    PS = X1 * (1 - (S/X1)^2) * tanh(Pn/X1) / (1 + S/X1 * tanh(Pn/X1))

    Args:
        production_store: Current production store level (mm).
        net_rainfall: Net rainfall Pn = P - E, non-negative (mm/day).
        x1: Production store capacity (mm).

    Returns:
        Tuple of (new_store, storage_infiltration) in mm.
    """
    tws = np.tanh(net_rainfall / x1)
    store_ratio = production_store / x1

    storage_infiltration = x1 * (1.0 - store_ratio**2) * tws / (1.0 + store_ratio * tws)

    return production_store + storage_infiltration, storage_infiltration


@njit(cache=True)
def production_store_evaporate(production_store: float, net_evap: float, x1: float) -> tuple[float, float]:
    """Evaporate water from the production store.

    ES = S * (2 - S/X1) * tanh(En/X1) / (1 + (1 - S/X1) * tanh(En/X1))

    Args:
        production_store: Current production store level (mm).
        net_evap: Evaporative deficit En = E - P, non-negative (mm/day).
        x1: Production store capacity (mm).

    Returns:
        Tuple of (new_store, evap_from_store) in mm.
    """
    ws = np.tanh(net_evap / x1)
    store_ratio = production_store / x1

    evap_from_store = production_store * (2.0 - store_ratio) * ws / (1.0 + (1.0 - store_ratio) * ws)

    return production_store - evap_from_store, evap_from_store


@njit(cache=True)
def percolation(production_store: float, x1: float) -> tuple[float, float]:
    """Compute percolation from the production store.

    Perc = S * (1 - (1 + (S / (9/4 * X1))^4)^(-0.25))

    Args:
        production_store: Current production store level (mm).
        x1: Production store capacity (mm).

    Returns:
        Tuple of (new_store, percolation_amount) in mm.
    """
    scaled = production_store / (PERC_SCALE * x1)
    percolation_amount = production_store * (1.0 - (1.0 + scaled**4) ** (-0.25))

    return production_store - percolation_amount, percolation_amount


@njit(cache=True)
def production_store_update(
    precip: float, pet: float, production_store: float, x1: float
) -> tuple[float, float, float, float]:
    """Update the production store based on precipitation and evapotranspiration.

    Handles two cases:
    - P >= E: net rainfall partly infiltrates, the remainder bypasses the store
    - P < E: the deficit is evaporated from the store

    Percolation is NOT applied here, see percolation().

    Args:
        precip: Daily precipitation (mm/day).
        pet: Potential evapotranspiration (mm/day).
        production_store: Current production store level (mm).
        x1: Production store capacity (mm).

    Returns:
        Tuple of (new_store, actual_et, net_rainfall_pn, storage_infiltration).
    """
    if precip >= pet:
        net_rainfall_pn = precip - pet
        new_store, storage_infiltration = production_store_fill(production_store, net_rainfall_pn, x1)
        actual_et = pet
    else:
        new_store, evap_from_store = production_store_evaporate(production_store, pet - precip, x1)
        actual_et = evap_from_store + precip
        net_rainfall_pn = 0.0
        storage_infiltration = 0.0

    return new_store, actual_et, net_rainfall_pn, storage_infiltration


@njit(cache=True)
def groundwater_exchange(routing_store: float, exchange_coefficient: float, x3: float) -> float:
    """Compute groundwater exchange.

    F = X2 * (R/X3)^3.5

    Positive values import water into the catchment, negative values export it.
    """
    return exchange_coefficient * (routing_store / x3) ** EXCHANGE_EXPONENT


@njit(cache=True)
def routing_store_update(routing_store: float, uh1_output: float, exchange: float, x3: float) -> tuple[float, float]:
    """Update the routing store and compute outflow.

    The store receives the UH1 share and the exchange, is clamped to zero and
    then drains non-linearly: QR = R * (1 - (1 + (R/X3)^4)^(-0.25)).

    Args:
        routing_store: Current routing store level (mm).
        uh1_output: Slow branch input, 0.9 * UH1 output (mm/day).
        exchange: Groundwater exchange F (mm/day).
        x3: Routing store capacity (mm).

    Returns:
        Tuple of (new_store, outflow_qr) in mm.
    """
    store = max(routing_store + uh1_output + exchange, 0.0)

    outflow_qr = store * (1.0 - (1.0 + (store / x3) ** 4) ** (-0.25))

    return store - outflow_qr, outflow_qr


@njit(cache=True)
def direct_branch(uh2_output: float, exchange: float) -> float:
    """Compute direct branch outflow, QD = max(uh2_output + exchange, 0)."""
    return max(uh2_output + exchange, 0.0)
