"""GR4J model orchestration functions.

This module provides the functional entry points for running the GR4J model:
- step(): Execute a single timestep on an explicit State
- run(): Execute the model over a timeseries with a Numba kernel
"""

from __future__ import annotations

import logging

import numpy as np
from numba import njit

from ..inputs import ForcingData
from ..outputs import FLUX_NAMES, GR4JFluxes, ModelOutput
from .constants import B
from .processes import (
    direct_branch,
    groundwater_exchange,
    percolation,
    production_store_update,
    routing_store_update,
)
from .types import Parameters, State
from .unit_hydrographs import compute_uh_ordinates, convolve_uh

logger = logging.getLogger(__name__)

_N_FLUXES: int = len(FLUX_NAMES)


@njit(cache=True)
def _step_numba(
    state_arr: np.ndarray,  # shape (2 + n1 + n2,) - modified in place
    params_arr: np.ndarray,  # shape (6,)
    precip: float,
    pet: float,
    uh1_ordinates: np.ndarray,  # shape (n1,)
    uh2_ordinates: np.ndarray,  # shape (n2,)
    output_arr: np.ndarray,  # shape (15,) - output written here
) -> None:
    """Execute one timestep of GR4J using arrays (Numba-optimized).

    State layout: [production_store, routing_store, uh1_states[n1], uh2_states[n2]]
    Params layout: [x1, x2, x3, x4, s0, r0]
    Output layout: FLUX_NAMES order
    """
    x1 = params_arr[0]
    x2 = params_arr[1]
    x3 = params_arr[2]

    n1 = len(uh1_ordinates)
    n2 = len(uh2_ordinates)
    uh1_start = 2
    uh2_start = 2 + n1

    # 1. Production store update and percolation
    prod_store, actual_et, net_rainfall_pn, storage_infiltration = production_store_update(
        precip, pet, state_arr[0], x1
    )
    prod_store, percolation_amount = percolation(prod_store, x1)
    effective_rainfall = percolation_amount + (net_rainfall_pn - storage_infiltration)

    # 2. Convolve through unit hydrographs in place, same recurrence as convolve_uh
    # (slot k+1 is read before it is written)
    for k in range(n1 - 1):
        state_arr[uh1_start + k] = state_arr[uh1_start + k + 1] + uh1_ordinates[k] * effective_rainfall
    state_arr[uh1_start + n1 - 1] = uh1_ordinates[n1 - 1] * effective_rainfall

    for k in range(n2 - 1):
        state_arr[uh2_start + k] = state_arr[uh2_start + k + 1] + uh2_ordinates[k] * effective_rainfall
    state_arr[uh2_start + n2 - 1] = uh2_ordinates[n2 - 1] * effective_rainfall

    q9 = B * state_arr[uh1_start]
    q1 = (1.0 - B) * state_arr[uh2_start]

    # 3. Routing store with exchange
    exchange = groundwater_exchange(state_arr[1], x2, x3)
    routing_store, qr = routing_store_update(state_arr[1], q9, exchange, x3)

    # 4. Direct branch
    qd = direct_branch(q1, exchange)

    state_arr[0] = prod_store
    state_arr[1] = routing_store

    output_arr[0] = pet
    output_arr[1] = precip
    output_arr[2] = prod_store
    output_arr[3] = net_rainfall_pn
    output_arr[4] = storage_infiltration
    output_arr[5] = actual_et
    output_arr[6] = percolation_amount
    output_arr[7] = effective_rainfall
    output_arr[8] = q9
    output_arr[9] = q1
    output_arr[10] = routing_store
    output_arr[11] = exchange
    output_arr[12] = qr
    output_arr[13] = qd
    output_arr[14] = qr + qd


@njit(cache=True)
def _run_numba(
    state_arr: np.ndarray,  # shape (2 + n1 + n2,)
    params_arr: np.ndarray,  # shape (6,)
    precip_arr: np.ndarray,  # shape (n_timesteps,)
    pet_arr: np.ndarray,  # shape (n_timesteps,)
    uh1_ordinates: np.ndarray,
    uh2_ordinates: np.ndarray,
    outputs_arr: np.ndarray,  # shape (n_timesteps, 15)
) -> None:
    """Run GR4J over a timeseries using arrays (Numba-optimized).

    State is modified in place. Outputs are written to outputs_arr.
    """
    n_timesteps = len(precip_arr)
    n_fluxes = outputs_arr.shape[1]
    output_single = np.zeros(n_fluxes)

    for t in range(n_timesteps):
        _step_numba(
            state_arr,
            params_arr,
            precip_arr[t],
            pet_arr[t],
            uh1_ordinates,
            uh2_ordinates,
            output_single,
        )
        for i in range(n_fluxes):
            outputs_arr[t, i] = output_single[i]


def step(
    state: State,
    params: Parameters,
    precip: float,
    pet: float,
    uh1_ordinates: np.ndarray,
    uh2_ordinates: np.ndarray,
) -> tuple[State, dict[str, float]]:
    """Execute one timestep of the GR4J model.

    Implements the complete GR4J algorithm:
    1. Production store update (evapotranspiration and infiltration)
    2. Percolation from production store
    3. Convolve effective rainfall through UH1 and UH2
    4. Compute groundwater exchange
    5. Update routing store with 90% of UH1 output
    6. Compute direct branch outflow from 10% of UH2 output
    7. Sum total streamflow

    Args:
        state: Current model state (stores and UH states).
        params: Model parameters.
        precip: Daily precipitation (mm/day).
        pet: Daily potential evapotranspiration (mm/day).
        uh1_ordinates: Pre-computed UH1 ordinates from compute_uh_ordinates().
        uh2_ordinates: Pre-computed UH2 ordinates from compute_uh_ordinates().

    Returns:
        Tuple of (new_state, fluxes) where:
        - new_state: Updated State object after the timestep
        - fluxes: Dictionary containing all model outputs keyed by FLUX_NAMES
    """
    x1 = params.production_store_capacity
    x3 = params.routing_store_capacity

    # 1. Production store update
    prod_store, actual_et, net_rainfall_pn, storage_infiltration = production_store_update(
        precip, pet, state.production_store, x1
    )

    # 2. Percolation
    prod_store, percolation_amount = percolation(prod_store, x1)

    # Rainfall that bypassed the store plus percolation
    effective_rainfall = percolation_amount + (net_rainfall_pn - storage_infiltration)

    # 3. Convolve through unit hydrographs
    new_uh1_states, uh1_output = convolve_uh(state.uh1_states, effective_rainfall, uh1_ordinates)
    new_uh2_states, uh2_output = convolve_uh(state.uh2_states, effective_rainfall, uh2_ordinates)
    q9 = B * uh1_output
    q1 = (1.0 - B) * uh2_output

    # 4. Groundwater exchange, from the routing store level before inflow
    exchange = groundwater_exchange(state.routing_store, params.exchange_coefficient, x3)

    # 5. Routing store
    routing_store, qr = routing_store_update(state.routing_store, q9, exchange, x3)

    # 6. Direct branch
    qd = direct_branch(q1, exchange)

    new_state = State(
        production_store=prod_store,
        routing_store=routing_store,
        uh1_states=new_uh1_states,
        uh2_states=new_uh2_states,
    )

    fluxes: dict[str, float] = {
        "pet": pet,
        "precip": precip,
        "production_store": prod_store,
        "net_rainfall": net_rainfall_pn,
        "storage_infiltration": storage_infiltration,
        "actual_et": actual_et,
        "percolation": percolation_amount,
        "effective_rainfall": effective_rainfall,
        "q9": q9,
        "q1": q1,
        "routing_store": routing_store,
        "exchange": exchange,
        "qr": qr,
        "qd": qd,
        "streamflow": qr + qd,
    }

    return new_state, fluxes


def run(
    params: Parameters,
    forcing: ForcingData,
    initial_state: State | None = None,
) -> ModelOutput[GR4JFluxes]:
    """Run the GR4J model over a timeseries.

    Executes the GR4J model for each timestep in the input forcing data, returning
    a ModelOutput with all model outputs.

    Args:
        params: Model parameters.
        forcing: Input forcing data with precip and pet arrays.
        initial_state: Initial model state. If None, uses State.initialize(params).

    Returns:
        ModelOutput containing GR4J flux outputs.
        Access streamflow via result.streamflow or result.fluxes.streamflow (numpy array).
        Convert to DataFrame via result.to_dataframe().

    Raises:
        ValueError: If initial_state buffers do not match the unit hydrograph lengths.

    Example:
        >>> params = Parameters(350.0, 0.0, 90.0, 1.7, 105.0, 45.0)
        >>> forcing = ForcingData(
        ...     time=np.array(['2020-01-01', '2020-01-02', '2020-01-03'], dtype='datetime64'),
        ...     precip=np.array([10.0, 5.0, 0.0]),
        ...     pet=np.array([3.0, 4.0, 5.0]),
        ... )
        >>> result = run(params, forcing)
        >>> result.streamflow
        array([...])
    """
    state = State.initialize(params) if initial_state is None else initial_state

    # Compute unit hydrograph ordinates once
    uh1_ordinates, uh2_ordinates = compute_uh_ordinates(params.days)
    if len(state.uh1_states) != len(uh1_ordinates) or len(state.uh2_states) != len(uh2_ordinates):
        msg = (
            f"initial_state buffers have lengths ({len(state.uh1_states)}, {len(state.uh2_states)}), "
            f"expected ({len(uh1_ordinates)}, {len(uh2_ordinates)}) for days={params.days}"
        )
        raise ValueError(msg)

    n_timesteps = len(forcing)
    state_arr = np.asarray(state)
    params_arr = np.asarray(params)
    outputs_arr = np.zeros((n_timesteps, _N_FLUXES), dtype=np.float64)

    if n_timesteps > 0:
        _run_numba(
            state_arr,
            params_arr,
            forcing.precip.astype(np.float64),
            forcing.pet.astype(np.float64),
            uh1_ordinates,
            uh2_ordinates,
            outputs_arr,
        )

    logger.debug(
        "GR4J run: %d timesteps, final stores S=%.3f R=%.3f",
        n_timesteps,
        state_arr[0],
        state_arr[1],
    )

    fluxes = GR4JFluxes(**{name: outputs_arr[:, i] for i, name in enumerate(FLUX_NAMES)})

    return ModelOutput(time=forcing.time, fluxes=fluxes)
