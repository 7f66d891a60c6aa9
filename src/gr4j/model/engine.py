"""Object-oriented GR4J simulation loop.

GR4J owns one production store and one routing stage built from a
Parameters bundle, and advances them one day at a time.
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import ArrayLike

from .routing import UnitHydrographRouting
from .stores import ProductionStore
from .types import Parameters, State

logger = logging.getLogger(__name__)


class GR4J:
    """Stateful GR4J model instance.

    Args:
        params: Model parameters, including the initial store contents.

    Example:
        >>> params = Parameters(300.0, 2.5, 70.0, 1.5, 180.0, 49.0)
        >>> model = GR4J(params)
        >>> model.run([14.1, 3.7], [0.46, 0.46])
        array([...])
    """

    def __init__(self, params: Parameters) -> None:
        self.params = params
        self.production_store = ProductionStore(
            capacity=params.production_store_capacity,
            water_content=params.production_store_content,
        )
        self.routing = UnitHydrographRouting(
            days=params.days,
            exchange_coefficient=params.exchange_coefficient,
            store_capacity=params.routing_store_capacity,
            store_content=params.routing_store_content,
        )

    @property
    def state(self) -> State:
        """Snapshot of the current stores and convolution buffers."""
        return State(
            production_store=self.production_store.water_content,
            routing_store=self.routing.store.water_content,
            uh1_states=self.routing.uh1_states.copy(),
            uh2_states=self.routing.uh2_states.copy(),
        )

    def step(self, rainfall: float, pet: float) -> float:
        """Advance the model by one day and return streamflow [mm/day]."""
        to_routing = self.production_store.step(rainfall, pet)
        return self.routing.step(to_routing)

    def run(self, rainfall: ArrayLike, pet: ArrayLike) -> np.ndarray:
        """Run the model over paired daily rainfall and PET series.

        Args:
            rainfall: Daily rainfall [mm/day].
            pet: Daily potential evapotranspiration [mm/day].

        Returns:
            Streamflow [mm/day], one value per input day in input order.

        Raises:
            ValueError: If the two series differ in length.
        """
        rainfall_arr = np.asarray(rainfall, dtype=np.float64)
        pet_arr = np.asarray(pet, dtype=np.float64)
        if len(rainfall_arr) != len(pet_arr):
            msg = f"rainfall length {len(rainfall_arr)} does not match pet length {len(pet_arr)}"
            raise ValueError(msg)

        simulated = np.zeros(len(rainfall_arr), dtype=np.float64)
        for idx in range(len(rainfall_arr)):
            simulated[idx] = self.step(float(rainfall_arr[idx]), float(pet_arr[idx]))

        logger.debug("Simulated %d timesteps", len(simulated))
        return simulated
