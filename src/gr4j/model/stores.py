"""GR4J reservoirs as stateful objects.

Each store owns its water content and mutates it through its own methods.
The arithmetic lives in the compiled process functions so that the object
API and the array kernel share a single implementation.
"""

from __future__ import annotations

from dataclasses import dataclass

from .processes import (
    groundwater_exchange,
    percolation,
    production_store_evaporate,
    production_store_fill,
    routing_store_update,
)


@dataclass
class ProductionStore:
    """Soil moisture reservoir.

    Attributes:
        capacity: Maximum store level X1 [mm].
        water_content: Current store level S [mm].
    """

    capacity: float
    water_content: float

    def __post_init__(self) -> None:
        if not self.capacity > 0:
            msg = f"capacity must be positive, got {self.capacity}"
            raise ValueError(msg)

    def step(self, rainfall: float, pet: float) -> float:
        """Advance the store by one day.

        Args:
            rainfall: Daily rainfall [mm/day].
            pet: Daily potential evapotranspiration [mm/day].

        Returns:
            Water handed to routing: percolation plus net rainfall that
            did not infiltrate [mm/day].
        """
        direct_to_routing = 0.0

        if rainfall >= pet:
            net_rainfall = rainfall - pet
            direct_to_routing = net_rainfall - self.fill(net_rainfall)
        else:
            self.evaporate(pet - rainfall)

        return self.percolate() + direct_to_routing

    def fill(self, net_rainfall: float) -> float:
        """Infiltrate net rainfall and return the amount absorbed [mm]."""
        self.water_content, ps = production_store_fill(self.water_content, net_rainfall, self.capacity)
        return ps

    def evaporate(self, deficit: float) -> float:
        """Remove water to meet an evaporative deficit and return the amount lost [mm]."""
        self.water_content, er = production_store_evaporate(self.water_content, deficit, self.capacity)
        return er

    def percolate(self) -> float:
        """Drain percolation from the store and return it [mm]."""
        self.water_content, perc = percolation(self.water_content, self.capacity)
        return perc


@dataclass
class RoutingStore:
    """Groundwater routing reservoir with intercatchment exchange.

    Attributes:
        capacity: Reference store capacity X3 [mm].
        water_content: Current store level R [mm], never negative after a step.
        gw_exchange_coefficient: Exchange coefficient X2 [mm/day], any sign.
    """

    capacity: float
    water_content: float
    gw_exchange_coefficient: float

    def __post_init__(self) -> None:
        if not self.capacity > 0:
            msg = f"capacity must be positive, got {self.capacity}"
            raise ValueError(msg)

    def step(self, uh1_output: float) -> tuple[float, float]:
        """Route one day of slow-branch water through the store.

        Args:
            uh1_output: Slow branch input, already scaled by 0.9 [mm/day].

        Returns:
            Tuple of (qr, exchange): store outflow and groundwater exchange [mm/day].
        """
        exchange = groundwater_exchange(self.water_content, self.gw_exchange_coefficient, self.capacity)
        self.water_content, qr = routing_store_update(self.water_content, uh1_output, exchange, self.capacity)
        return qr, exchange
