"""Unit hydrograph routing stage.

Spreads each day's production store output over the following days through
UH1 and UH2, feeds the slow share into the routing store and combines it
with the fast, exchange-adjusted share into streamflow.
"""

from __future__ import annotations

import logging

import numpy as np

from .constants import B
from .processes import direct_branch
from .stores import RoutingStore
from .unit_hydrographs import compute_uh_ordinates, convolve_uh

logger = logging.getLogger(__name__)


class UnitHydrographRouting:
    """Convolution buffers of UH1 and UH2 plus the routing store they feed.

    Args:
        days: Unit hydrograph time base X4 [days].
        exchange_coefficient: Groundwater exchange coefficient X2 [mm/day].
        store_capacity: Routing store capacity X3 [mm].
        store_content: Initial routing store level [mm].
    """

    def __init__(
        self,
        days: float,
        exchange_coefficient: float,
        store_capacity: float,
        store_content: float,
    ) -> None:
        self.store = RoutingStore(
            capacity=store_capacity,
            water_content=store_content,
            gw_exchange_coefficient=exchange_coefficient,
        )
        self.uh1_ordinates, self.uh2_ordinates = compute_uh_ordinates(days)
        self.uh1_states = np.zeros_like(self.uh1_ordinates)
        self.uh2_states = np.zeros_like(self.uh2_ordinates)

        logger.debug("UH1 ordinates for days=%.3f: %s", days, self.uh1_ordinates)
        logger.debug("UH2 ordinates for days=%.3f: %s", days, self.uh2_ordinates)

    def step(self, to_routing: float) -> float:
        """Route one day of production store output and return streamflow [mm/day]."""
        self.uh1_states, uh1_output = convolve_uh(self.uh1_states, to_routing, self.uh1_ordinates)
        self.uh2_states, uh2_output = convolve_uh(self.uh2_states, to_routing, self.uh2_ordinates)

        qr, exchange = self.store.step(B * uh1_output)
        qd = direct_branch((1.0 - B) * uh2_output, exchange)

        return qr + qd
