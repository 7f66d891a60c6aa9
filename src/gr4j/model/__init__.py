"""GR4J model subpackage.

Public API for the GR4J hydrological model.
"""

from .constants import DEFAULT_BOUNDS, PARAM_NAMES
from .engine import GR4J
from .routing import UnitHydrographRouting
from .run import run, step
from .stores import ProductionStore, RoutingStore
from .types import Parameters, State
from .unit_hydrographs import compute_uh_ordinates, s_curve1, s_curve2

__all__ = [
    "DEFAULT_BOUNDS",
    "GR4J",
    "PARAM_NAMES",
    "Parameters",
    "ProductionStore",
    "RoutingStore",
    "State",
    "UnitHydrographRouting",
    "compute_uh_ordinates",
    "run",
    "s_curve1",
    "s_curve2",
    "step",
]
