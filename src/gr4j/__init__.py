"""GR4J hydrological model.

A lumped conceptual rainfall-runoff model for daily streamflow simulation.
Génie Rural à 4 paramètres Journalier.
"""

from .inputs import ForcingData
from .io import load_forcing, load_parameters, save_flow
from .model import GR4J, Parameters, ProductionStore, RoutingStore, State, UnitHydrographRouting, run, step
from .outputs import GR4JFluxes, ModelOutput

__all__ = [
    "ForcingData",
    "GR4J",
    "GR4JFluxes",
    "ModelOutput",
    "Parameters",
    "ProductionStore",
    "RoutingStore",
    "State",
    "UnitHydrographRouting",
    "load_forcing",
    "load_parameters",
    "run",
    "save_flow",
    "step",
]
