"""GR4J numerical constants.

These are fixed values used throughout the GR4J model computations.
"""

# Routing split fraction
B: float = 0.9  # Fraction of effective rainfall routed through UH1 (slow branch)

# Unit hydrograph parameters
D: float = 2.5  # S-curve exponent

# Percolation scale relative to production store capacity (9/4)
PERC_SCALE: float = 2.25

# Exponent of the routing store filling ratio in the exchange term
EXCHANGE_EXPONENT: float = 3.5

# Model contract constants
PARAM_NAMES: tuple[str, ...] = (
    "production_store_capacity",
    "exchange_coefficient",
    "routing_store_capacity",
    "days",
    "production_store_content",
    "routing_store_content",
)
DEFAULT_BOUNDS: dict[str, tuple[float, float]] = {
    "production_store_capacity": (1.0, 2500.0),
    "exchange_coefficient": (-5.0, 5.0),
    "routing_store_capacity": (1.0, 1000.0),
    "days": (0.5, 10.0),
}
STATE_SCALARS: int = 2  # production_store, routing_store (UH buffers follow)
