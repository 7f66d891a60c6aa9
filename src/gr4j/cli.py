"""Command line interface for GR4J."""

from __future__ import annotations

import argparse
import logging

from .io import load_forcing, load_parameters, save_flow
from .model.run import run

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    ap = argparse.ArgumentParser(prog="gr4j", description="Run the GR4J rainfall-runoff model.")
    ap.add_argument("--forcing", required=True, help="CSV file with date, rainfall and pet columns.")
    ap.add_argument("--parameters", required=True, help="JSON file with the model parameters.")
    ap.add_argument("--output", required=True, help="CSV file to write simulated flow to.")
    ap.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return ap.parse_args(argv)


def setup_logging(level: str) -> None:
    """Configure root logging for command-line use."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def main(argv: list[str] | None = None) -> int:
    """Run the model from files and return a process exit code."""
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        params = load_parameters(args.parameters)
        forcing = load_forcing(args.forcing)
    except (OSError, ValueError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2

    logger.info("Running GR4J over %d days", len(forcing))
    result = run(params, forcing)
    try:
        save_flow(result.time, result.streamflow, args.output)
    except OSError as exc:
        logger.error("Could not write %s: %s", args.output, exc)
        return 1
    logger.info("Wrote simulated flow to %s", args.output)

    return 0
