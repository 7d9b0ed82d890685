"""Entry point for paddock package."""

import argparse
import logging


def main() -> None:
    """Run a simulated season through the roster economy."""
    parser = argparse.ArgumentParser(
        description="Paddock - fantasy F1 roster economy",
        prog="paddock",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for the race simulator (default: random)",
    )
    parser.add_argument(
        "--rosters",
        type=int,
        default=6,
        help="Number of simulated rosters at season start (default: 6)",
    )
    parser.add_argument(
        "--late-joiners",
        type=int,
        default=1,
        help="Rosters joining after round 4 (default: 1)",
    )
    parser.add_argument(
        "--rules",
        type=str,
        default="v6",
        help="Rule version preset: v3, v5 or v6 (default: v6)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        help="Logging level (default: WARNING)",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    from paddock.core.config import EconomyConfig
    from paddock.simulation import SeasonSimulator

    print("Paddock - Roster Economy Season Simulation")
    print("=" * 50)

    sim = SeasonSimulator(
        seed=args.seed,
        roster_count=args.rosters,
        late_joiners=args.late_joiners,
        config=EconomyConfig.for_version(args.rules),
    )
    report = sim.run()
    print(report)


if __name__ == "__main__":
    main()
