"""
Liftoff Flight Replay - CLI

Single entry point for conditioning a telemetry file, running the replay and
dynamics simulations, exporting logs and generating plots.
"""

import argparse
import logging
import os
import sys
from dataclasses import replace

from .config import create_default_config
from .main import run_mission

logger = logging.getLogger(__name__)

DEFAULT_TELEMETRY = "telemetry.jsonl"


def parse_args(argv=None):
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="liftoff-sim",
        description="Telemetry flight replay and rocket dynamics simulation",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "--telemetry", "-t",
        type=str,
        default=DEFAULT_TELEMETRY,
        help="JSON-lines telemetry file (time s, velocity m/s, altitude km)"
    )
    parser.add_argument(
        "--output-dir", "-o",
        type=str,
        default="plots",
        help="Directory to save output plots and CSV logs"
    )
    parser.add_argument(
        "--dt",
        type=float,
        default=None,
        help="Simulation time step in seconds"
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Dynamics simulation duration in seconds"
    )
    parser.add_argument(
        "--csv",
        action="store_true",
        help="Export replay and dynamics logs as CSV"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress verbose output"
    )
    parser.add_argument(
        "--no-plots",
        action="store_true",
        help="Skip plot generation"
    )
    return parser.parse_args(argv)


def main(argv=None):
    """Main execution flow."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING if args.quiet else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    config = create_default_config()
    overrides = {'verbose': not args.quiet}
    if args.dt is not None:
        overrides['dt'] = args.dt
    if args.duration is not None:
        overrides['dynamics_duration'] = args.duration
    config = replace(config, **overrides)

    print(f"\n{'='*70}\nLIFTOFF FLIGHT REPLAY\n{'='*70}\n")

    try:
        print(f">> Replaying telemetry from {args.telemetry}...")
        result = run_mission(args.telemetry, config)
        rocket = result.rocket
        events = result.conditioning.events

        print("\n" + "="*60)
        print("SIMULATION SUMMARY")
        print("="*60)
        print(f"Events: MECO {events.meco:.0f} s, SES {events.ses:.0f} s, "
              f"SECO {events.seco:.0f} s")
        print(f"Reconciliation: {result.conditioning.reconciliation.passes} passes, "
              f"break-even {result.conditioning.reconciliation.break_even:.0f} s")
        print(f"Final time: {rocket.t:.2f} s")
        print(f"Final altitude: {rocket.position[1]/1000:.2f} km")
        print(f"Final downrange: {rocket.position[0]/1000:.2f} km")
        print(f"Remaining propellant: {rocket.propellant_mass:.0f} kg")
        print("="*60 + "\n")

        if os.path.isabs(args.output_dir):
            out_dir = args.output_dir
        else:
            out_dir = os.path.join(os.getcwd(), args.output_dir)

        if args.csv:
            result.replay_log.to_csv(os.path.join(out_dir, 'replay_log.csv'))
            result.dynamics_log.to_csv(os.path.join(out_dir, 'dynamics_log.csv'))
            print(f">> CSV logs written to: {out_dir}")

        if not args.no_plots:
            from .plotting import generate_all_plots

            logger.info(f"Generating plots in {out_dir}")
            print(f">> Generating Plots in: {out_dir}")
            saved = generate_all_plots(result, out_dir)
            print(f"\nSUCCESS: {len(saved)} plots written to {out_dir}")

    except Exception as e:
        logger.error(f"Simulation failed: {e}", exc_info=True)
        print(f"\n[ERROR] Simulation failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
