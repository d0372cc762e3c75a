"""Unified CLI entrypoint.

Two run modes:
  1) demo: one headless run on the default simulated traffic picture
  2) scenario: one or more JSON scenarios (headless, produces CSV + plots)
"""

from __future__ import annotations

import argparse
from pathlib import Path


def _cmd_demo(args: argparse.Namespace) -> None:
    from sim.run_demo import main as demo_main

    demo_argv = ["--duration-s", str(args.duration_s), "--out-dir", args.out_dir, "--run-name", args.run_name]
    if args.no_plots:
        demo_argv.append("--no-plots")
    if args.verbose:
        demo_argv.append("--verbose")
    demo_main(demo_argv)


def _cmd_scenario(args: argparse.Namespace) -> None:
    from sim.scenario_runner import run_scenarios

    scenarios = [Path(p) for p in (args.scenario or [])]
    if not scenarios:
        raise SystemExit("No scenarios provided. Use --scenario path.json (repeatable).")

    run_scenarios(
        scenarios,
        run_root=Path(args.run_root),
        save_figs=not args.no_plots,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="traffic-alert", description="Traffic alert runner")
    sub = parser.add_subparsers(dest="cmd", required=True)

    demo = sub.add_parser("demo", help="Run the simulated traffic demo (headless)")
    demo.add_argument("--duration-s", type=float, default=60.0)
    demo.add_argument("--out-dir", type=str, default="out")
    demo.add_argument("--run-name", type=str, default="demo")
    demo.add_argument("--no-plots", action="store_true", help="Skip saving plot PNGs")
    demo.add_argument("--verbose", action="store_true", help="Print transitions and callouts")
    demo.set_defaults(func=_cmd_demo)

    scen = sub.add_parser("scenario", help="Run one or more JSON scenarios (headless)")
    scen.add_argument("--scenario", action="append", help="Path to a scenario JSON file (repeatable)")
    scen.add_argument("--run-root", type=str, default="runs", help="Root folder for scenario outputs")
    scen.add_argument("--no-plots", action="store_true", help="Skip saving plot PNGs")
    scen.set_defaults(func=_cmd_scenario)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
