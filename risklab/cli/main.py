"""Command-line front end for the risk simulations (`risklab`).

Subcommands:

- ``scenario``: print or export a synthetic price path
- ``stops``: race the trailing stop methods over a scenario
- ``sizing``: run the position sizing ruin comparison
- ``atr``: ATR stop placement and position size for one trade

Parameters come from the environment (see ``risklab.config``), optionally
overridden by a YAML preset file (``--params``), then by explicit flags.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from dataclasses import fields, replace
from pathlib import Path
from typing import Any

import pandas as pd
import yaml

from risklab import __version__
from risklab.config import get_config
from risklab.engine.atr_stop import ATR_PRESETS, calculate_atr_stop
from risklab.engine.outcomes import generate_outcome_sequence, parse_outcomes
from risklab.engine.position_sizing import (
    SimulationConfig,
    run_position_sizing_comparison,
)
from risklab.engine.trailing_stop import (
    TrailingStopParams,
    history_to_frame,
    run_trailing_stop_comparison,
)
from risklab.logging_setup import get_logger, reset_logging, setup_logging
from risklab.reports.metrics import (
    summarize_stop_results,
    summarize_trader_paths,
    trader_paths_to_frame,
)
from risklab.scenarios.generator import (
    SCENARIO_DETAILS,
    ScenarioType,
    generate_scenario,
    scenario_to_frame,
)

logger = get_logger("cli.main")

FORMAT_TEXT = "text"
FORMAT_JSON = "json"
FORMAT_CSV = "csv"


def load_params(path: Path | None) -> dict[str, Any]:
    """Load a YAML parameter preset.

    The file may hold ``stops``, ``sizing`` and ``scenario`` sections; each
    maps parameter names to values.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the document is not a mapping.
    """
    if path is None:
        return {}
    if not path.exists():
        raise FileNotFoundError(f"Parameter file not found: {path}")

    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Parameter file must contain a mapping: {path}")
    return data


def _section(params: dict[str, Any], name: str) -> dict[str, Any]:
    """One preset section; an empty ``name:`` entry counts as no overrides.

    Raises:
        ValueError: If the section is not a mapping.
    """
    section = params.get(name) or {}
    if not isinstance(section, dict):
        raise ValueError(f"Preset section '{name}' must be a mapping, got {section!r}")
    return section


def _scenario_length(args: argparse.Namespace, params: dict[str, Any]) -> int | None:
    """Scenario length from the flag, else the preset, else None for the default."""
    if args.length is not None:
        return args.length
    value = _section(params, "scenario").get("length")
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"scenario.length must be an integer, got {value!r}") from e


def _pop_number(section: dict[str, Any], key: str, default: Any, cast: type) -> Any:
    """Remove ``key`` from a preset section and convert it, else ``default``."""
    value = section.pop(key, None)
    if value is None:
        return default
    try:
        return cast(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Parameter '{key}' must be a number, got {value!r}") from e


def _apply_overrides(base: Any, section: dict[str, Any], flags: dict[str, Any]) -> Any:
    """Overlay YAML values then non-None flag values onto a dataclass."""
    names = {f.name for f in fields(base)}
    updates: dict[str, Any] = {}
    for key, value in section.items():
        if key in names:
            try:
                updates[key] = float(value)
            except (TypeError, ValueError) as e:
                raise ValueError(f"Parameter '{key}' must be a number, got {value!r}") from e
        else:
            logger.warning(f"Ignoring unknown parameter '{key}'")
    for key, value in flags.items():
        if value is not None:
            updates[key] = value
    return replace(base, **updates)


def _symbol(emoji: str, fallback: str, use_emoji: bool) -> str:
    """``emoji`` when enabled and stdout can encode it, else ``fallback``."""
    if not use_emoji:
        return fallback
    try:
        emoji.encode(sys.stdout.encoding or "utf-8")
    except (UnicodeEncodeError, LookupError):
        return fallback
    return emoji


def _emit(output: str, out: str | None, use_emoji: bool) -> None:
    if out:
        output_path = Path(out)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(output, encoding="utf-8")
        print(_symbol("📊 Output written to:", "[OUT] Output written to:", use_emoji) + f" {output_path}")
    else:
        print(output)


def _frame_csv(frame: pd.DataFrame) -> str:
    return frame.to_csv()


def cmd_scenario(args: argparse.Namespace) -> int:
    """Print a scenario price path."""
    params = load_params(Path(args.params) if args.params else None)
    length = _scenario_length(args, params)

    path = generate_scenario(args.scenario, length=length)
    frame = scenario_to_frame(path)

    if args.format == FORMAT_JSON:
        output = frame.reset_index().to_json(orient="records", indent=2)
    elif args.format == FORMAT_CSV:
        output = _frame_csv(frame)
    else:
        details = SCENARIO_DETAILS[ScenarioType(args.scenario)]
        output = f"{details['label']}: {details['description']}\n{frame.to_string()}"

    _emit(output, args.out, not args.no_emoji)
    return 0


def format_stops_text(summary: dict[str, Any], scenario: ScenarioType, use_emoji: bool) -> str:
    """Render a stop race summary as a table."""
    details = SCENARIO_DETAILS[scenario]
    lines = [
        f"Trailing Stop Race: {details['label']}",
        details["insight"],
        "",
        f"{'Method':<10} {'Status':<8} {'Exit':>6} {'Profit':>9} {'Capture':>8}  Grade",
    ]
    for method, row in summary["methods"].items():
        status = "EXITED" if row["exited"] else "ACTIVE"
        exit_index = str(row["exit_index"]) if row["exited"] else "-"
        marker = ""
        if method == summary["leader"]:
            marker = " " + _symbol("🏆", "*", use_emoji)
        lines.append(
            f"{method:<10} {status:<8} {exit_index:>6} {row['profit']:>9.2f} "
            f"{row['capture_ratio']:>8.2f}  {row['grade']}{marker}"
        )
    return "\n".join(lines)


def cmd_stops(args: argparse.Namespace) -> int:
    """Race the trailing stops over a scenario."""
    params = load_params(Path(args.params) if args.params else None)
    stop_params = _apply_overrides(
        TrailingStopParams.from_config(),
        _section(params, "stops"),
        {
            "fixed_distance": args.fixed_distance,
            "atr_multiplier": args.atr_multiplier,
            "technical_buffer": args.technical_buffer,
        },
    )
    length = _scenario_length(args, params)

    scenario = ScenarioType(args.scenario)
    path = generate_scenario(scenario, length=length)
    results = run_trailing_stop_comparison(path, stop_params, completed=not args.running)
    summary = summarize_stop_results(results)

    if args.format == FORMAT_JSON:
        output = json.dumps({"scenario": scenario.value, **summary}, indent=2)
    elif args.format == FORMAT_CSV:
        frame = scenario_to_frame(path).join(history_to_frame(results).add_prefix("stop_"))
        output = _frame_csv(frame)
    else:
        output = format_stops_text(summary, scenario, not args.no_emoji)

    _emit(output, args.out, not args.no_emoji)
    return 0


def format_sizing_text(summary: dict[str, Any], use_emoji: bool) -> str:
    """Render a sizing comparison summary as a table."""
    lines = [
        f"Position Sizing Ruin Test: {summary['total_trades']} trades, "
        f"{summary['wins']} wins",
        "",
        f"{'Trader':<13} {'Final':>12} {'Return %':>10} {'Max DD %':>9}  Status",
    ]
    for policy, row in summary["traders"].items():
        if row["ruined"]:
            status = _symbol("💀 RUINED", "RUINED", use_emoji) + f" at trade {row['ruined_at']}"
        else:
            status = "ALIVE"
        lines.append(
            f"{policy:<13} {row['final_balance']:>12.2f} {row['total_return_pct']:>10.2f} "
            f"{row['max_drawdown_pct']:>9.2f}  {status}"
        )
    return "\n".join(lines)


def cmd_sizing(args: argparse.Namespace) -> int:
    """Run the position sizing comparison."""
    config = get_config()
    params = load_params(Path(args.params) if args.params else None)
    section = dict(_section(params, "sizing"))

    win_rate = _pop_number(section, "win_rate", config.sizing.win_rate, float)
    total_trades = _pop_number(section, "total_trades", config.sizing.total_trades, int)
    if args.win_rate is not None:
        win_rate = args.win_rate
    if args.trades is not None:
        total_trades = args.trades
    seed = args.seed if args.seed is not None else config.random_seed

    sim_config = _apply_overrides(
        SimulationConfig.from_config(),
        section,
        {
            "initial_balance": args.initial_balance,
            "reward_ratio": args.reward_ratio,
        },
    )

    if args.outcomes:
        outcomes = parse_outcomes(args.outcomes.split(","))
    else:
        outcomes = generate_outcome_sequence(win_rate, total_trades, seed=seed)
    paths = run_position_sizing_comparison(outcomes, sim_config)
    summary = summarize_trader_paths(paths)

    if args.format == FORMAT_JSON:
        output = json.dumps({"win_rate": win_rate, "seed": seed, **summary}, indent=2)
    elif args.format == FORMAT_CSV:
        output = _frame_csv(trader_paths_to_frame(paths))
    else:
        output = format_sizing_text(summary, not args.no_emoji)

    _emit(output, args.out, not args.no_emoji)
    return 0


def cmd_atr(args: argparse.Namespace) -> int:
    """Calculate an ATR stop for one trade."""
    entry_price = args.entry
    atr = args.atr
    asset_type = args.asset

    if args.preset:
        matches = [p for p in ATR_PRESETS if p.label.lower() == args.preset.lower()]
        if not matches:
            labels = ", ".join(p.label for p in ATR_PRESETS)
            logger.error(f"Unknown preset '{args.preset}'. Available: {labels}")
            return 1
        preset = matches[0]
        entry_price = preset.entry_price if entry_price is None else entry_price
        atr = preset.atr if atr is None else atr
        asset_type = preset.asset_type.value

    if entry_price is None or atr is None:
        logger.error("Both --entry and --atr are required without --preset")
        return 1

    result = calculate_atr_stop(
        entry_price=entry_price,
        atr=atr,
        multiplier=args.multiplier,
        direction=args.direction,
        account_size=args.account,
        risk_percent=args.risk_pct,
        asset_type=asset_type,
    )

    payload = {
        "stop_distance": result.stop_distance,
        "stop_price": result.stop_price,
        "risk_amount": result.risk_amount,
        "position_size": result.position_size,
        "leverage": result.leverage,
        "is_safe": result.is_safe,
        "volatility_zone": result.volatility_zone.value,
    }

    if args.format == FORMAT_JSON:
        output = json.dumps(payload, indent=2)
    else:
        safety = _symbol("✅ safe", "safe", not args.no_emoji) if result.is_safe else _symbol(
            "⚠️ inside noise", "WARNING: inside noise", not args.no_emoji
        )
        output = "\n".join(
            [
                f"Stop price:     {result.stop_price:.5g} ({result.stop_distance:.5g} away, {safety})",
                f"Risk amount:    {result.risk_amount:.2f}",
                f"Position size:  {result.position_size:.4f} units",
                f"Leverage:       {result.leverage:.2f}x",
                f"Volatility:     {result.volatility_zone.value}",
            ]
        )

    _emit(output, args.out, not args.no_emoji)
    return 0


def _add_output_args(parser: argparse.ArgumentParser, formats: list[str]) -> None:
    parser.add_argument(
        "--format",
        type=str,
        choices=formats,
        default=FORMAT_TEXT,
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--out",
        type=str,
        default=None,
        metavar="PATH",
        help="Write output to file instead of stdout",
    )
    parser.add_argument(
        "--no-emoji",
        action="store_true",
        help="Disable emoji in output (useful for Windows/CI)",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="risklab",
        description="Risk management simulations for trading lessons",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level (default: LOG_LEVEL env or INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    scenarios = [s.value for s in ScenarioType]

    # Scenario command
    scenario_parser = subparsers.add_parser("scenario", help="Print a synthetic price path")
    scenario_parser.add_argument("--scenario", choices=scenarios, default="strong_trend")
    scenario_parser.add_argument("--length", type=int, default=None, metavar="N")
    scenario_parser.add_argument("--params", type=str, default=None, metavar="YAML")
    _add_output_args(scenario_parser, [FORMAT_TEXT, FORMAT_JSON, FORMAT_CSV])

    # Stops command
    stops_parser = subparsers.add_parser("stops", help="Race the trailing stop methods")
    stops_parser.add_argument("--scenario", choices=scenarios, default="strong_trend")
    stops_parser.add_argument("--length", type=int, default=None, metavar="N")
    stops_parser.add_argument("--fixed-distance", type=float, default=None)
    stops_parser.add_argument("--atr-multiplier", type=float, default=None)
    stops_parser.add_argument("--technical-buffer", type=float, default=None)
    stops_parser.add_argument(
        "--running",
        action="store_true",
        help="Grade open trades provisionally instead of as In Progress",
    )
    stops_parser.add_argument("--params", type=str, default=None, metavar="YAML")
    _add_output_args(stops_parser, [FORMAT_TEXT, FORMAT_JSON, FORMAT_CSV])

    # Sizing command
    sizing_parser = subparsers.add_parser("sizing", help="Run the position sizing ruin test")
    sizing_parser.add_argument("--win-rate", type=float, default=None)
    sizing_parser.add_argument("--trades", type=int, default=None, metavar="N")
    sizing_parser.add_argument("--initial-balance", type=float, default=None)
    sizing_parser.add_argument("--reward-ratio", type=float, default=None)
    sizing_parser.add_argument("--seed", type=int, default=None)
    sizing_parser.add_argument(
        "--outcomes",
        type=str,
        default=None,
        metavar="W,L,...",
        help="Replay a fixed win/loss sequence instead of drawing one",
    )
    sizing_parser.add_argument("--params", type=str, default=None, metavar="YAML")
    _add_output_args(sizing_parser, [FORMAT_TEXT, FORMAT_JSON, FORMAT_CSV])

    # ATR command
    atr_parser = subparsers.add_parser("atr", help="ATR stop placement and position size")
    atr_parser.add_argument("--entry", type=float, default=None)
    atr_parser.add_argument("--atr", type=float, default=None)
    atr_parser.add_argument("--multiplier", type=float, default=2.0)
    atr_parser.add_argument("--direction", choices=["long", "short"], default="long")
    atr_parser.add_argument("--account", type=float, default=10000.0)
    atr_parser.add_argument("--risk-pct", type=float, default=1.0)
    atr_parser.add_argument("--asset", choices=["forex", "crypto", "stock"], default="stock")
    atr_parser.add_argument("--preset", type=str, default=None, help="Preset label, e.g. 'Crypto (BTC)'")
    _add_output_args(atr_parser, [FORMAT_TEXT, FORMAT_JSON])

    return parser


COMMANDS = {
    "scenario": cmd_scenario,
    "stops": cmd_stops,
    "sizing": cmd_sizing,
    "atr": cmd_atr,
}


def run(argv: list[str] | None = None) -> int:
    """Parse arguments and run a command. Returns the exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        reset_logging()
        setup_logging(level=args.log_level)

    command = COMMANDS.get(args.command)
    if command is None:
        parser.print_help()
        return 1

    try:
        return command(args)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


def main() -> None:
    """Main entry point for the risklab CLI."""
    if os.name == "nt" and hasattr(sys.stdout, "reconfigure"):
        # cmd.exe defaults to a legacy code page
        sys.stdout.reconfigure(encoding="utf-8")
    sys.exit(run())


if __name__ == "__main__":
    main()
