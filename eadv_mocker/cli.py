"""Command line entry points for the EADV mocker."""

from __future__ import annotations

import argparse
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any

import structlog

from eadv_mocker.foundation import RuleContract, Ruleblock, extract_dependencies
from eadv_mocker.mocker import generate_mock_data
from eadv_mocker.observability import configure_logging
from eadv_mocker.pandas import mock_data_to_dataframes
from eadv_mocker.synthetic.dates import DateDistribution, DateFormat
from eadv_mocker.synthetic.generator import DateRange, MockerOptions
from eadv_mocker.synthetic.scenarios import SCENARIOS, get_scenario

logger = structlog.get_logger(__name__)


MAX_INPUT_BYTES = 25 * 1024 * 1024  # 25 MiB cap to avoid accidental OOM


def _load_ruleblocks(path: Path) -> list[Ruleblock]:
    resolved = path.resolve()
    size = resolved.stat().st_size
    if size > MAX_INPUT_BYTES:
        raise ValueError(
            f"Input file {resolved} is {size} bytes; exceeds limit of {MAX_INPUT_BYTES} bytes"
        )
    with path.open("r", encoding="utf-8") as fh:
        payload = json.load(fh)
    # Accept either a bare list or {"ruleblocks": [...]}
    if isinstance(payload, dict):
        payload = payload.get("ruleblocks", [])
    if not isinstance(payload, list):
        raise ValueError("Expected a list of ruleblocks in the input file")
    return RuleContract().validate_ruleblocks(payload)


def _resolve_output_path(path: Path) -> Path:
    output_path = path.resolve()
    cwd = Path.cwd().resolve()
    try:
        output_path.relative_to(cwd)
    except ValueError:
        raise ValueError(
            f"Output path {output_path} must reside within the current working directory"
        )
    return output_path


def _build_options(args: argparse.Namespace) -> MockerOptions:
    base = get_scenario(args.scenario) if args.scenario else MockerOptions()

    overrides: dict[str, Any] = {}
    if args.entities is not None:
        overrides["entity_count"] = args.entities
    if args.entity_id_start is not None:
        overrides["entity_id_start"] = args.entity_id_start
    if args.observations is not None:
        overrides["observations_per_entity"] = args.observations
    if args.date_format is not None:
        overrides["date_format"] = DateFormat(args.date_format)
    if args.distribution is not None:
        overrides["date_distribution"] = DateDistribution(args.distribution)
    if args.seed is not None:
        overrides["seed"] = args.seed
    if args.no_bind_tables:
        overrides["include_mock_bind_tables"] = False
    if args.start or args.end:
        if not (args.start and args.end):
            raise ValueError("--start and --end must be given together")
        overrides["date_range"] = DateRange(start=args.start, end=args.end)

    return replace(base, **overrides) if overrides else base


def generate_mock_data_cli(argv: list[str] | None = None) -> int:
    """Generate mock EADV and rout tables from a JSON file of parsed ruleblocks.

    Writes the result as JSON (stdout or ``--output``) and optionally one CSV
    per table into ``--csv-dir``.

    Args:
        argv: Command line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    parser = argparse.ArgumentParser(
        description="Generate mock EADV data from parsed ruleblocks"
    )
    parser.add_argument(
        "input", type=Path, help="Path to JSON file with parsed ruleblocks"
    )
    parser.add_argument(
        "--scenario",
        choices=sorted(SCENARIOS),
        help="Start from a preset scenario; other flags override its fields.",
    )
    parser.add_argument("--entities", type=int, help="Number of entities (default: 3)")
    parser.add_argument(
        "--entity-id-start", type=int, help="First entity id (default: 1001)"
    )
    parser.add_argument(
        "--observations",
        type=int,
        help="Observations per entity per attribute (default: 3)",
    )
    parser.add_argument("--start", type=str, help="Window start (ISO format)")
    parser.add_argument("--end", type=str, help="Window end (ISO format)")
    parser.add_argument(
        "--date-format",
        choices=[item.value for item in DateFormat],
        help="Date output format (default: iso)",
    )
    parser.add_argument(
        "--distribution",
        choices=[item.value for item in DateDistribution],
        help="Date distribution mode (default: uniform)",
    )
    parser.add_argument(
        "--seed", type=int, help="Random seed; omit for a time-based seed"
    )
    parser.add_argument(
        "--no-bind-tables",
        action="store_true",
        help="Skip generating rout_* tables for bind dependencies.",
    )
    parser.add_argument(
        "--output", type=Path, help="Optional path for writing the result as JSON."
    )
    parser.add_argument(
        "--csv-dir",
        type=Path,
        help="Optional directory for writing one CSV file per table.",
    )
    parser.add_argument("--log-level", type=str, help="Log level (default: INFO)")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    logger.info("loading_ruleblocks", path=str(args.input))
    ruleblocks = _load_ruleblocks(args.input)
    if not ruleblocks:
        logger.error("no_ruleblocks_found", path=str(args.input))
        return 1

    options = _build_options(args)
    result = generate_mock_data(ruleblocks, options)
    logger.info(
        "mock_data_generated",
        ruleblocks=len(ruleblocks),
        entities=len(result.metadata.entities),
        total_rows=result.metadata.total_rows,
        rout_tables=len(result.rout_tables),
        seed=result.metadata.seed,
    )

    payload = result.as_dict()
    if args.output:
        output_path = _resolve_output_path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with output_path.open("w", encoding="utf-8") as fh:
            json.dump(payload, fh, indent=2)
        logger.info("result_written", path=str(output_path))
    elif not args.csv_dir:  # stdout fallback enables piping in shell usage.
        json.dump(payload, fp=sys.stdout, indent=2)
        print()

    if args.csv_dir:
        csv_dir = _resolve_output_path(args.csv_dir)
        csv_dir.mkdir(parents=True, exist_ok=True)
        for table, frame in mock_data_to_dataframes(result).items():
            frame.to_csv(csv_dir / f"{table}.csv", index=False)
        logger.info("csv_tables_written", directory=str(csv_dir))

    return 0


def extract_dependencies_cli(argv: list[str] | None = None) -> int:
    """Print the EADV attributes and rout_* bindings required by ruleblocks."""

    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "input", type=Path, help="Path to JSON file with parsed ruleblocks"
    )
    args = parser.parse_args(argv)
    configure_logging()

    deps = extract_dependencies(_load_ruleblocks(args.input))
    json.dump(
        {
            "attributes": list(deps.eadv_attributes),
            "bind_dependencies": {
                table: list(variables)
                for table, variables in deps.bind_dependencies.items()
            },
        },
        fp=sys.stdout,
        indent=2,
    )
    print()
    return 0


def main() -> None:  # pragma: no cover - thin wrapper
    sys.exit(generate_mock_data_cli())


def deps_main() -> None:  # pragma: no cover - thin wrapper
    sys.exit(extract_dependencies_cli())


if __name__ == "__main__":  # pragma: no cover
    main()
