"""Command-line interface for railflow."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from time import perf_counter
from typing import Any, List, Optional, Tuple

from railflow.analysis.context import AnalysisContext, analyze
from railflow.lib.nx import connected_groups
from railflow.loader import load_network_file
from railflow.logging import get_logger, set_global_log_level, verbosity_level
from railflow.model.network import ServiceClass

logger = get_logger(__name__)


def _format_table(
    headers: List[str],
    rows: List[List[Any]],
    min_width: int = 8,
) -> str:
    """Format data as a simple ASCII table.

    Args:
        headers: Column headers
        rows: Data rows
        min_width: Minimum column width

    Returns:
        Formatted table string, empty when there are no rows
    """
    if not rows:
        return ""

    all_data = [[str(h) for h in headers]]
    all_data += [[str(item) for item in row] for row in rows]
    col_widths = [
        max(max(len(row[col]) for row in all_data), min_width)
        for col in range(len(headers))
    ]

    def format_row(row_data: List[str]) -> str:
        return "   " + " | ".join(
            f"{item:<{col_widths[i]}}" for i, item in enumerate(row_data)
        )

    lines = [format_row(all_data[0])]
    lines.append("   " + "-+-".join("-" * width for width in col_widths))
    lines.extend(format_row(row) for row in all_data[1:])
    return "\n".join(lines)


def _format_duration(seconds: float) -> str:
    """Return a concise human-readable duration string.

    Examples:
        0.123 -> "123.0 ms"; 1.234 -> "1.23 s".
    """
    if seconds < 1.0:
        return f"{seconds * 1000.0:.1f} ms"
    return f"{seconds:.2f} s"


def _parse_segment(value: str) -> Tuple[str, str]:
    """Parse ``"Station A:Station B"`` into a pair of station names."""
    source, sep, target = value.partition(":")
    if not sep or not source or not target:
        raise argparse.ArgumentTypeError(
            f"Segment must be given as 'SOURCE:TARGET', got '{value}'"
        )
    return source, target


def _inspect(ctx: AnalysisContext) -> None:
    network = ctx.network
    segments = list(network.segments())
    print("Network:")
    print(f"   stations: {network.station_count}")
    print(f"   segments: {len(segments)}")
    for service in ServiceClass:
        same = [s for s in segments if s.service is service]
        print(
            f"   {service.value.lower()}: {len(same)} segments,"
            f" {sum(s.capacity for s in same)} capacity"
        )
    groups = connected_groups(network)
    print(f"   connected groups: {len(groups)}")
    rows = [
        [
            station.id,
            station.name,
            len(station.links),
            network.max_possible_flow(station),
        ]
        for station in sorted(network.stations.values(), key=lambda s: s.id)
    ]
    print(_format_table(["ID", "Station", "Segments", "Capacity"], rows))


def _run_command(args: argparse.Namespace) -> None:
    network = load_network_file(args.network)
    ctx = analyze(network)
    started = perf_counter()

    if args.command == "inspect":
        _inspect(ctx)
    elif args.command == "max-flow":
        flow = ctx.max_flow(args.source, args.target)
        print(f"Max trains between {args.source} and {args.target}: {flow}")
    elif args.command == "cost":
        result = ctx.max_flow_cost(args.source, args.target)
        print(
            f"Max trains between {args.source} and {args.target}: {result.flow}"
            f" (cost {result.cost})"
        )
    elif args.command == "network-max":
        flow, pairs = ctx.max_flow_pair_names()
        print(f"Max network flow: {flow}")
        print(_format_table(["Source", "Target"], [list(p) for p in pairs]))
    elif args.command == "inflow":
        flow = ctx.max_inflow(args.station)
        print(f"Max trains arriving at {args.station}: {flow}")
    elif args.command == "budget":
        ranked = ctx.top_regions(args.by, args.k)
        print(_format_table([args.by.capitalize(), "Capacity"], ranked))
    elif args.command == "affected":
        source, target = args.segment
        affected = ctx.rank_affected_by_segment(source, target, args.k)
        if not affected:
            print(f"No station loses capacity without {source} - {target}")
        rows = [
            [network.stations[a.station_id].name, a.before, a.after, a.drop]
            for a in affected
        ]
        print(_format_table(["Station", "Before", "After", "Drop"], rows))
    elif args.command == "reduced":
        flow = ctx.reduced_max_flow(
            args.source,
            args.target,
            removed_stations=args.remove_station,
            removed_segments=args.remove_segment,
            disable_incident_segments=not args.keep_incident,
        )
        print(
            f"Max trains between {args.source} and {args.target}"
            f" in reduced network: {flow}"
        )

    logger.info(
        "%s finished in %s", args.command, _format_duration(perf_counter() - started)
    )


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``railflow`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="railflow",
        description="Capacity-planning queries over a railway network.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="COMMAND",
    )

    inspect_parser = subparsers.add_parser("inspect", help="Summarize a network")

    pair_parsers = []
    for name, help_text in (
        ("max-flow", "Max trains between two stations"),
        ("cost", "Max trains between two stations and their cost"),
        ("reduced", "Max trains between two stations in a reduced network"),
    ):
        pair_parser = subparsers.add_parser(name, help=help_text)
        pair_parsers.append(pair_parser)

    network_max_parser = subparsers.add_parser(
        "network-max", help="Station pairs that need the most trains"
    )
    inflow_parser = subparsers.add_parser(
        "inflow", help="Max trains arriving at a station"
    )
    budget_parser = subparsers.add_parser(
        "budget", help="Regions ranked by hosted capacity"
    )
    affected_parser = subparsers.add_parser(
        "affected", help="Stations most affected by a segment failure"
    )

    for p in (
        inspect_parser,
        network_max_parser,
        inflow_parser,
        budget_parser,
        affected_parser,
        *pair_parsers,
    ):
        p.add_argument("network", type=Path, help="Path to network YAML")

    for p in pair_parsers:
        p.add_argument("source", help="Source station name")
        p.add_argument("target", help="Target station name")

    reduced_parser = pair_parsers[2]
    reduced_parser.add_argument(
        "--remove-station",
        action="append",
        default=[],
        metavar="STATION",
        help="Station to take out (repeatable)",
    )
    reduced_parser.add_argument(
        "--remove-segment",
        action="append",
        default=[],
        type=_parse_segment,
        metavar="SOURCE:TARGET",
        help="Segment to take out (repeatable)",
    )
    reduced_parser.add_argument(
        "--keep-incident",
        action="store_true",
        help="Keep the segments of removed stations enabled",
    )

    inflow_parser.add_argument("station", help="Sink station name")

    budget_parser.add_argument(
        "--by",
        choices=["municipality", "district", "township"],
        default="municipality",
        help="Region attribute to rank (default: municipality)",
    )
    budget_parser.add_argument("-k", type=int, default=5, help="Number of regions")

    affected_parser.add_argument(
        "segment", type=_parse_segment, help="Failing segment as SOURCE:TARGET"
    )
    affected_parser.add_argument("-k", type=int, default=5, help="Number of stations")

    effective_args = sys.argv[1:] if argv is None else argv
    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    set_global_log_level(verbosity_level(args.verbose, args.quiet))
    logger.debug("Debug logging enabled")

    try:
        _run_command(args)
    except Exception as exc:
        message = exc.args[0] if isinstance(exc, KeyError) and exc.args else exc
        logger.error("%s failed: %s: %s", args.command, type(exc).__name__, message)
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
