"""Command-line interface for running overlap removal on event inputs."""

from __future__ import annotations
__author__ = "Overlap Removal developers"

import argparse
import importlib.util
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any

from .decisions import DecisionAccessor
from .io import load_config_json, load_events_json, write_decisions_table
from .models import EventObjects, OverlapConfig, PhysicsObject, cone_fields
from .remover import OverlapRemovalTool

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Define and return the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="overlap-removal",
        description="Apply the recommended electron/muon/jet/tau/photon overlap removal to events.",
    )
    parser.add_argument("--events", required=True, help="Input JSON with key 'events'.")
    parser.add_argument(
        "--out",
        required=True,
        help="Output table file for per-object decisions (.parquet, .csv, .pkl).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Optional JSON file with overlap-removal settings; flags below override it.",
    )
    parser.add_argument(
        "--max-events",
        type=int,
        default=None,
        help="Process at most this many events.",
    )
    for name in cone_fields():
        parser.add_argument(
            "--" + name.replace("_", "-"),
            type=float,
            default=None,
            help=f"Cone size for the {name[:-3].replace('_', '-')} overlap.",
        )
    parser.add_argument(
        "--input-label",
        default=None,
        help="Per-object key flagging overlap-removal inputs (empty string: use all objects).",
    )
    parser.add_argument(
        "--output-label",
        default=None,
        help="Name of the decision column in the output table.",
    )
    parser.add_argument(
        "--scheme",
        choices=["pass", "overlap"],
        default=None,
        help="Write pass flags (True survives) or overlap flags (True removed).",
    )
    parser.add_argument(
        "--tau-electron-id",
        default=None,
        help="Electron ID working point required to veto taus (empty string: no requirement).",
    )
    parser.add_argument(
        "--muon-jet-max-tracks",
        type=int,
        default=None,
        help="Jets with at most this many tracks are removed in favour of overlapping muons.",
    )
    parser.add_argument(
        "--jet-track-min-pt",
        type=float,
        default=None,
        help="Minimum track pT used when counting jet tracks.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity; DEBUG dumps every object decision.",
    )
    parser.add_argument(
        "--custom-script",
        default=None,
        help="Path to Python file with process(events, context) function.",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> OverlapConfig:
    """Merge the optional JSON configuration with command-line overrides."""
    config = load_config_json(args.config) if args.config else OverlapConfig()
    overrides: dict[str, Any] = {}
    for name in (
        *cone_fields(),
        "input_label",
        "output_label",
        "scheme",
        "tau_electron_id",
        "muon_jet_max_tracks",
        "jet_track_min_pt",
    ):
        value = getattr(args, name)
        if value is not None:
            overrides[name] = value
    return replace(config, **overrides) if overrides else config


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint: load events, run overlap removal, write table, optional custom hook."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = config_from_args(args)
    events = load_events_json(args.events, input_label=config.input_label)
    if args.max_events is not None:
        events = events[: max(args.max_events, 0)]

    tool = OverlapRemovalTool(config=config)
    for event in events:
        logger.info("Processing event %s", event.event_id)
        sizes = {kind: len(objs) for kind, objs in event.collections().items()}
        logger.info("  %s", ", ".join(f"n{kind} {n}" for kind, n in sizes.items()))
        tool.remove_event_overlaps(event)
        dump_event(event, tool.accessor)

    write_decisions_table(args.out, events, config)
    logger.info("Wrote decisions for %d events to %s", len(events), args.out)

    if args.custom_script:
        run_custom_script(
            script_path=args.custom_script,
            events=events,
            context={
                "events_path": args.events,
                "config": config,
                "accessor": tool.accessor,
                "output_path": args.out,
            },
        )
    return 0


def dump_event(event: EventObjects, accessor: DecisionAccessor) -> None:
    """Log survivors per collection, and every object at DEBUG level."""
    for kind, objects in event.collections().items():
        n_surviving = sum(1 for obj in objects if accessor.is_surviving(obj))
        logger.info("  %s: %d of %d surviving", kind, n_surviving, len(objects))
        for obj in objects:
            logger.debug("    %s", _describe(obj, accessor))


def _describe(obj: PhysicsObject, accessor: DecisionAccessor) -> str:
    decision = accessor.decision(obj)
    return (
        f"{obj.kind:<8} pt {obj.pt:8.2f} eta {obj.eta:5.2f} phi {obj.phi:5.2f} "
        f"{accessor.scheme.value} {'-' if decision is None else int(decision)}"
    )


def run_custom_script(
    script_path: str, events: list[EventObjects], context: dict[str, Any]
) -> None:
    """Execute user-supplied post-processing callback `process(events, context)`."""
    module = _load_module(script_path)
    process = getattr(module, "process", None)
    if process is None or not callable(process):
        raise ValueError(
            f"Custom script {script_path} must define callable process(events, context)."
        )
    process(events, context)


def _load_module(script_path: str):
    """Import a Python module from an arbitrary file path."""
    path = Path(script_path)
    spec = importlib.util.spec_from_file_location(path.stem, path)
    if spec is None or spec.loader is None:
        raise ValueError(f"Cannot import custom script: {script_path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


if __name__ == "__main__":
    raise SystemExit(main())
