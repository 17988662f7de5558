"""Multi-event API example: run overlap removal and print the survivors.

Run from repository root without installation:
    PYTHONPATH=src python examples/run_events_api.py
"""

from __future__ import annotations
__author__ = "Overlap Removal developers"

from pathlib import Path

from overlapremoval import OverlapConfig, OverlapRemovalTool
from overlapremoval.io import load_events_json, write_decisions_table


def main() -> int:
    """Load events, apply the recommended cascade, and write a parquet table."""
    config = OverlapConfig(muon_jet_dr=0.4, tau_electron_id="VeryLooseLH")
    events = load_events_json("examples/events.json", input_label=config.input_label)
    tool = OverlapRemovalTool(config)
    for summary, event in zip(tool.remove_overlaps_events(events), events, strict=True):
        print(f"Event {event.event_id}: removed {summary.total_rejected} objects {summary.rejected}")
        for kind, objects in event.collections().items():
            kept = [obj.object_id for obj in objects if tool.accessor.is_surviving(obj)]
            print(f"  {kind:<8} kept {kept}")
    out_path = Path("examples/decisions.parquet")
    write_decisions_table(out_path, events, config)
    print(f"Wrote decisions to {out_path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
