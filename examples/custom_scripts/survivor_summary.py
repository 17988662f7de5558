"""Example custom callback: count surviving objects per type and event."""

from __future__ import annotations
__author__ = "Overlap Removal developers"

import json
from pathlib import Path


def process(events, context):
    """Write per-event survivor counts next to the decision table."""
    accessor = context["accessor"]
    summary = {
        event.event_id: {
            kind: sum(1 for obj in objects if accessor.is_surviving(obj))
            for kind, objects in event.collections().items()
        }
        for event in events
    }
    out_path = Path(context["output_path"]).with_name("survivors.json")
    out_path.write_text(json.dumps(summary, indent=2), encoding="utf-8")
    print(f"Survivor summary written to {out_path}")
