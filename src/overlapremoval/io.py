"""Input/output helpers for JSON event inputs and decision-table export."""

from __future__ import annotations
__author__ = "Overlap Removal developers"

import json
import logging
from dataclasses import fields
from pathlib import Path
from typing import Any, Iterable, Sequence

from .decisions import DecisionAccessor
from .models import (
    Electron,
    EventObjects,
    Jet,
    Muon,
    OverlapConfig,
    Photon,
    PhysicsObject,
    Tau,
    TrackLink,
)

logger = logging.getLogger(__name__)


def load_events_json(path: str | Path, input_label: str = "selected") -> list[EventObjects]:
    """Load multi-event input JSON into `EventObjects`.

    Expected shape:
    {
      "events": [
        {"event_id": "...", "electrons": [...], "muons": [...], "jets": [...],
         "taus": [...], "photons": [...],
         "loose_electrons": [...], "loose_muons": [...]},
        ...
      ]
    }

    `input_label` names the per-object key holding the input-eligibility flag
    (missing keys count as selected). Track ids are resolved to one shared
    `TrackLink` per event, so equal ids mean the same track.
    """
    data = _load_json(path)
    events_data = data.get("events")
    if not isinstance(events_data, list):
        raise ValueError("Events JSON must contain a list under key 'events'.")
    out = [
        parse_event(item=event, idx=idx, input_label=input_label)
        for idx, event in enumerate(events_data)
    ]
    logger.info("Loaded %d events from %s", len(out), path)
    return out


def parse_event(item: Any, idx: int = 0, input_label: str = "selected") -> EventObjects:
    """Parse one event dictionary into `EventObjects`."""
    if not isinstance(item, dict):
        raise ValueError(f"Event entry at index {idx} must be an object.")
    event_id = str(item.get("event_id", f"evt{idx}"))
    context = f"event '{event_id}'"
    tracks: dict[str, TrackLink] = {}

    def parse(key: str, factory, required: bool):
        raw = item.get(key)
        if raw is None:
            if required:
                raise ValueError(f"{context} must contain a list under key '{key}'.")
            return None
        if not isinstance(raw, list):
            raise ValueError(f"{context} key '{key}' must be a list.")
        return tuple(
            factory(obj, oidx, f"{context} {key}", input_label, tracks)
            for oidx, obj in enumerate(raw)
        )

    electrons = parse("electrons", _parse_electron, required=True)
    muons = parse("muons", _parse_muon, required=True)
    jets = parse("jets", _parse_jet, required=True)
    taus = parse("taus", _parse_tau, required=False)
    photons = parse("photons", _parse_photon, required=False)
    loose_electrons = _parse_loose(
        item, "loose_electrons", electrons, _parse_electron, context, input_label, tracks
    )
    loose_muons = _parse_loose(item, "loose_muons", muons, _parse_muon, context, input_label, tracks)
    return EventObjects(
        event_id=event_id,
        electrons=electrons,
        muons=muons,
        jets=jets,
        taus=taus,
        photons=photons,
        loose_electrons=loose_electrons,
        loose_muons=loose_muons,
    )


def load_config_json(path: str | Path) -> OverlapConfig:
    """Load an `OverlapConfig` from a flat JSON object."""
    return config_from_mapping(_load_json(path), context=str(path))


def config_from_mapping(data: dict[str, Any], context: str = "configuration") -> OverlapConfig:
    """Build an `OverlapConfig`, rejecting keys it does not know."""
    known = {f.name for f in fields(OverlapConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(
            f"Unknown key(s) in {context}: {', '.join(unknown)}. "
            f"Supported keys: {', '.join(sorted(known))}"
        )
    return OverlapConfig(**data)


def write_decisions_table(
    path: str | Path,
    events: Sequence[EventObjects],
    config: OverlapConfig,
) -> None:
    """Write per-object overlap-removal decisions into Parquet/CSV/Pickle table."""
    pd = _require_pandas()
    df = pd.DataFrame(decision_rows(events, config))
    out = Path(path)
    suffix = out.suffix.lower()
    if suffix == ".parquet":
        df.to_parquet(out, index=False)
    elif suffix in (".pkl", ".pickle"):
        df.to_pickle(out)
    elif suffix == ".csv":
        df.to_csv(out, index=False)
    else:
        raise ValueError(
            f"Unsupported output format '{suffix}'. Use .parquet, .csv, or .pkl"
        )


def decision_rows(events: Iterable[EventObjects], config: OverlapConfig) -> list[dict[str, Any]]:
    """Flatten event objects into DataFrame-ready row dictionaries."""
    accessor = DecisionAccessor.from_config(config)
    rows: list[dict[str, Any]] = []
    for event in events:
        for kind, objects in _exported_collections(event):
            for idx, obj in objects:
                rows.append(
                    {
                        "event_id": event.event_id,
                        "type": kind,
                        "index": idx,
                        "object_id": obj.object_id,
                        "pt": obj.pt,
                        "eta": obj.eta,
                        "phi": obj.phi,
                        "rapidity": obj.rapidity,
                        "is_input": accessor.is_input(obj),
                        config.output_label: accessor.decision(obj),
                    }
                )
    return rows


def _exported_collections(event: EventObjects):
    """Yield `(type, [(index, object), ...])` for every collection to export.

    Loose leptons are listed under `loose_electron`/`loose_muon` only when
    they are not already part of the main collection.
    """
    for kind, objects in event.collections().items():
        yield kind, list(enumerate(objects))
    for kind, loose, main in (
        ("loose_electron", event.loose_electrons, event.electrons),
        ("loose_muon", event.loose_muons, event.muons),
    ):
        if loose is None:
            continue
        main_ids = {id(obj) for obj in main}
        extra = [(idx, obj) for idx, obj in enumerate(loose) if id(obj) not in main_ids]
        if extra:
            yield kind, extra


def _require_pandas():
    """Import pandas lazily and provide a clear installation hint on failure."""
    try:
        import pandas as pd  # type: ignore
    except ModuleNotFoundError as exc:
        raise ModuleNotFoundError(
            "pandas is required to write output tables. Install pandas and pyarrow."
        ) from exc
    return pd


def _parse_loose(
    item: dict[str, Any],
    key: str,
    main: tuple[PhysicsObject, ...],
    factory,
    context: str,
    input_label: str,
    tracks: dict[str, TrackLink],
):
    """Parse a loose lepton collection given as objects or as indices into `main`."""
    raw = item.get(key)
    if raw is None:
        return None
    if not isinstance(raw, list):
        raise ValueError(f"{context} key '{key}' must be a list.")
    out = []
    for idx, entry in enumerate(raw):
        # Integer entries reuse the main-collection object, so decisions are shared.
        if isinstance(entry, int) and not isinstance(entry, bool):
            if not 0 <= entry < len(main):
                raise ValueError(
                    f"{context} {key} index {entry} out of range for {len(main)} objects."
                )
            out.append(main[entry])
        else:
            out.append(factory(entry, idx, f"{context} {key}", input_label, tracks))
    return tuple(out)


def _kinematics(item: Any, idx: int, context: str, input_label: str) -> dict[str, Any]:
    """Parse the fields shared by every physics object."""
    if not isinstance(item, dict):
        raise ValueError(f"Object entry at index {idx} in {context} must be an object.")
    try:
        return {
            "pt": float(item["pt"]),
            "eta": float(item["eta"]),
            "phi": float(item["phi"]),
            "m": float(item.get("m", 0.0)),
            "object_id": str(item.get("id", f"{idx}")),
            "is_input": bool(item.get(input_label, True)) if input_label else True,
        }
    except KeyError as exc:
        raise ValueError(f"Object at index {idx} in {context} is missing field {exc}.") from exc
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Object at index {idx} in {context} has an invalid field: {exc}") from exc


def _track(track_id: Any, tracks: dict[str, TrackLink]) -> TrackLink | None:
    if track_id is None:
        return None
    key = str(track_id)
    if key not in tracks:
        tracks[key] = TrackLink(track_id=key)
    return tracks[key]


def _parse_electron(item, idx, context, input_label, tracks) -> Electron:
    flags = item.get("id_flags", []) if isinstance(item, dict) else []
    if not isinstance(flags, list):
        raise ValueError(f"Electron field 'id_flags' at index {idx} in {context} must be a list.")
    return Electron(
        **_kinematics(item, idx, context, input_label),
        track=_track(item.get("track_id"), tracks),
        id_flags=frozenset(str(x) for x in flags),
    )


def _parse_muon(item, idx, context, input_label, tracks) -> Muon:
    kin = _kinematics(item, idx, context, input_label)
    return Muon(**kin, id_track=_track(item.get("id_track_id"), tracks))


def _parse_jet(item, idx, context, input_label, tracks) -> Jet:
    kin = _kinematics(item, idx, context, input_label)
    track_pts = item.get("track_pts", [])
    if not isinstance(track_pts, list):
        raise ValueError(f"Jet field 'track_pts' at index {idx} in {context} must be a list.")
    try:
        num_tracks = int(item.get("num_tracks", len(track_pts)))
        pts = tuple(float(x) for x in track_pts)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Jet at index {idx} in {context} has invalid track fields: {exc}") from exc
    return Jet(**kin, num_tracks=num_tracks, track_pts=pts)


def _parse_tau(item, idx, context, input_label, tracks) -> Tau:
    return Tau(**_kinematics(item, idx, context, input_label))


def _parse_photon(item, idx, context, input_label, tracks) -> Photon:
    return Photon(**_kinematics(item, idx, context, input_label))


def _load_json(path: str | Path) -> dict[str, Any]:
    """Read and validate a JSON object document from disk."""
    raw = Path(path).read_text(encoding="utf-8")
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"JSON document at {path} must be an object.")
    return data
