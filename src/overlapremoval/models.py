"""Core data models used by the overlap-removal engine.

This module defines:
- mutable physics objects (`Electron`, `Muon`, `Jet`, `Tau`, `Photon`) carrying
  their own overlap-removal decision state
- identity-compared track handles (`TrackLink`)
- event containers (`EventObjects`)
- the read-only engine configuration (`OverlapConfig`, `DecisionScheme`).

Physics objects compare and hash by identity: two references are "the same
object" only if they are the same Python instance.
"""

from __future__ import annotations
__author__ = "Overlap Removal developers"

import math
from dataclasses import dataclass, fields
from enum import Enum
from typing import ClassVar, Sequence

from .geometry import rapidity


@dataclass(eq=False)
class TrackLink:
    """Handle of one reconstructed inner-detector track.

    Leptons share a track only when they hold the same instance.
    """

    track_id: str = ""


@dataclass(eq=False)
class PhysicsObject:
    """Reconstructed object with kinematics and overlap-removal state.

    `passes_or` is written by the pass scheme, `overlaps` by the overlap
    scheme. `None` means the engine has not decided anything yet.
    """

    kind: ClassVar[str] = "object"

    pt: float = 0.0
    eta: float = 0.0
    phi: float = 0.0
    m: float = 0.0
    object_id: str = ""
    is_input: bool = True
    passes_or: bool | None = None
    overlaps: bool | None = None

    @property
    def rapidity(self) -> float:
        """Rapidity computed from `(pt, eta, m)`."""
        return rapidity(self.pt, self.eta, self.m)


@dataclass(eq=False)
class Electron(PhysicsObject):
    """Electron candidate with its inner-detector track and ID flags."""

    kind: ClassVar[str] = "electron"

    track: TrackLink | None = None
    id_flags: frozenset[str] = frozenset()

    def passes_id(self, working_point: str) -> bool:
        """Return whether this electron passes the named ID working point."""
        return working_point in self.id_flags


@dataclass(eq=False)
class Muon(PhysicsObject):
    """Muon candidate with its inner-detector track."""

    kind: ClassVar[str] = "muon"

    id_track: TrackLink | None = None


@dataclass(eq=False)
class Jet(PhysicsObject):
    """Jet with its charged-track multiplicity.

    `track_pts` optionally lists the transverse momenta of the associated
    tracks so the multiplicity can be recomputed above a threshold.
    """

    kind: ClassVar[str] = "jet"

    num_tracks: int = 0
    track_pts: tuple[float, ...] = ()

    def track_count(self, min_track_pt: float | None = None) -> int:
        """Number of associated tracks with pT at or above `min_track_pt`."""
        if min_track_pt is None or not self.track_pts:
            return self.num_tracks
        return sum(1 for pt in self.track_pts if pt >= min_track_pt)


@dataclass(eq=False)
class Tau(PhysicsObject):
    """Hadronically decaying tau candidate."""

    kind: ClassVar[str] = "tau"


@dataclass(eq=False)
class Photon(PhysicsObject):
    """Photon candidate."""

    kind: ClassVar[str] = "photon"


@dataclass(frozen=True)
class EventObjects:
    """One event payload with its object collections.

    `taus` and `photons` are optional; `None` skips the matching stages.
    The loose lepton collections are used only by the tau-lepton stages and
    default to the main collections.
    """

    event_id: str
    electrons: Sequence[Electron]
    muons: Sequence[Muon]
    jets: Sequence[Jet]
    taus: Sequence[Tau] | None = None
    photons: Sequence[Photon] | None = None
    loose_electrons: Sequence[Electron] | None = None
    loose_muons: Sequence[Muon] | None = None

    def collections(self) -> dict[str, Sequence[PhysicsObject]]:
        """Return the main collections present in this event, keyed by type."""
        out: dict[str, Sequence[PhysicsObject]] = {
            "electron": self.electrons,
            "muon": self.muons,
            "jet": self.jets,
        }
        if self.taus is not None:
            out["tau"] = self.taus
        if self.photons is not None:
            out["photon"] = self.photons
        return out


class DecisionScheme(str, Enum):
    """How verdicts are written onto objects."""

    PASS = "pass"  # passes_or: True survives, False rejected
    OVERLAP = "overlap"  # overlaps: True rejected, False survives


@dataclass(frozen=True)
class OverlapConfig:
    """Cone sizes and scheme choices for the overlap-removal cascade.

    An empty `input_label` disables the input-eligibility gate. An empty
    `tau_electron_id` lets every electron veto overlapping taus.
    """

    electron_jet_dr: float = 0.2
    jet_electron_dr: float = 0.4
    muon_jet_dr: float = 0.4
    tau_jet_dr: float = 0.2
    tau_electron_dr: float = 0.2
    tau_muon_dr: float = 0.2
    photon_electron_dr: float = 0.4
    photon_muon_dr: float = 0.4
    photon_photon_dr: float = 0.4
    photon_jet_dr: float = 0.4
    input_label: str = "selected"
    output_label: str = "passOR"
    scheme: DecisionScheme = DecisionScheme.PASS
    tau_electron_id: str = "VeryLooseLH"
    muon_jet_max_tracks: int = 2
    jet_track_min_pt: float | None = None

    def __post_init__(self) -> None:
        for name in cone_fields():
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"Cone size '{name}' must be a number, got {value!r}.")
            if not math.isfinite(value) or value < 0.0:
                raise ValueError(f"Cone size '{name}' must be finite and non-negative, got {value!r}.")
        if not isinstance(self.scheme, DecisionScheme):
            try:
                object.__setattr__(self, "scheme", DecisionScheme(str(self.scheme).lower()))
            except ValueError as exc:
                supported = ", ".join(s.value for s in DecisionScheme)
                raise ValueError(
                    f"Unknown decision scheme '{self.scheme}'. Supported schemes: {supported}"
                ) from exc
        for name in ("input_label", "output_label", "tau_electron_id"):
            value = getattr(self, name)
            if not isinstance(value, str):
                raise ValueError(f"'{name}' must be a string, got {value!r}.")
        max_tracks = self.muon_jet_max_tracks
        if isinstance(max_tracks, bool) or not isinstance(max_tracks, int) or max_tracks < 0:
            raise ValueError(
                f"'muon_jet_max_tracks' must be a non-negative integer, got {max_tracks!r}."
            )
        min_pt = self.jet_track_min_pt
        if min_pt is not None:
            if isinstance(min_pt, bool) or not isinstance(min_pt, (int, float)):
                raise ValueError(f"'jet_track_min_pt' must be a number, got {min_pt!r}.")
            if not math.isfinite(min_pt) or min_pt < 0.0:
                raise ValueError(
                    f"'jet_track_min_pt' must be finite and non-negative, got {min_pt!r}."
                )
        if not self.output_label:
            raise ValueError("'output_label' must not be empty.")


def cone_fields() -> tuple[str, ...]:
    """Names of the cone-size fields of `OverlapConfig`."""
    return tuple(f.name for f in fields(OverlapConfig) if f.name.endswith("_dr"))
