"""Overlap predicates and the pairwise overlap resolvers.

Every resolver:
- only judges objects that are still surviving when it reaches them
- only lets surviving objects veto others
- reads the state committed by earlier resolvers, never a snapshot
- returns the number of objects it rejected.
"""

from __future__ import annotations
__author__ = "Overlap Removal developers"

from typing import Callable, Iterable, Sequence, TypeVar

from .decisions import DecisionAccessor
from .geometry import delta_r2
from .models import Electron, Jet, Muon, OverlapConfig, Photon, PhysicsObject, Tau

T = TypeVar("T", bound=PhysicsObject)


def objects_overlap(
    p1: PhysicsObject,
    p2: PhysicsObject,
    dr_max: float,
    dr_min: float = 0.0,
) -> bool:
    """True if `dr_min <= dR(p1, p2) < dr_max`."""
    dr2 = delta_r2(p1, p2)
    return dr_min * dr_min <= dr2 < dr_max * dr_max


def overlaps_any(
    obj: PhysicsObject,
    refs: Iterable[T],
    accessor: DecisionAccessor,
    dr_max: float,
    dr_min: float = 0.0,
    qualifies: Callable[[T], bool] | None = None,
) -> bool:
    """Return True on the first surviving reference overlapping `obj`.

    The object itself is never counted as a reference. `qualifies` can further
    restrict which references are allowed to veto.
    """
    for ref in refs:
        if ref is obj or not accessor.is_surviving(ref):
            continue
        if qualifies is not None and not qualifies(ref):
            continue
        if objects_overlap(obj, ref, dr_max, dr_min):
            return True
    return False


def _reject_overlapping(
    candidates: Iterable[PhysicsObject],
    refs: Sequence[T],
    accessor: DecisionAccessor,
    dr_max: float,
    qualifies: Callable[[T], bool] | None = None,
) -> int:
    """Reject every surviving candidate overlapping a surviving reference."""
    n_rejected = 0
    for obj in candidates:
        if not accessor.is_surviving(obj):
            continue
        if overlaps_any(obj, refs, accessor, dr_max, qualifies=qualifies):
            accessor.reject(obj)
            n_rejected += 1
    return n_rejected


def remove_electron_jet_overlap(
    electrons: Sequence[Electron],
    jets: Sequence[Jet],
    accessor: DecisionAccessor,
    config: OverlapConfig,
) -> int:
    """Remove jets near electrons, then electrons near the remaining jets."""
    n_rejected = _reject_overlapping(jets, electrons, accessor, config.electron_jet_dr)
    # Jets removed above must not veto the electrons they overlapped.
    n_rejected += _reject_overlapping(electrons, jets, accessor, config.jet_electron_dr)
    return n_rejected


def remove_muon_jet_overlap(
    muons: Sequence[Muon],
    jets: Sequence[Jet],
    accessor: DecisionAccessor,
    config: OverlapConfig,
) -> int:
    """Resolve muon-jet overlaps using the jet track multiplicity.

    A jet with more than `muon_jet_max_tracks` tracks is kept and removes every
    overlapping muon. A jet with fewer tracks is treated as a muon and removed
    at its first overlapping muon.
    """
    n_rejected = 0
    for jet in jets:
        if not accessor.is_surviving(jet):
            continue
        is_hadronic = jet.track_count(config.jet_track_min_pt) > config.muon_jet_max_tracks
        for muon in muons:
            if not accessor.is_surviving(muon):
                continue
            if not objects_overlap(jet, muon, config.muon_jet_dr):
                continue
            n_rejected += 1
            if is_hadronic:
                accessor.reject(muon)
            else:
                accessor.reject(jet)
                break
    return n_rejected


def remove_electron_muon_overlap(
    electrons: Sequence[Electron],
    muons: Sequence[Muon],
    accessor: DecisionAccessor,
) -> int:
    """Remove electrons sharing their inner-detector track with a muon."""
    n_rejected = 0
    for electron in electrons:
        if electron.track is None or not accessor.is_surviving(electron):
            continue
        for muon in muons:
            if muon.id_track is not electron.track:
                continue
            if accessor.is_surviving(muon):
                accessor.reject(electron)
                n_rejected += 1
                break
    return n_rejected


def remove_tau_jet_overlap(
    taus: Sequence[Tau],
    jets: Sequence[Jet],
    accessor: DecisionAccessor,
    config: OverlapConfig,
) -> int:
    """Remove taus overlapping surviving jets."""
    return _reject_overlapping(taus, jets, accessor, config.tau_jet_dr)


def remove_tau_electron_overlap(
    taus: Sequence[Tau],
    electrons: Sequence[Electron],
    accessor: DecisionAccessor,
    config: OverlapConfig,
) -> int:
    """Remove taus overlapping identified electrons."""
    working_point = config.tau_electron_id

    def is_identified(electron: Electron) -> bool:
        return electron.passes_id(working_point)

    return _reject_overlapping(
        taus,
        electrons,
        accessor,
        config.tau_electron_dr,
        qualifies=is_identified if working_point else None,
    )


def remove_tau_muon_overlap(
    taus: Sequence[Tau],
    muons: Sequence[Muon],
    accessor: DecisionAccessor,
    config: OverlapConfig,
) -> int:
    return _reject_overlapping(taus, muons, accessor, config.tau_muon_dr)


def remove_photon_electron_overlap(
    photons: Sequence[Photon],
    electrons: Sequence[Electron],
    accessor: DecisionAccessor,
    config: OverlapConfig,
) -> int:
    return _reject_overlapping(photons, electrons, accessor, config.photon_electron_dr)


def remove_photon_muon_overlap(
    photons: Sequence[Photon],
    muons: Sequence[Muon],
    accessor: DecisionAccessor,
    config: OverlapConfig,
) -> int:
    return _reject_overlapping(photons, muons, accessor, config.photon_muon_dr)


def remove_photon_photon_overlap(
    photons: Sequence[Photon],
    accessor: DecisionAccessor,
    config: OverlapConfig,
) -> int:
    """Remove photons overlapping another surviving photon.

    Photons are scanned in collection order, so of two overlapping photons
    the first one is removed and the second one survives.
    """
    return _reject_overlapping(photons, photons, accessor, config.photon_photon_dr)


def remove_photon_jet_overlap(
    photons: Sequence[Photon],
    jets: Sequence[Jet],
    accessor: DecisionAccessor,
    config: OverlapConfig,
) -> int:
    """Remove jets overlapping surviving photons."""
    return _reject_overlapping(jets, photons, accessor, config.photon_jet_dr)
