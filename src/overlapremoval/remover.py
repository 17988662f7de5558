"""High-level overlap-removal cascade over one event's object collections."""

from __future__ import annotations
__author__ = "Overlap Removal developers"

import logging
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from . import overlap
from .decisions import DecisionAccessor
from .models import Electron, EventObjects, Jet, Muon, OverlapConfig, Photon, PhysicsObject, Tau

logger = logging.getLogger(__name__)


@dataclass
class OverlapSummary:
    """Number of objects rejected by each stage of one cascade run."""

    event_id: str | None = None
    rejected: dict[str, int] = field(default_factory=dict)

    def record(self, stage: str, n_rejected: int) -> None:
        self.rejected[stage] = self.rejected.get(stage, 0) + n_rejected

    @property
    def total_rejected(self) -> int:
        return sum(self.rejected.values())


@dataclass
class OverlapRemovalTool:
    """Run the recommended overlap-removal sequence and decorate objects.

    Verdicts are written onto the objects through a `DecisionAccessor`; the
    returned `OverlapSummary` is bookkeeping only.
    """

    config: OverlapConfig = field(default_factory=OverlapConfig)

    def __post_init__(self) -> None:
        self.accessor = DecisionAccessor.from_config(self.config)

    def remove_overlaps(
        self,
        electrons: Sequence[Electron],
        muons: Sequence[Muon],
        jets: Sequence[Jet],
        taus: Sequence[Tau] | None = None,
        photons: Sequence[Photon] | None = None,
        loose_electrons: Sequence[Electron] | None = None,
        loose_muons: Sequence[Muon] | None = None,
        event_id: str | None = None,
    ) -> OverlapSummary:
        """Apply the full cascade in the recommended order.

        Workflow:
        1. Mark every input object as surviving.
        2. Taus vs. (loose) electrons, then taus vs. (loose) muons.
        3. Electrons vs. muons (shared track).
        4. Photons vs. photons, electrons, muons.
        5. Electrons vs. jets, then muons vs. jets.
        6. Photons vs. jets.

        Stages 2, 4 and 6 are skipped when taus or photons are not given. The
        loose lepton collections default to `electrons` and `muons`.
        """
        if loose_electrons is None:
            loose_electrons = electrons
        if loose_muons is None:
            loose_muons = muons
        summary = OverlapSummary(event_id=event_id)

        self._initialize(electrons, muons, jets, taus, photons, loose_electrons, loose_muons)

        if taus is not None:
            summary.record("tau_electron", self.remove_tau_ele_overlap(taus, loose_electrons))
            summary.record("tau_muon", self.remove_tau_muon_overlap(taus, loose_muons))
        summary.record("electron_muon", self.remove_ele_muon_overlap(electrons, muons))
        if photons is not None:
            summary.record("photon_photon", self.remove_photon_photon_overlap(photons))
            summary.record("photon_electron", self.remove_photon_ele_overlap(photons, electrons))
            summary.record("photon_muon", self.remove_photon_muon_overlap(photons, muons))
        summary.record("electron_jet", self.remove_ele_jet_overlap(electrons, jets))
        summary.record("muon_jet", self.remove_muon_jet_overlap(muons, jets))
        if photons is not None:
            summary.record("photon_jet", self.remove_photon_jet_overlap(photons, jets))

        logger.debug(
            "Overlap removal%s rejected %d objects: %s",
            "" if event_id is None else f" for event {event_id}",
            summary.total_rejected,
            summary.rejected,
        )
        return summary

    def remove_event_overlaps(self, event: EventObjects) -> OverlapSummary:
        """Run `remove_overlaps` on one `EventObjects` payload."""
        return self.remove_overlaps(
            electrons=event.electrons,
            muons=event.muons,
            jets=event.jets,
            taus=event.taus,
            photons=event.photons,
            loose_electrons=event.loose_electrons,
            loose_muons=event.loose_muons,
            event_id=event.event_id,
        )

    def remove_overlaps_events(self, events: Iterable[EventObjects]) -> list[OverlapSummary]:
        """Run the cascade on each event in turn."""
        return [self.remove_event_overlaps(event) for event in events]

    def remove_ele_jet_overlap(self, electrons: Sequence[Electron], jets: Sequence[Jet]) -> int:
        """Remove jets near electrons, then electrons near surviving jets."""
        return overlap.remove_electron_jet_overlap(electrons, jets, self.accessor, self.config)

    def remove_muon_jet_overlap(self, muons: Sequence[Muon], jets: Sequence[Jet]) -> int:
        """Remove muons or jets depending on the jet track multiplicity."""
        return overlap.remove_muon_jet_overlap(muons, jets, self.accessor, self.config)

    def remove_ele_muon_overlap(self, electrons: Sequence[Electron], muons: Sequence[Muon]) -> int:
        """Remove electrons sharing an inner-detector track with a muon."""
        return overlap.remove_electron_muon_overlap(electrons, muons, self.accessor)

    def remove_tau_jet_overlap(self, taus: Sequence[Tau], jets: Sequence[Jet]) -> int:
        """Remove taus overlapping jets. Not part of `remove_overlaps`."""
        return overlap.remove_tau_jet_overlap(taus, jets, self.accessor, self.config)

    def remove_tau_ele_overlap(self, taus: Sequence[Tau], electrons: Sequence[Electron]) -> int:
        return overlap.remove_tau_electron_overlap(taus, electrons, self.accessor, self.config)

    def remove_tau_muon_overlap(self, taus: Sequence[Tau], muons: Sequence[Muon]) -> int:
        return overlap.remove_tau_muon_overlap(taus, muons, self.accessor, self.config)

    def remove_photon_ele_overlap(
        self, photons: Sequence[Photon], electrons: Sequence[Electron]
    ) -> int:
        return overlap.remove_photon_electron_overlap(photons, electrons, self.accessor, self.config)

    def remove_photon_muon_overlap(self, photons: Sequence[Photon], muons: Sequence[Muon]) -> int:
        return overlap.remove_photon_muon_overlap(photons, muons, self.accessor, self.config)

    def remove_photon_photon_overlap(self, photons: Sequence[Photon]) -> int:
        return overlap.remove_photon_photon_overlap(photons, self.accessor, self.config)

    def remove_photon_jet_overlap(self, photons: Sequence[Photon], jets: Sequence[Jet]) -> int:
        return overlap.remove_photon_jet_overlap(photons, jets, self.accessor, self.config)

    def _initialize(self, *collections: Sequence[PhysicsObject] | None) -> None:
        """Give every input object an explicit surviving verdict and clear the rest."""
        for objects in collections:
            if objects is None:
                continue
            for obj in objects:
                if self.accessor.is_input(obj):
                    self.accessor.accept(obj)
                else:
                    self.accessor.reset(obj)
