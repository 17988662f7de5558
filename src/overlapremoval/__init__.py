"""Public package exports for the object overlap-removal engine."""
__author__ = "Overlap Removal developers"

from .decisions import DecisionAccessor
from .geometry import delta_r, delta_r2, rapidity, wrap_phi
from .models import (
    DecisionScheme,
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
from .overlap import objects_overlap, overlaps_any
from .remover import OverlapRemovalTool, OverlapSummary

__all__ = [
    "OverlapRemovalTool",
    "OverlapSummary",
    "OverlapConfig",
    "DecisionScheme",
    "DecisionAccessor",
    "PhysicsObject",
    "Electron",
    "Muon",
    "Jet",
    "Tau",
    "Photon",
    "TrackLink",
    "EventObjects",
    "objects_overlap",
    "overlaps_any",
    "delta_r",
    "delta_r2",
    "rapidity",
    "wrap_phi",
]
