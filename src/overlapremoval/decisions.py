"""Read/write access to the overlap-removal state attached to each object."""

from __future__ import annotations
__author__ = "Overlap Removal developers"

from dataclasses import dataclass

from .models import DecisionScheme, OverlapConfig, PhysicsObject


@dataclass(frozen=True)
class DecisionAccessor:
    """Interpret and update object decisions for one configured scheme.

    Unset decisions read as "not rejected" in both schemes.
    """

    input_label: str = "selected"
    scheme: DecisionScheme = DecisionScheme.PASS

    @classmethod
    def from_config(cls, config: OverlapConfig) -> "DecisionAccessor":
        """Build the accessor matching an engine configuration."""
        return cls(input_label=config.input_label, scheme=config.scheme)

    def is_input(self, obj: PhysicsObject) -> bool:
        """True if the object was selected as input, or the gate is disabled."""
        if not self.input_label:
            return True
        return bool(obj.is_input)

    def is_rejected(self, obj: PhysicsObject) -> bool:
        """True only if the object has explicitly been rejected."""
        if self.scheme is DecisionScheme.PASS:
            return obj.passes_or is False
        return obj.overlaps is True

    def is_surviving(self, obj: PhysicsObject) -> bool:
        return self.is_input(obj) and not self.is_rejected(obj)

    def set_pass(self, obj: PhysicsObject) -> None:
        obj.passes_or = True

    def set_fail(self, obj: PhysicsObject) -> None:
        obj.passes_or = False

    def set_overlap(self, obj: PhysicsObject, overlaps: bool) -> None:
        obj.overlaps = bool(overlaps)

    def reject(self, obj: PhysicsObject) -> None:
        """Mark the object as removed by overlap removal."""
        if self.scheme is DecisionScheme.PASS:
            self.set_fail(obj)
        else:
            self.set_overlap(obj, True)

    def accept(self, obj: PhysicsObject) -> None:
        """Mark the object as surviving overlap removal."""
        if self.scheme is DecisionScheme.PASS:
            self.set_pass(obj)
        else:
            self.set_overlap(obj, False)

    def decision(self, obj: PhysicsObject) -> bool | None:
        """Exported verdict for the configured scheme, `None` if never set."""
        if self.scheme is DecisionScheme.PASS:
            return obj.passes_or
        return obj.overlaps

    @staticmethod
    def reset(obj: PhysicsObject) -> None:
        """Forget any previous verdict so the object can be reprocessed."""
        obj.passes_or = None
        obj.overlaps = None
