"""Unit tests for the decision accessor and configuration validation."""

from __future__ import annotations

import math
import unittest

from overlapremoval import DecisionAccessor, DecisionScheme, Jet, OverlapConfig


class TestDecisionAccessor(unittest.TestCase):
    """Validate pass/overlap schemes, unset defaults, and the input gate."""

    def test_pass_scheme_reads_unset_as_surviving(self) -> None:
        accessor = DecisionAccessor(scheme=DecisionScheme.PASS)
        jet = Jet(pt=30.0)
        self.assertTrue(accessor.is_surviving(jet))
        self.assertIsNone(accessor.decision(jet))
        accessor.set_fail(jet)
        self.assertTrue(accessor.is_rejected(jet))
        accessor.set_pass(jet)
        self.assertFalse(accessor.is_rejected(jet))
        self.assertTrue(accessor.decision(jet))

    def test_overlap_scheme_writes_only_overlap_flag(self) -> None:
        accessor = DecisionAccessor(scheme=DecisionScheme.OVERLAP)
        jet = Jet(pt=30.0)
        self.assertFalse(accessor.is_rejected(jet))
        accessor.reject(jet)
        self.assertTrue(jet.overlaps)
        self.assertIsNone(jet.passes_or)
        self.assertTrue(accessor.decision(jet))
        accessor.accept(jet)
        self.assertFalse(accessor.is_rejected(jet))

    def test_schemes_ignore_each_others_field(self) -> None:
        """A pass-scheme accessor does not see overlap flags, and vice versa."""
        jet = Jet(pt=30.0, overlaps=True, passes_or=True)
        self.assertTrue(DecisionAccessor(scheme=DecisionScheme.PASS).is_surviving(jet))
        self.assertFalse(DecisionAccessor(scheme=DecisionScheme.OVERLAP).is_surviving(jet))

    def test_repeated_writes_are_last_write_wins(self) -> None:
        accessor = DecisionAccessor()
        jet = Jet(pt=30.0)
        accessor.reject(jet)
        accessor.reject(jet)
        self.assertFalse(jet.passes_or)
        accessor.accept(jet)
        self.assertTrue(jet.passes_or)

    def test_input_gate(self) -> None:
        jet = Jet(pt=30.0, is_input=False)
        self.assertFalse(DecisionAccessor(input_label="selected").is_surviving(jet))
        self.assertTrue(DecisionAccessor(input_label="").is_surviving(jet))

    def test_reset_clears_both_fields(self) -> None:
        jet = Jet(pt=30.0, overlaps=True, passes_or=False)
        DecisionAccessor.reset(jet)
        self.assertIsNone(jet.passes_or)
        self.assertIsNone(jet.overlaps)


class TestOverlapConfig(unittest.TestCase):
    """Validate defaults and setup-time rejection of malformed settings."""

    def test_defaults(self) -> None:
        config = OverlapConfig()
        self.assertEqual(config.electron_jet_dr, 0.2)
        self.assertEqual(config.jet_electron_dr, 0.4)
        self.assertEqual(config.muon_jet_dr, 0.4)
        self.assertEqual(config.tau_jet_dr, 0.2)
        self.assertEqual(config.tau_electron_dr, 0.2)
        self.assertEqual(config.tau_muon_dr, 0.2)
        self.assertEqual(config.photon_electron_dr, 0.4)
        self.assertEqual(config.photon_muon_dr, 0.4)
        self.assertEqual(config.photon_photon_dr, 0.4)
        self.assertEqual(config.photon_jet_dr, 0.4)
        self.assertEqual(config.input_label, "selected")
        self.assertIs(config.scheme, DecisionScheme.PASS)

    def test_negative_cone_raises(self) -> None:
        with self.assertRaises(ValueError):
            OverlapConfig(muon_jet_dr=-0.1)

    def test_non_finite_cone_raises(self) -> None:
        with self.assertRaises(ValueError):
            OverlapConfig(photon_jet_dr=math.inf)

    def test_scheme_accepts_string_names(self) -> None:
        self.assertIs(OverlapConfig(scheme="overlap").scheme, DecisionScheme.OVERLAP)
        with self.assertRaises(ValueError):
            OverlapConfig(scheme="veto")

    def test_invalid_track_settings_raise(self) -> None:
        with self.assertRaises(ValueError):
            OverlapConfig(muon_jet_max_tracks=-1)
        with self.assertRaises(ValueError):
            OverlapConfig(jet_track_min_pt=-0.5)

    def test_track_settings_of_wrong_type_raise_value_error(self) -> None:
        for bad in ("2", True, 2.5, None):
            with self.subTest(muon_jet_max_tracks=bad):
                with self.assertRaisesRegex(ValueError, "muon_jet_max_tracks"):
                    OverlapConfig(muon_jet_max_tracks=bad)
        for bad in ("1.0", False, float("nan"), float("inf")):
            with self.subTest(jet_track_min_pt=bad):
                with self.assertRaisesRegex(ValueError, "jet_track_min_pt"):
                    OverlapConfig(jet_track_min_pt=bad)
        self.assertEqual(OverlapConfig(jet_track_min_pt=1).jet_track_min_pt, 1)

    def test_non_string_labels_raise_value_error(self) -> None:
        for name in ("input_label", "output_label", "tau_electron_id"):
            with self.subTest(field=name):
                with self.assertRaisesRegex(ValueError, name):
                    OverlapConfig(**{name: 1})


class TestPackageMetadata(unittest.TestCase):
    """Every package module carries the project author line."""

    def test_modules_declare_author(self) -> None:
        import overlapremoval
        from overlapremoval import cli, decisions, geometry, io, models, overlap, remover

        for module in (overlapremoval, cli, decisions, geometry, io, models, overlap, remover):
            with self.subTest(module=module.__name__):
                self.assertEqual(module.__author__, overlapremoval.__author__)


if __name__ == "__main__":
    unittest.main()
