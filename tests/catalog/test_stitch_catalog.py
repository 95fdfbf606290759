"""
Tests for the stitch catalog.

Covers:
  - Both YAML tables load without error
  - Every enum value has a catalog entry
  - Base stitch loop counts sum to each stitch type's declared counts
  - Cable hold metadata
  - Tag resolution (enum, value string, abbreviation) and the KNIT fallback
  - Corrupted data raises at load time (not silently at query time)
"""

import shutil
import warnings
from pathlib import Path

import pytest

from knitpreview.catalog import (
    BaseStitchKind,
    BehaviorClass,
    HoldDirection,
    ShiftDirection,
    StitchCatalog,
    StitchType,
    UnknownStitchWarning,
    get_catalog,
)

_DATA_DIR = Path(__file__).parent.parent.parent / "knitpreview" / "catalog" / "data"


@pytest.fixture(scope="module")
def catalog():
    return get_catalog()


def _copy_data(tmp_path: Path) -> Path:
    data_dir = tmp_path / "data"
    shutil.copytree(_DATA_DIR, data_dir)
    return data_dir


# ── Catalog loads ──────────────────────────────────────────────────────────────


class TestCatalogLoads:
    def test_loads_without_error(self, catalog):
        assert catalog is not None

    def test_get_catalog_returns_module_instance(self):
        assert get_catalog() is get_catalog()

    def test_all_stitch_types_present(self, catalog):
        for st in StitchType:
            assert st in catalog.stitch_types, f"StitchType.{st.value} missing from catalog"

    def test_all_base_kinds_present(self, catalog):
        for kind in BaseStitchKind:
            assert kind in catalog.base_stitches, f"BaseStitchKind.{kind.value} missing"

    def test_entries_have_descriptions(self, catalog):
        for st, info in catalog.stitch_types.items():
            assert info.description, f"StitchType.{st.value} has empty description"

    def test_tables_are_read_only(self, catalog):
        with pytest.raises(TypeError):
            catalog.stitch_types[StitchType.KNIT] = catalog.stitch_types[StitchType.PURL]


# ── Loop counts ────────────────────────────────────────────────────────────────


class TestLoopCounts:
    def test_counts_non_negative(self, catalog):
        for info in catalog.stitch_types.values():
            assert info.loops_consumed >= 0
            assert info.loops_produced >= 0

    def test_base_stitches_sum_to_declared_counts(self, catalog):
        for st, info in catalog.stitch_types.items():
            consumed = sum(b.loops_consumed for b in info.base_stitches)
            produced = sum(b.loops_produced for b in info.base_stitches)
            assert (consumed, produced) == (info.loops_consumed, info.loops_produced), st

    @pytest.mark.parametrize(
        "st, consumed, produced",
        [
            (StitchType.NO_STITCH, 0, 0),
            (StitchType.KNIT, 1, 1),
            (StitchType.PURL, 1, 1),
            (StitchType.SSK, 2, 1),
            (StitchType.KNIT2TOG, 2, 1),
            (StitchType.KNIT3TOG, 3, 1),
            (StitchType.M1, 1, 2),
            (StitchType.YARN_OVER, 0, 1),
            (StitchType.K1_TBL_K1, 1, 3),
            (StitchType.CABLE_KNIT_4, 4, 4),
            (StitchType.CABLE_1_OVER_2_LEFT, 3, 3),
        ],
    )
    def test_known_counts(self, catalog, st, consumed, produced):
        info = catalog.stitch_types[st]
        assert (info.loops_consumed, info.loops_produced) == (consumed, produced)

    def test_knit3tog_decomposes_into_join(self, catalog):
        kinds = [b.kind for b in catalog.stitch_types[StitchType.KNIT3TOG].base_stitches]
        assert kinds == [BaseStitchKind.KNIT2TOG, BaseStitchKind.JOIN_PREVIOUS]

    def test_decrease_shift_directions(self, catalog):
        assert catalog.base_info(BaseStitchKind.KNIT2TOG).shift_direction == ShiftDirection.RIGHT
        assert catalog.base_info(BaseStitchKind.SSK).shift_direction == ShiftDirection.LEFT

    def test_purl_behavior(self, catalog):
        assert catalog.base_info(BaseStitchKind.PURL).behavior == BehaviorClass.PURL

    def test_base_info_unknown_raises(self, catalog):
        with pytest.raises(KeyError, match="No base stitch entry"):
            catalog.base_info("NOT_A_KIND")


# ── Cables ─────────────────────────────────────────────────────────────────────


class TestCables:
    @pytest.mark.parametrize(
        "st, held, hold",
        [
            (StitchType.CABLE_1_OVER_1_RIGHT, 1, HoldDirection.BACK),
            (StitchType.CABLE_1_OVER_1_LEFT, 1, HoldDirection.FRONT),
            (StitchType.CABLE_1_OVER_2_RIGHT, 2, HoldDirection.BACK),
            (StitchType.CABLE_1_OVER_2_LEFT, 1, HoldDirection.FRONT),
            (StitchType.CABLE_2_OVER_2_RIGHT, 2, HoldDirection.BACK),
            (StitchType.CABLE_2_OVER_2_LEFT, 2, HoldDirection.FRONT),
        ],
    )
    def test_cable_holds(self, catalog, st, held, hold):
        info = catalog.stitch_types[st]
        assert info.held == held
        assert info.hold_direction == hold
        assert info.is_cable

    def test_plain_cable_columns_are_not_cables(self, catalog):
        assert not catalog.stitch_types[StitchType.CABLE_KNIT_2].is_cable
        assert not catalog.stitch_types[StitchType.CABLE_KNIT_4].is_cable

    def test_hold_direction_opposite(self):
        assert HoldDirection.FRONT.opposite() == HoldDirection.BACK
        assert HoldDirection.BACK.opposite() == HoldDirection.FRONT
        assert HoldDirection.NONE.opposite() == HoldDirection.NONE


# ── Tag resolution ─────────────────────────────────────────────────────────────


class TestTagResolution:
    @pytest.mark.parametrize(
        "tag, expected",
        [
            (StitchType.SSK, StitchType.SSK),
            ("KNIT2TOG", StitchType.KNIT2TOG),
            ("knit2tog", StitchType.KNIT2TOG),
            ("k2tog", StitchType.KNIT2TOG),
            ("K2TOG", StitchType.KNIT2TOG),
            ("p", StitchType.PURL),
            ("yo", StitchType.YARN_OVER),
            ("c4b", StitchType.CABLE_2_OVER_2_RIGHT),
            ("-", StitchType.NO_STITCH),
        ],
    )
    def test_resolve(self, catalog, tag, expected):
        assert catalog.resolve(tag) == expected

    def test_resolve_unknown_returns_none(self, catalog):
        assert catalog.resolve("bobble") is None
        assert catalog.resolve(42) is None

    def test_info_for_known_tag_does_not_warn(self, catalog):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            assert catalog.info_for("k").stitch_type == StitchType.KNIT

    def test_unknown_tag_falls_back_to_knit(self, catalog):
        with pytest.warns(UnknownStitchWarning, match="bobble"):
            info = catalog.info_for("bobble")
        assert info.stitch_type == StitchType.KNIT

    def test_abbreviations_are_unique_per_type(self, catalog):
        for abbrev, st in catalog.abbreviations.items():
            assert abbrev in catalog.stitch_types[st].abbreviations


# ── Cross-reference validation at load time ────────────────────────────────────


class TestCrossReferenceValidation:
    def test_missing_file_raises(self, tmp_path):
        data_dir = _copy_data(tmp_path)
        (data_dir / "stitch_types.yaml").unlink()
        with pytest.raises(FileNotFoundError, match="stitch_types.yaml"):
            StitchCatalog(data_dir=data_dir)

    def test_malformed_yaml_raises(self, tmp_path):
        data_dir = _copy_data(tmp_path)
        (data_dir / "base_stitches.yaml").write_text("entries: [unclosed\n")
        with pytest.raises(ValueError, match="Failed to parse"):
            StitchCatalog(data_dir=data_dir)

    def test_undefined_base_stitch_raises(self, tmp_path):
        """A stitch type built from an undefined base kind must fail at load."""
        data_dir = _copy_data(tmp_path)
        bad = data_dir / "base_stitches.yaml"
        text = bad.read_text()
        start = text.index("  - id: KNIT_SAME_LOOP")
        end = text.index("  - id: KNIT2TOG")
        bad.write_text(text[:start] + text[end:])
        with pytest.raises(ValueError, match="KNIT_SAME_LOOP"):
            StitchCatalog(data_dir=data_dir)

    def test_loop_count_mismatch_raises(self, tmp_path):
        data_dir = _copy_data(tmp_path)
        bad = data_dir / "stitch_types.yaml"
        text = bad.read_text().replace(
            "    loops_consumed: 3\n    loops_produced: 1\n",
            "    loops_consumed: 2\n    loops_produced: 1\n",
        )
        bad.write_text(text)
        with pytest.raises(ValueError, match="KNIT3TOG"):
            StitchCatalog(data_dir=data_dir)

    def test_held_without_direction_raises(self, tmp_path):
        data_dir = _copy_data(tmp_path)
        bad = data_dir / "stitch_types.yaml"
        bad.write_text(
            bad.read_text().replace(
                "    held: 1\n    hold_direction: BACK\n", "    held: 1\n    hold_direction: NONE\n"
            )
        )
        with pytest.raises(ValueError, match="hold_direction is NONE"):
            StitchCatalog(data_dir=data_dir)

    def test_held_exceeding_loops_raises(self, tmp_path):
        data_dir = _copy_data(tmp_path)
        bad = data_dir / "stitch_types.yaml"
        bad.write_text(
            bad.read_text().replace(
                "    held: 1\n    hold_direction: FRONT\n    abbreviations: [c2f, 1/1lc]",
                "    held: 2\n    hold_direction: FRONT\n    abbreviations: [c2f, 1/1lc]",
            )
        )
        with pytest.raises(ValueError, match="must be less than"):
            StitchCatalog(data_dir=data_dir)

    def test_duplicate_abbreviation_raises(self, tmp_path):
        data_dir = _copy_data(tmp_path)
        bad = data_dir / "stitch_types.yaml"
        bad.write_text(bad.read_text().replace("abbreviations: [p]", "abbreviations: [k]"))
        with pytest.raises(ValueError, match="already used"):
            StitchCatalog(data_dir=data_dir)

    def test_missing_stitch_type_entry_raises(self, tmp_path):
        data_dir = _copy_data(tmp_path)
        bad = data_dir / "stitch_types.yaml"
        text = bad.read_text()
        start = text.index("  - id: CABLE_2_OVER_2_LEFT")
        bad.write_text(text[:start])
        with pytest.raises(ValueError, match="CABLE_2_OVER_2_LEFT"):
            StitchCatalog(data_dir=data_dir)

    def test_base_stitch_with_three_loops_raises(self, tmp_path):
        data_dir = _copy_data(tmp_path)
        bad = data_dir / "base_stitches.yaml"
        bad.write_text(
            bad.read_text().replace(
                "    loops_consumed: 1\n    loops_produced: 2\n",
                "    loops_consumed: 1\n    loops_produced: 3\n",
            )
        )
        with pytest.raises(ValueError, match="0, 1 or 2"):
            StitchCatalog(data_dir=data_dir)

    def test_all_problems_reported_together(self, tmp_path):
        data_dir = _copy_data(tmp_path)
        bad = data_dir / "stitch_types.yaml"
        text = (
            bad.read_text()
            .replace("abbreviations: [p]", "abbreviations: [k]")
            .replace(
                "    loops_consumed: 3\n    loops_produced: 1\n",
                "    loops_consumed: 2\n    loops_produced: 1\n",
            )
        )
        bad.write_text(text)
        with pytest.raises(ValueError) as excinfo:
            StitchCatalog(data_dir=data_dir)
        message = str(excinfo.value)
        assert "already used" in message
        assert "KNIT3TOG" in message
