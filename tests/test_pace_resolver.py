"""Tests for building pace contexts and choosing per-activity paces."""

import pytest

from pace_engine.math.pace import is_range_pace, pace_to_seconds
from pace_engine.math.pace_lookup import find_pace_values
from pace_engine.models import CustomPaceSettings, PredictedRaceTime, parse_activity
from pace_engine.pace_resolver import (
    descriptor_zone,
    resolve_activity_pace,
    resolve_paces,
    zone_pace,
)


def _act(**raw):
    return parse_activity(raw)


class TestResolvePaces:
    def test_defaults_use_reference_5k(self, tables) -> None:
        context = resolve_paces(None, tables)
        assert context.parameter == 50
        assert dict(context.paces) == find_pace_values(50, tables)

    def test_reference_time_picks_parameter(self, tables) -> None:
        time = tables.race_row(60).times["10km"]
        settings = CustomPaceSettings(base_time=time, base_distance="10km")
        assert resolve_paces(settings, tables).parameter == 60

    def test_unparseable_reference_falls_back(self, tables) -> None:
        settings = CustomPaceSettings(base_time="soon", base_distance="5km")
        assert resolve_paces(settings, tables).parameter == 50

    def test_adjustment_factor_scales_every_zone(self, tables) -> None:
        base = resolve_paces(CustomPaceSettings(), tables)
        slower = resolve_paces(CustomPaceSettings(adjustment_factor=110), tables)
        assert pace_to_seconds(slower.paces["T Km"]) == pytest.approx(
            pace_to_seconds(base.paces["T Km"]) * 1.1, abs=1
        )
        assert is_range_pace(slower.paces["Easy Km"])

    def test_override_replaces_zone(self, tables) -> None:
        settings = CustomPaceSettings(custom_paces={"T Km": "4:20"})
        assert resolve_paces(settings, tables).paces["T Km"] == "4:20"

    def test_single_override_of_range_zone_is_widened(self, tables) -> None:
        settings = CustomPaceSettings(custom_paces={"Easy Km": "5:00"})
        assert resolve_paces(settings, tables).paces["Easy Km"] == "5:00-5:36"

    def test_invalid_override_ignored(self, tables) -> None:
        base = resolve_paces(CustomPaceSettings(), tables)
        settings = CustomPaceSettings(custom_paces={"T Km": "quick"})
        assert resolve_paces(settings, tables).paces["T Km"] == base.paces["T Km"]

    def test_predictor_bound(self, tables) -> None:
        context = resolve_paces(None, tables)
        assert context.predictor(5).time == tables.race_row(50).times["5km"]


# ---------------------------------------------------------------------------
# Zones
# ---------------------------------------------------------------------------


class TestZones:
    @pytest.mark.parametrize(
        "descriptor, zone",
        [
            ("T", "T Km"),
            ("limiar", "T Km"),
            ("Rodagem", "Easy Km"),
            ("R", "R 1000m"),
            ("i km", "I Km"),
            ("longo", "M Km"),
        ],
    )
    def test_descriptor(self, descriptor, zone) -> None:
        assert descriptor_zone(descriptor) == zone

    def test_unknown_descriptor(self) -> None:
        assert descriptor_zone("fartlek") is None
        assert descriptor_zone(None) is None

    def test_custom_key_preferred(self) -> None:
        assert zone_pace({"T Km": "4:30", "custom_T Km": "4:15"}, "T Km") == "4:15"

    def test_missing_zone(self) -> None:
        assert zone_pace({}, "T Km") == ""


# ---------------------------------------------------------------------------
# Activity pace
# ---------------------------------------------------------------------------


class TestResolveActivityPace:
    def test_type_zone(self, flat_paces) -> None:
        assert resolve_activity_pace(_act(type="easy", distance=8), flat_paces) == "5:30"
        assert resolve_activity_pace(_act(type="long", distance=16), flat_paces) == "5:00"

    def test_descriptor_beats_type(self, flat_paces) -> None:
        act = _act(type="easy", distance=6, activity="T")
        assert resolve_activity_pace(act, flat_paces) == "4:30"

    def test_unknown_descriptor_falls_back_to_type(self, flat_paces) -> None:
        act = _act(type="interval", distance=6, activity="fartlek")
        assert resolve_activity_pace(act, flat_paces) == "4:00"

    def test_walk_is_recovery_plus_two_minutes(self, flat_paces) -> None:
        assert resolve_activity_pace(_act(type="walk", distance=30), flat_paces) == "8:00"

    def test_walk_with_range_recovery(self) -> None:
        paces = {"Recovery Km": "6:00-6:40"}
        assert resolve_activity_pace(_act(type="walk", distance=30), paces) == "8:00-8:40"

    def test_walk_without_recovery(self) -> None:
        assert resolve_activity_pace(_act(type="walk", distance=30), {}) == "N/A"

    def test_race_uses_prediction(self, flat_paces) -> None:
        def predictor(km):
            return PredictedRaceTime(time="00:40:00", pace="4:00") if km == 10 else None

        act = _act(type="race", distance=10, units="km")
        assert resolve_activity_pace(act, flat_paces, predictor) == "4:00"

    def test_race_without_prediction(self, flat_paces) -> None:
        act = _act(type="race", distance=8, units="km")
        assert resolve_activity_pace(act, flat_paces, lambda km: None) == "N/A"

    def test_rest_and_strength_have_no_pace(self, flat_paces) -> None:
        assert resolve_activity_pace(_act(type="offday"), flat_paces) == "N/A"
        assert resolve_activity_pace(_act(type="strength", distance=30), flat_paces) == "N/A"

    def test_context_pace_for(self, tables) -> None:
        context = resolve_paces(None, tables)
        act = _act(type="threshold", distance=20, units="min")
        assert context.pace_for(act) == context.paces["T Km"]
