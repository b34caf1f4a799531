"""
Unit tests for domain models.

These tests verify:
- Model validation
- Model serialization/deserialization
- Computed properties
- Domain methods
"""

import json
import pytest
from datetime import datetime, timezone

from pydantic import ValidationError


@pytest.mark.unit
class TestWeightConversion:
    """Tests for convert_weight."""

    def test_same_unit_unchanged(self):
        from domain.models import convert_weight

        assert convert_weight(100, "kg", "kg") == 100

    def test_lb_to_kg(self):
        from domain.models import convert_weight

        assert convert_weight(225, "lb", "kg") == pytest.approx(102.058, abs=1e-3)

    def test_kg_to_lb(self):
        from domain.models import convert_weight

        assert convert_weight(100, "kg", "lb") == pytest.approx(220.462, abs=1e-3)

    def test_unknown_unit_rejected(self):
        from domain.models import convert_weight

        with pytest.raises(ValueError):
            convert_weight(100, "kg", "stone")


@pytest.mark.unit
class TestTemplateModels:
    """Tests for SetSpec, RepRange and TemplateSnapshot."""

    def test_rep_range_bounds(self):
        from domain.models import RepRange

        assert str(RepRange(min=8, max=12)) == "8-12"
        with pytest.raises(ValidationError):
            RepRange(min=12, max=8)

    def test_set_spec_accepts_fixed_or_range(self):
        from domain.models import RepRange, SetSpec

        assert SetSpec(id="set-1", target_reps=8).target_reps == 8
        spec = SetSpec(id="set-2", target_reps={"min": 6, "max": 10})
        assert isinstance(spec.target_reps, RepRange)

    def test_negative_target_rejected(self):
        from domain.models import SetSpec

        with pytest.raises(ValidationError):
            SetSpec(id="set-1", target_weight=-5)

    @pytest.mark.parametrize("value", [float("nan"), float("inf")])
    def test_non_finite_target_rejected(self, value):
        from domain.models import SetSpec

        with pytest.raises(ValidationError):
            SetSpec(id="set-1", target_weight=value)

    def test_capture_deep_copies_dict(self):
        from domain.models import TemplateSnapshot

        live = {
            "name": "Push Day",
            "exercises": [
                {
                    "id": "exercise-1",
                    "exercise_key": "bench_press",
                    "name": "Bench Press",
                    "muscles": ["chest"],
                    "sets": [{"id": "set-1", "target_reps": 8}],
                }
            ],
        }

        snapshot = TemplateSnapshot.capture(live)
        live["exercises"][0]["muscles"].append("triceps")
        live["exercises"][0]["sets"].append({"id": "set-2"})

        assert snapshot.exercises[0].muscles == ["chest"]
        assert snapshot.planned_set_count == 1

    def test_capture_of_snapshot_is_a_copy(self):
        from tests.fakes import make_snapshot
        from domain.models import TemplateSnapshot

        original = make_snapshot()
        copy = TemplateSnapshot.capture(original)

        assert copy == original
        assert copy is not original
        assert copy.exercises[0] is not original.exercises[0]

    def test_snapshot_is_frozen(self):
        from tests.fakes import make_snapshot

        snapshot = make_snapshot()
        with pytest.raises(ValidationError):
            snapshot.name = "Changed"

    def test_lookups(self):
        from tests.fakes import make_snapshot

        snapshot = make_snapshot(sets=2)

        assert snapshot.get_exercise("exercise-1").name == "Bench Press"
        assert snapshot.get_exercise("missing") is None
        assert snapshot.exercise_name("bench_press") == "Bench Press"
        assert snapshot.muscles_for("exercise-1") == ["chest", "triceps"]
        assert snapshot.muscles_for("missing") == []
        assert snapshot.exercises[0].set_ids == {"set-1", "set-2"}

    def test_json_round_trip(self):
        from tests.fakes import make_snapshot
        from domain.models import TemplateSnapshot

        snapshot = make_snapshot()
        restored = TemplateSnapshot.model_validate(json.loads(snapshot.model_dump_json()))

        assert restored == snapshot


@pytest.mark.unit
class TestPerformedSet:
    """Tests for PerformedSet status."""

    @pytest.mark.parametrize(
        "completed,skipped,status",
        [
            (True, False, "completed"),
            (False, True, "skipped"),
            (False, False, "pending"),
            (True, True, "conflicting"),
        ],
    )
    def test_status(self, completed, skipped, status):
        from domain.models import PerformedSet

        performed = PerformedSet(set_id="set-1", completed=completed, skipped=skipped)
        assert performed.status.value == status

    def test_has_load(self):
        from tests.fakes import make_set

        assert make_set(reps=5, weight=100).has_load
        assert not make_set(reps=5, weight=None).has_load

    def test_attempted_exercise(self):
        from tests.fakes import make_performance, make_set

        assert make_performance(make_set(completed=False, skipped=True)).attempted
        assert not make_performance(make_set(completed=False)).attempted


@pytest.mark.unit
class TestSession:
    """Tests for the Session aggregate."""

    def test_status_follows_completion_time(self):
        from tests.fakes import make_session
        from domain.models import SessionStatus

        assert make_session(completed_at=None).status == SessionStatus.SCHEDULED
        assert make_session().status == SessionStatus.COMPLETED

    def test_complete_returns_completed_copy(self):
        from tests.fakes import COMPLETED_AT, make_performance, make_session, make_set

        scheduled = make_session(completed_at=None, notes="Felt good")
        performance = {"exercise-1": make_performance(make_set())}

        completed = scheduled.complete(performance, COMPLETED_AT, duration_seconds=1800)

        assert completed.is_completed
        assert completed.duration_seconds == 1800
        assert completed.notes == "Felt good"
        assert completed.template_snapshot == scheduled.template_snapshot
        assert not scheduled.is_completed

    def test_complete_twice_rejected(self):
        from tests.fakes import COMPLETED_AT, make_session

        with pytest.raises(ValueError, match="already completed"):
            make_session().complete({}, COMPLETED_AT)

    def test_exercise_name_for_ad_hoc_slot(self):
        from tests.fakes import make_performance, make_session, make_set

        session = make_session(
            {
                "exercise-1": make_performance(make_set()),
                "extra": make_performance(make_set("a-1", is_ad_hoc=True), exercise_key="curl"),
            }
        )

        assert session.exercise_name("exercise-1") == "Bench Press"
        assert session.exercise_name("extra") == "curl"
        assert session.exercise_name("missing") == "missing"

    def test_negative_duration_rejected(self):
        from tests.fakes import make_session

        with pytest.raises(ValidationError):
            make_session(duration_seconds=-1)

    def test_naive_timestamps_read_as_utc(self):
        from tests.fakes import make_session

        session = make_session(
            completed_at=datetime(2024, 1, 15, 10, 30),
            started_at=datetime(2024, 1, 15, 9, 30),
        )

        assert session.completed_at == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
        assert session.started_at.tzinfo is not None

    def test_aware_timestamps_converted_to_utc(self):
        from datetime import timedelta
        from tests.fakes import make_session

        plus_two = timezone(timedelta(hours=2))
        session = make_session(completed_at=datetime(2024, 1, 15, 12, 30, tzinfo=plus_two))

        assert session.completed_at == datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
        assert session.completed_at.utcoffset() == timedelta(0)

    def test_complete_with_naive_time_is_aware(self):
        from tests.fakes import make_performance, make_session, make_set

        completed = make_session(completed_at=None).complete(
            {"exercise-1": make_performance(make_set())}, datetime(2024, 1, 15, 10, 30)
        )

        assert completed.completed_at.tzinfo is not None


@pytest.mark.unit
class TestRecords:
    """Tests for PersonalRecord keys and PriorBests."""

    def test_qualifier_normalized_in_key(self):
        from domain.models import RecordKind, record_key

        assert record_key("bench_press", RecordKind.WEIGHT_AT_REPS, 8) == record_key(
            "bench_press", RecordKind.WEIGHT_AT_REPS, 8.0
        )
        assert record_key("bench_press", RecordKind.REPS_AT_WEIGHT, 82.5) == record_key(
            "bench_press", RecordKind.REPS_AT_WEIGHT, 82.500000001
        )

    def test_prior_bests_keep_maximum(self):
        from tests.fakes import make_record
        from domain.models import PriorBests, RecordKind

        bests = PriorBests.from_records(
            [
                make_record(RecordKind.SET_VOLUME, 900),
                make_record(RecordKind.SET_VOLUME, 1000),
                make_record(RecordKind.SET_VOLUME, 950),
            ]
        )

        assert bests.get("bench_press", RecordKind.SET_VOLUME) == 1000
        assert bests.exercise_keys() == ["bench_press"]

    def test_with_records_never_lowers(self):
        from tests.fakes import make_record
        from domain.models import PriorBests, RecordKind

        bests = PriorBests.from_records([make_record(RecordKind.ESTIMATED_1RM, 120)])
        advanced = bests.with_records([make_record(RecordKind.ESTIMATED_1RM, 110)])

        assert advanced.get("bench_press", RecordKind.ESTIMATED_1RM) == 120

    def test_reps_at_weight_converted_by_qualifier(self):
        from tests.fakes import make_record
        from domain.models import PriorBests, RecordKind

        bests = PriorBests.from_records(
            [make_record(RecordKind.REPS_AT_WEIGHT, 10, 100, unit="kg")], unit="kg"
        )

        # 100 kg is 220.46 lb; the rep count itself is unit-free
        assert bests.get_in("lb", "bench_press", RecordKind.REPS_AT_WEIGHT, 220.46) == 10

    def test_weight_values_converted(self):
        from tests.fakes import make_record
        from domain.models import PriorBests, RecordKind

        bests = PriorBests.from_records([make_record(RecordKind.WEIGHT_AT_REPS, 100, 5)])

        assert bests.get_in("lb", "bench_press", RecordKind.WEIGHT_AT_REPS, 5) == pytest.approx(
            220.462, abs=1e-3
        )

    def test_volume_kinds(self):
        from domain.models import RecordKind

        assert RecordKind.SET_VOLUME.is_volume
        assert RecordKind.SESSION_VOLUME.is_volume
        assert not RecordKind.ESTIMATED_1RM.is_volume
        assert not RecordKind.REPS_AT_WEIGHT.is_weight

    def test_with_records_on_metrics(self):
        from tests.fakes import make_record
        from domain.models import RecordKind, SessionMetrics

        records = [
            make_record(RecordKind.WEIGHT_AT_REPS, 55, 8),
            make_record(RecordKind.SESSION_VOLUME, 2400),
        ]

        metrics = SessionMetrics().with_records(records)

        assert len(metrics.personal_records) == 2
        assert [r.kind for r in metrics.volume_records] == [RecordKind.SESSION_VOLUME]


@pytest.mark.unit
class TestAnalyticsWindow:
    """Tests for AnalyticsWindow."""

    def test_inverted_window_rejected(self):
        from domain.models import AnalyticsWindow

        with pytest.raises(ValidationError):
            AnalyticsWindow(
                start=datetime(2024, 2, 1, tzinfo=timezone.utc),
                end=datetime(2024, 1, 1, tzinfo=timezone.utc),
            )

    def test_resolve_defaults(self):
        from datetime import timedelta
        from domain.models import AnalyticsWindow

        now = datetime(2024, 2, 1, tzinfo=timezone.utc)

        assert AnalyticsWindow().resolve(now, 30) == (now - timedelta(days=30), now)
        assert AnalyticsWindow().resolve(now, None) == (None, now)

    def test_naive_bounds_read_as_utc(self):
        from domain.models import AnalyticsWindow

        window = AnalyticsWindow(start=datetime(2024, 1, 1), end=datetime(2024, 1, 31))
        now = datetime(2024, 2, 1, tzinfo=timezone.utc)

        assert window.start == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert window.contains(datetime(2024, 1, 10, tzinfo=timezone.utc), now, None)

    def test_contains_is_inclusive(self):
        from domain.models import AnalyticsWindow

        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        end = datetime(2024, 1, 31, tzinfo=timezone.utc)
        window = AnalyticsWindow(start=start, end=end)

        assert window.contains(start, end, None)
        assert window.contains(end, end, None)
        assert not window.contains(datetime(2023, 12, 31, tzinfo=timezone.utc), end, None)
