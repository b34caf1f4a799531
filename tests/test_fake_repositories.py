"""
Tests for fake repository implementations.

These tests verify that the fakes behave like the Supabase store they stand
in for, in particular the atomic, stale-checked completion commit.
"""
from datetime import datetime, timezone

import pytest

from application.exceptions import ConflictError, NotFoundError, StaleBestsError
from application.ports import SessionCommit
from domain.models import RecordKind
from tests.fakes import (
    COMPLETED_AT,
    USER_ID,
    create_repos,
    make_performance,
    make_record,
    make_session,
    make_set,
)

# All tests in this module are pure logic tests - mark as unit
pytestmark = pytest.mark.unit


@pytest.fixture
def scheduled():
    return make_session(completed_at=None)


def _completed(scheduled):
    return scheduled.complete(
        {"exercise-1": make_performance(make_set())}, COMPLETED_AT
    )


class TestFakeSessionRepository:
    """Tests for FakeSessionRepository."""

    def test_create_assigns_id(self):
        session_repo, _, _ = create_repos()

        stored = session_repo.create_scheduled(make_session(session_id=None, completed_at=None))

        assert stored.id is not None
        assert session_repo.get(stored.id) == stored

    def test_list_completed_window(self, scheduled):
        session_repo, _, _ = create_repos()
        session_repo.seed(
            [
                scheduled,
                make_session(session_id="jan", completed_at=datetime(2024, 1, 10, tzinfo=timezone.utc)),
                make_session(session_id="feb", completed_at=datetime(2024, 2, 10, tzinfo=timezone.utc)),
            ]
        )

        sessions = session_repo.list_completed(
            USER_ID, start=datetime(2024, 2, 1, tzinfo=timezone.utc)
        )

        assert [s.id for s in sessions] == ["feb"]

    def test_commit_writes_everything(self, scheduled):
        session_repo, record_repo, _ = create_repos()
        session_repo.seed([scheduled])
        record = make_record(RecordKind.SET_VOLUME, 400, session_id="sess-1")

        session_repo.commit_completion(SessionCommit(session=_completed(scheduled), records=[record]))

        assert session_repo.get("sess-1").is_completed
        assert record_repo.list_records(USER_ID) == [record]

    def test_commit_unknown_session(self, scheduled):
        session_repo, _, _ = create_repos()

        with pytest.raises(NotFoundError):
            session_repo.commit_completion(SessionCommit(session=_completed(scheduled)))

    def test_commit_twice_conflicts(self, scheduled):
        session_repo, _, _ = create_repos()
        session_repo.seed([scheduled])
        commit = SessionCommit(session=_completed(scheduled))
        session_repo.commit_completion(commit)

        with pytest.raises(ConflictError):
            session_repo.commit_completion(commit)

    def test_stale_previous_best_rejected_without_writes(self, scheduled):
        session_repo, record_repo, _ = create_repos()
        session_repo.seed([scheduled])
        record_repo.seed([make_record(RecordKind.SET_VOLUME, 500)])
        stale = make_record(RecordKind.SET_VOLUME, 600, session_id="sess-1")

        with pytest.raises(StaleBestsError):
            session_repo.commit_completion(
                SessionCommit(session=_completed(scheduled), records=[stale])
            )

        assert not session_repo.get("sess-1").is_completed
        assert len(record_repo.list_records(USER_ID)) == 1

    def test_reset(self, scheduled):
        session_repo, _, _ = create_repos()
        session_repo.seed([scheduled])

        session_repo.reset()

        assert session_repo.get("sess-1") is None


class TestFakePersonalRecordRepository:
    """Tests for FakePersonalRecordRepository."""

    def test_prior_bests_limited_to_requested_exercises(self):
        _, record_repo, _ = create_repos()
        record_repo.seed(
            [
                make_record(RecordKind.SET_VOLUME, 500),
                make_record(RecordKind.SET_VOLUME, 900, exercise_key="squat"),
            ]
        )

        bests = record_repo.get_prior_bests(USER_ID, ["squat"])

        assert bests.exercise_keys() == ["squat"]
        assert record_repo.prior_bests_calls == 1

    def test_records_scoped_to_user(self):
        _, record_repo, _ = create_repos()
        record_repo.seed([make_record(RecordKind.SET_VOLUME, 500, user_id="user-2")])

        assert record_repo.list_records(USER_ID) == []
        assert record_repo.current_best(USER_ID, "bench_press", RecordKind.SET_VOLUME) is None


class TestFakeTemplateRepository:
    """Tests for FakeTemplateRepository."""

    def test_templates_listed_by_name(self):
        _, _, template_repo = create_repos()
        template_repo.seed(USER_ID, "tpl-2", {"name": "Pull Day"})
        template_repo.seed(USER_ID, "tpl-1", {"name": "Legs"})
        template_repo.seed("user-2", "tpl-3", {"name": "Arms"})

        assert [t.template_id for t in template_repo.list_templates(USER_ID)] == ["tpl-1", "tpl-2"]

    def test_get_template_adds_id(self):
        _, _, template_repo = create_repos()
        template_repo.seed(USER_ID, "tpl-1", {"name": "Legs"})

        assert template_repo.get_template(USER_ID, "tpl-1") == {"template_id": "tpl-1", "name": "Legs"}
        assert template_repo.get_template("user-2", "tpl-1") is None
