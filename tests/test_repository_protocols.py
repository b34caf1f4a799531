"""
Tests for repository protocol definitions.

These tests verify that:
1. Protocol definitions are valid and importable
2. Protocols define the expected methods
3. Fake and Supabase implementations provide every protocol method
"""
import inspect

import pytest

from application.ports import (
    PersonalRecordRepository,
    SessionCommit,
    SessionRepository,
    TemplateRepository,
)
from infrastructure.db import (
    SupabasePersonalRecordRepository,
    SupabaseSessionRepository,
    SupabaseTemplateRepository,
)
from tests.fakes import (
    FakePersonalRecordRepository,
    FakeSessionRepository,
    FakeTemplateRepository,
    make_session,
)

# All tests in this module are pure logic tests - mark as unit
pytestmark = pytest.mark.unit


PROTOCOL_METHODS = {
    SessionRepository: ["get", "create_scheduled", "list_completed", "commit_completion"],
    PersonalRecordRepository: ["get_prior_bests", "list_records"],
    TemplateRepository: ["get_template", "list_templates"],
}

IMPLEMENTATIONS = [
    (SessionRepository, FakeSessionRepository),
    (SessionRepository, SupabaseSessionRepository),
    (PersonalRecordRepository, FakePersonalRecordRepository),
    (PersonalRecordRepository, SupabasePersonalRecordRepository),
    (TemplateRepository, FakeTemplateRepository),
    (TemplateRepository, SupabaseTemplateRepository),
]


class TestProtocolDefinitions:
    """Test protocol method sets."""

    @pytest.mark.parametrize("protocol,methods", list(PROTOCOL_METHODS.items()))
    def test_has_required_methods(self, protocol, methods):
        for method in methods:
            assert hasattr(protocol, method), f"{protocol.__name__} missing {method}"

    def test_session_commit_defaults(self):
        commit = SessionCommit(session=make_session())

        assert commit.records == []
        assert commit.stats_delta is None


class TestImplementations:
    """Implementations expose the protocol methods with matching parameters."""

    @pytest.mark.parametrize("protocol,implementation", IMPLEMENTATIONS)
    def test_methods_match(self, protocol, implementation):
        for method in PROTOCOL_METHODS[protocol]:
            expected = inspect.signature(getattr(protocol, method))
            actual = inspect.signature(getattr(implementation, method))
            assert list(actual.parameters) == list(expected.parameters), (
                f"{implementation.__name__}.{method} parameters differ"
            )
