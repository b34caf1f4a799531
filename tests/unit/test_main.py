"""
Unit tests for backend/main.py
"""

from unittest.mock import MagicMock, patch

import pytest

from application.use_cases import (
    CompleteSessionUseCase,
    GetAnalyticsUseCase,
    StartSessionUseCase,
)
from backend.main import Services, create_services
from backend.settings import Settings


@pytest.mark.unit
class TestCreateServices:
    """Test the create_services() factory function."""

    def test_returns_wired_services(self):
        settings = Settings(environment="test", _env_file=None)

        services = create_services(settings=settings, client=MagicMock())

        assert isinstance(services, Services)
        assert isinstance(services.start_session, StartSessionUseCase)
        assert isinstance(services.complete_session, CompleteSessionUseCase)
        assert isinstance(services.get_analytics, GetAnalyticsUseCase)
        assert services.settings is settings
        assert services.engine.settings is settings

    def test_uses_default_settings_when_none_provided(self):
        """create_services() should use get_settings() when no settings provided."""
        with patch("backend.main.get_settings") as mock_get_settings:
            mock_get_settings.return_value = Settings(environment="test", _env_file=None)

            services = create_services(client=MagicMock())

            mock_get_settings.assert_called_once()
            assert services.settings.is_test

    def test_uses_configured_client_when_none_provided(self):
        settings = Settings(environment="test", _env_file=None)
        with patch("backend.main.get_supabase_client") as mock_get_client:
            mock_get_client.return_value = MagicMock()

            create_services(settings=settings)

            mock_get_client.assert_called_once()

    def test_missing_client_raises(self):
        settings = Settings(environment="test", _env_file=None)
        with patch("backend.main.get_supabase_client", return_value=None):
            with pytest.raises(RuntimeError, match="Supabase"):
                create_services(settings=settings)

    def test_sentry_initialized_from_settings(self):
        settings = Settings(
            environment="test",
            sentry_dsn="https://test@sentry.io/123",
            _env_file=None,
        )
        with patch("backend.main.init_sentry") as mock_init:
            create_services(settings=settings, client=MagicMock())

        mock_init.assert_called_once_with(settings)
