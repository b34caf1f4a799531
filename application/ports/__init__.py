"""
Repository Interfaces (Ports) for the workout performance engine.

This package defines abstract interfaces that decouple the engine and its
use cases from infrastructure (database). Implementations are provided in
the infrastructure layer.

Architecture follows the Ports & Adapters (Hexagonal) pattern:
- Ports: Abstract interfaces defined here (what the use cases need)
- Adapters: Concrete implementations in infrastructure/ (how it's provided)

Usage:
    from application.ports import SessionRepository, PersonalRecordRepository

    class CompleteSessionUseCase:
        def __init__(self, session_repo: SessionRepository, ...):
            self._session_repo = session_repo
"""

# Session persistence
from application.ports.session_repository import SessionCommit, SessionRepository

# Personal record log
from application.ports.record_repository import PersonalRecordRepository

# Live templates
from application.ports.template_repository import TemplateRepository

__all__ = [
    "SessionRepository",
    "SessionCommit",
    "PersonalRecordRepository",
    "TemplateRepository",
]
