"""
Template repository port (interface).

Live workout templates are mutable and owned by the user. Sessions never
hold a reference to them, only a snapshot taken at session start.
"""

from typing import Any, Dict, List, Optional, Protocol

from domain.models import TemplateSummary


class TemplateRepository(Protocol):
    """Repository interface for live workout templates."""

    def get_template(self, user_id: str, template_id: str) -> Optional[Dict[str, Any]]:
        """
        Get a live template in snapshot shape.

        Args:
            user_id: Owner of the template
            template_id: The template's ID

        Returns:
            Template dictionary (template_id, name, exercises, ...) if
            found, None otherwise
        """
        ...

    def list_templates(self, user_id: str) -> List[TemplateSummary]:
        """
        List a user's templates.

        Args:
            user_id: The user's ID

        Returns:
            Template summaries, including templates never used
        """
        ...
