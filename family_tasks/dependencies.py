"""
Request-scoped providers shared by the routers.
Overridden in tests through app.dependency_overrides.
"""
from datetime import date

from family_tasks.services.ai_service import AIService

_ai_service = None


def get_ai_service() -> AIService:
    """Shared AI collaborator; the OpenAI client is created on first use"""
    global _ai_service
    if _ai_service is None:
        _ai_service = AIService()
    return _ai_service


def get_today() -> date:
    """Calendar day used for due dates, streaks and the overdue sweep"""
    return date.today()
