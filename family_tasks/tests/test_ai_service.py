"""
Tests for AIService response handling, with the OpenAI client stubbed out.
"""
import json
import pytest
from types import SimpleNamespace
from unittest.mock import MagicMock

from family_tasks.services.ai_service import AIService
from family_tasks.exceptions import AIServiceException


def fake_client(content):
    client = MagicMock()
    message = SimpleNamespace(content=content if isinstance(content, str) or content is None else json.dumps(content))
    client.chat.completions.create.return_value = SimpleNamespace(choices=[SimpleNamespace(message=message)])
    return client


class TestVerifyAnswer:

    def test_parses_verdict(self):
        service = AIService(client=fake_client({
            "correct": True, "explanation": "Right", "confidence": 0.95, "hint": None
        }))

        result = service.verify_answer("What is 6 x 7?", "Multiplication", "42")

        assert result.correct is True
        assert result.explanation == "Right"
        assert result.confidence == 0.95
        assert result.hint is None

    def test_confidence_is_clamped(self):
        service = AIService(client=fake_client({
            "correct": False, "explanation": "No", "confidence": 3, "hint": "Count again"
        }))

        result = service.verify_answer("q", "g", "a")

        assert result.confidence == 1.0
        assert result.hint == "Count again"

    def test_sends_json_response_format(self):
        client = fake_client({"correct": True, "explanation": "ok", "confidence": 1})
        AIService(client=client, model="gpt-test").verify_answer("q", "g", "a")

        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-test"
        assert kwargs["response_format"] == {"type": "json_object"}
        assert "Student's Response: a" in kwargs["messages"][1]["content"]

    @pytest.mark.parametrize("content", [
        "not json",
        None,
        {"correct": "yes", "explanation": "x", "confidence": 1},
        {"correct": True, "confidence": 1},
        {"correct": True, "explanation": "x", "confidence": True},
        {"correct": False, "explanation": "x", "confidence": 0.5, "hint": 7},
    ])
    def test_malformed_output_raises(self, content):
        service = AIService(client=fake_client(content))

        with pytest.raises(AIServiceException):
            service.verify_answer("q", "g", "a")


class TestVerifyInteraction:

    def test_approved(self):
        service = AIService(client=fake_client({"approved": True, "message": "Nice", "type": "like"}))

        assert service.verify_interaction("like", "helped") == {"approved": True, "message": "Nice"}

    def test_type_mismatch_raises(self):
        service = AIService(client=fake_client({"approved": True, "message": "Nice", "type": "dislike"}))

        with pytest.raises(AIServiceException):
            service.verify_interaction("like", "helped")


class TestGenerateTasks:

    def test_sorted_by_day(self):
        service = AIService(client=fake_client({"tasks": [
            {"title": "B", "description": "Solve 2x = 8", "category": "Math", "goal": "Equations", "dayNumber": 20},
            {"title": "A", "description": "Solve x + 1 = 3", "category": "Math", "goal": "Equations", "dayNumber": 10},
        ]}))

        tasks = service.generate_tasks("Algebra", number_of_sessions=2, problems_per_session=1)

        assert [t.title for t in tasks] == ["A", "B"]
        assert [t.day_number for t in tasks] == [10, 20]

    def test_incomplete_task_raises(self):
        service = AIService(client=fake_client({"tasks": [{"title": "A", "dayNumber": 10}]}))

        with pytest.raises(AIServiceException):
            service.generate_tasks("Algebra")

    def test_missing_tasks_array_raises(self):
        with pytest.raises(AIServiceException):
            AIService(client=fake_client({"plan": []})).generate_tasks("Algebra")


class TestEnhanceTask:

    def test_returns_fields(self):
        service = AIService(client=fake_client({
            "title": "Tidy your room", "description": "Put toys away", "category": "Household Chores"
        }))

        result = service.enhance_task("clean room")

        assert result.title == "Tidy your room"
        assert result.category == "Household Chores"


def test_missing_api_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    with pytest.raises(AIServiceException):
        AIService().verify_answer("q", "g", "a")
