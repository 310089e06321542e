"""
AI collaborator.
Thin prompt wrappers around the OpenAI chat API for grading answers,
moderating interactions and drafting tasks.
"""
import json
import logging
import os
from typing import List, Optional

from openai import OpenAI, OpenAIError
from pydantic import ValidationError

from family_tasks.schemas import VerificationResult, GeneratedTask, EnhancedTask
from family_tasks.exceptions import AIServiceException
from family_tasks.constants import (
    OPENAI_MODEL, OPENAI_TIMEOUT_SECONDS, SESSION_DAY_SPACING,
    DEFAULT_NUMBER_OF_SESSIONS, DEFAULT_PROBLEMS_PER_SESSION
)

logger = logging.getLogger("family_tasks.ai")

VERIFY_ANSWER_PROMPT = """You are an encouraging educational mentor. Your goal is to help students learn through guided discovery.

Key Guidelines:
- Never give away answers.
- Focus on the learning process.
- If the answer is incorrect, provide a subtle hint.
- Validate their thought process.
- Be encouraging and supportive.

Respond ONLY with valid JSON in exactly this format:
{
  "correct": boolean,
  "explanation": string,
  "confidence": number,
  "hint": string|null
}"""

VERIFY_INTERACTION_PROMPT = """You are a fair moderator for a family task management platform.
Evaluate the interaction request and respond ONLY with valid JSON in exactly this format:
{
  "approved": boolean,
  "message": string,
  "type": "like" | "dislike"
}"""

GENERATE_TASKS_PROMPT = (
    "You are an expert educational task planner. Always return your response as valid JSON "
    "with a 'tasks' array. Each task must contain a concrete, solvable problem statement in "
    "the 'description' field."
)

ENHANCE_TASK_PROMPT = (
    "You are an expert at creating clear, practical task descriptions for families. "
    "Always return only valid JSON with the exact fields requested."
)


class AIService:
    """Service wrapping the OpenAI chat completions API"""

    def __init__(self, client: Optional[OpenAI] = None, model: str = OPENAI_MODEL):
        self._client = client
        self.model = model

    @property
    def client(self) -> OpenAI:
        if self._client is None:
            api_key = os.getenv("OPENAI_API_KEY", "").strip()
            if not api_key:
                raise AIServiceException("reach AI service", "OPENAI_API_KEY is not set")
            self._client = OpenAI(api_key=api_key, timeout=OPENAI_TIMEOUT_SECONDS)
        return self._client

    def _complete_json(self, operation: str, system_prompt: str, user_prompt: str,
                       max_tokens: int = 300, temperature: Optional[float] = None) -> dict:
        """Run one chat completion and parse its content as a JSON object"""
        params = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "max_tokens": max_tokens,
            "response_format": {"type": "json_object"},
        }
        if temperature is not None:
            params["temperature"] = temperature

        try:
            response = self.client.chat.completions.create(**params)
        except OpenAIError as e:
            logger.error(f"OpenAI request failed ({operation}): {e}")
            raise AIServiceException(operation, str(e))

        content = response.choices[0].message.content
        if not content:
            raise AIServiceException(operation, "empty response from AI")

        try:
            result = json.loads(content)
        except json.JSONDecodeError:
            logger.error(f"Malformed AI response ({operation}): {content!r}")
            raise AIServiceException(operation, "AI response is not valid JSON")

        if not isinstance(result, dict):
            raise AIServiceException(operation, "AI response is not a JSON object")
        return result

    def verify_answer(self, question: str, goal: Optional[str], answer: str) -> VerificationResult:
        """
        Grade a submitted answer.

        Confidence is clamped to [0, 1]; a missing or wrongly typed
        field raises AIServiceException.
        """
        operation = "verify answer"
        result = self._complete_json(
            operation,
            VERIFY_ANSWER_PROMPT,
            f"Learning Goal: {goal}\nQuestion: {question}\nStudent's Response: {answer}\n\n"
            "Evaluate their understanding and provide guidance.",
            max_tokens=300,
        )

        if (
            not isinstance(result.get("correct"), bool)
            or not isinstance(result.get("explanation"), str)
            or not isinstance(result.get("confidence"), (int, float))
            or isinstance(result.get("confidence"), bool)
            or not isinstance(result.get("hint"), (str, type(None)))
        ):
            raise AIServiceException(operation, "AI response missing required fields or fields are of the wrong type")

        return VerificationResult(
            correct=result["correct"],
            explanation=result["explanation"],
            confidence=max(0.0, min(1.0, float(result["confidence"]))),
            hint=result.get("hint") or None,
        )

    def verify_interaction(self, interaction_type: str, reason: str) -> dict:
        """Moderate a like/dislike carrying a reason; returns {approved, message}"""
        operation = "verify interaction"
        result = self._complete_json(
            operation,
            VERIFY_INTERACTION_PROMPT,
            f'Evaluate a "{interaction_type}" interaction with reason: "{reason}"',
            max_tokens=150,
        )

        if not isinstance(result.get("approved"), bool):
            raise AIServiceException(operation, "'approved' must be a boolean")
        message = result.get("message")
        if not isinstance(message, str) or not message.strip():
            raise AIServiceException(operation, "'message' must be a non-empty string")
        if result.get("type") not in ("like", "dislike"):
            raise AIServiceException(operation, f"'type' must be 'like' or 'dislike', received {result.get('type')}")
        if result["approved"] and result["type"] != interaction_type:
            raise AIServiceException(operation, f"type mismatch: AI returned {result['type']} but expected {interaction_type}")

        return {"approved": result["approved"], "message": message}

    def generate_tasks(self, goal: str,
                       number_of_sessions: int = DEFAULT_NUMBER_OF_SESSIONS,
                       problems_per_session: int = DEFAULT_PROBLEMS_PER_SESSION) -> List[GeneratedTask]:
        """
        Draft a learning plan of concrete problems.

        Sessions are scheduled every SESSION_DAY_SPACING days. Returned
        tasks are sorted by day_number.
        """
        operation = "generate tasks"
        schedule = "\n".join(
            f"Session {i + 1}: Day {(i + 1) * SESSION_DAY_SPACING}"
            for i in range(number_of_sessions)
        )
        prompt = (
            f"Generate {number_of_sessions} learning sessions with {problems_per_session} tasks per session.\n"
            f"Learning goal: {goal}\n\n"
            f"Schedule each session on a specific day:\n{schedule}\n\n"
            f"Return a JSON object with a 'tasks' array containing exactly "
            f"{number_of_sessions * problems_per_session} tasks.\n"
            "Each task in the array should have:\n"
            "- title: A concise title for the task (max 100 characters)\n"
            "- description: A concrete problem statement the student can solve\n"
            "- category: The subject area (e.g., \"Mathematics\", \"Programming\")\n"
            "- goal: A specific learning objective, distinct from the prompt text\n"
            "- dayNumber: The day number of this task's session"
        )
        result = self._complete_json(operation, GENERATE_TASKS_PROMPT, prompt,
                                     max_tokens=2000, temperature=0.7)

        raw_tasks = result.get("tasks")
        if not isinstance(raw_tasks, list):
            raise AIServiceException(operation, "missing tasks array")

        tasks = []
        for index, raw in enumerate(raw_tasks):
            if not isinstance(raw, dict):
                raise AIServiceException(operation, f"task at index {index} is not an object")
            if "day_number" not in raw:
                raw = {**raw, "day_number": raw.get("dayNumber")}
            try:
                tasks.append(GeneratedTask(**raw))
            except ValidationError:
                raise AIServiceException(operation, f"task at index {index} is missing required fields")

        tasks.sort(key=lambda t: t.day_number)
        logger.info(f"Generated {len(tasks)} task(s) for goal {goal!r}")
        return tasks

    def enhance_task(self, description: str) -> EnhancedTask:
        """Turn a rough description into a title, refined description and category"""
        operation = "enhance task"
        prompt = (
            "Given this task description, generate a concise title (max 100 chars), a refined "
            "task description, and suggest an appropriate category.\n\n"
            f"Task: {description}\n\n"
            "The task can be any type (e.g., household chores, family activities, academic work, "
            "personal growth). Make the title action-oriented when applicable.\n\n"
            'Return a JSON object with exactly these fields: "title", "description", "category".'
        )
        result = self._complete_json(operation, ENHANCE_TASK_PROMPT, prompt,
                                     max_tokens=1000, temperature=0.7)
        try:
            return EnhancedTask(**result)
        except ValidationError:
            raise AIServiceException(operation, "AI response missing title, description or category")
