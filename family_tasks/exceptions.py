"""
Custom exceptions for the family task tracker.
Each exception carries the HTTP status the API layer answers with.
"""


class FamilyTasksException(Exception):
    """Base exception for the family task tracker"""
    status_code = 400


class UserNotFoundException(FamilyTasksException):
    """Raised when a user is not found"""
    status_code = 404

    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__(f"User with ID {user_id} not found")


class TaskNotFoundException(FamilyTasksException):
    """Raised when a task is not found"""
    status_code = 404

    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"Task with ID {task_id} not found")


class InteractionNotFoundException(FamilyTasksException):
    """Raised when an interaction is not found"""
    status_code = 404

    def __init__(self, interaction_id: int):
        self.interaction_id = interaction_id
        super().__init__(f"Interaction with ID {interaction_id} not found")


class GenerationNotFoundException(FamilyTasksException):
    """Raised when a task generation is not found"""
    status_code = 404

    def __init__(self, generation_id: int):
        self.generation_id = generation_id
        super().__init__(f"Task generation with ID {generation_id} not found")


class TaskNotOpenException(FamilyTasksException):
    """Raised when submitting against a task that already left the pending state"""
    status_code = 409

    def __init__(self, task_id: int, status: str):
        self.task_id = task_id
        self.status = status
        super().__init__(f"Task {task_id} is {status} and no longer accepts submissions")


class DuplicateUsernameException(FamilyTasksException):
    """Raised when registering a username that already exists"""

    def __init__(self, username: str):
        self.username = username
        super().__init__("Username already exists")


class SelfInteractionException(FamilyTasksException):
    """Raised when a user tries to like or dislike themselves"""

    def __init__(self):
        super().__init__("Cannot interact with yourself")


class InteractionRateLimitException(FamilyTasksException):
    """Raised when the giver already interacted with the receiver in the last 24 hours"""
    status_code = 429

    def __init__(self, giver_id: int, receiver_id: int):
        self.giver_id = giver_id
        self.receiver_id = receiver_id
        super().__init__("You can only interact with a user once every 24 hours")


class PermissionDeniedException(FamilyTasksException):
    """Raised when the current user may not perform an action"""
    status_code = 403

    def __init__(self, message: str = "Admin access required"):
        super().__init__(message)


class AIServiceException(FamilyTasksException):
    """Raised when the AI collaborator fails or returns malformed output"""
    status_code = 502

    def __init__(self, operation: str, details: str):
        self.operation = operation
        self.details = details
        super().__init__(f"Failed to {operation}: {details}")


class DatabaseException(FamilyTasksException):
    """Raised when database operations fail"""
    status_code = 500

    def __init__(self, operation: str, details: str):
        self.operation = operation
        self.details = details
        super().__init__(f"Database {operation} failed: {details}")


class ValidationException(FamilyTasksException):
    """Raised when data validation fails"""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Validation error for {field}: {message}")
