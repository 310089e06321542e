"""
Application-wide constants and environment-driven defaults.
"""
import os

# Task statuses
TASK_STATUS_PENDING = "pending"
TASK_STATUS_COMPLETED = "completed"
TASK_STATUS_MISSED = "missed"

# Task defaults
DEFAULT_TASK_POINTS = 10
DEFAULT_TASK_GOAL = "Complete the assigned task successfully"

# Interactions
INTERACTION_LIKE = "like"
INTERACTION_DISLIKE = "dislike"
INTERACTION_POINTS = {
    INTERACTION_LIKE: 2,
    INTERACTION_DISLIKE: -2,
}
INTERACTION_COOLDOWN_HOURS = 24

# Overdue penalty: floor(task_points / PENALTY_DIVISOR)
PENALTY_DIVISOR = 2

# Database
DEFAULT_DATABASE_URL = "sqlite:///./family_tasks.db"
DATABASE_URL = os.getenv("FAMILY_TASKS_DATABASE_URL", DEFAULT_DATABASE_URL)

# Logging
DEFAULT_LOG_DIRECTORY_PROD = "/var/log/family-tasks"
DEFAULT_LOG_DIRECTORY_DEV = "./logs"

# Sessions
SECRET_KEY = os.getenv("FAMILY_TASKS_SECRET_KEY", "dev-secret-key-change-me")
SESSION_ALGORITHM = "HS256"
SESSION_COOKIE_NAME = "family_tasks_session"
SESSION_MAX_AGE_SECONDS = int(os.getenv("FAMILY_TASKS_SESSION_MAX_AGE", str(60 * 60 * 24 * 14)))
SECURE_COOKIES = os.getenv("FAMILY_TASKS_SECURE_COOKIES", "0") == "1"

# Initial admin account, created only when the users table is empty
INITIAL_ADMIN_USERNAME = "admin"
INITIAL_ADMIN_PASSWORD = os.getenv("FAMILY_TASKS_ADMIN_PASSWORD", "admin")
INITIAL_ADMIN_EMAIL = "admin@example.com"

# CORS
CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "FAMILY_TASKS_CORS_ORIGINS",
        "http://localhost:5000,http://localhost:5173,http://localhost:3000",
    ).split(",")
    if origin.strip()
]

# AI collaborator
OPENAI_MODEL = os.getenv("FAMILY_TASKS_OPENAI_MODEL", "gpt-4o")
OPENAI_TIMEOUT_SECONDS = 30
MODERATE_INTERACTIONS = os.getenv("FAMILY_TASKS_MODERATE_INTERACTIONS", "0") == "1"

# Task generation defaults
DEFAULT_GENERATION_DAYS = 30
DEFAULT_NUMBER_OF_SESSIONS = 3
DEFAULT_PROBLEMS_PER_SESSION = 2
SESSION_DAY_SPACING = 10

# Nightly overdue sweep (off unless explicitly enabled)
AUTO_SWEEP_ENABLED = os.getenv("FAMILY_TASKS_AUTO_SWEEP", "0") == "1"
AUTO_SWEEP_TIME = os.getenv("FAMILY_TASKS_AUTO_SWEEP_TIME", "00:05")
