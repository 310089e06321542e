"""
Tests for startup maintenance: schema auto-migration and the nightly sweep scheduler.
"""
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.pool import StaticPool

from family_tasks.auto_migrate import auto_migrate, get_default_value
from family_tasks.database import Base
from family_tasks.models import Task
from family_tasks.services.scheduler_service import parse_sweep_time, start_scheduler, scheduler


class TestAutoMigrate:

    def test_adds_missing_columns(self):
        engine = create_engine("sqlite://", poolclass=StaticPool)
        Base.metadata.create_all(bind=engine)
        with engine.begin() as conn:
            # Recreate tasks as an older release shipped it, without the sweep columns
            conn.execute(text("DROP TABLE tasks"))
            conn.execute(text(
                "CREATE TABLE tasks (id INTEGER PRIMARY KEY, user_id INTEGER NOT NULL, "
                "title TEXT NOT NULL, description TEXT NOT NULL, due_date TEXT NOT NULL)"
            ))

        added = auto_migrate(engine)

        columns = {column["name"] for column in inspect(engine).get_columns("tasks")}
        assert {"status", "penalty_applied", "task_points"} <= columns
        assert added >= 3

    def test_up_to_date_schema(self):
        engine = create_engine("sqlite://", poolclass=StaticPool)
        Base.metadata.create_all(bind=engine)

        assert auto_migrate(engine) == 0

    def test_default_rendering(self):
        assert get_default_value(Task.__table__.c.status) == "'pending'"
        assert get_default_value(Task.__table__.c.penalty_applied) == "0"
        assert get_default_value(Task.__table__.c.task_points) == "10"
        assert get_default_value(Task.__table__.c.completed_by) == "NULL"


class TestScheduler:

    def test_parse_sweep_time(self):
        assert parse_sweep_time("00:05") == (0, 5)
        assert parse_sweep_time("2330") == (23, 30)
        assert parse_sweep_time("99:99") == (0, 5)
        assert parse_sweep_time("") == (0, 5)

    def test_disabled_by_default(self):
        assert start_scheduler(enabled=False) is False
        assert not scheduler.running
