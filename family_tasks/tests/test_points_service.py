"""
Tests for PointsService and DailyCompletionService.
"""
import pytest

from family_tasks.services.points_service import PointsService
from family_tasks.services.completion_service import DailyCompletionService
from family_tasks.exceptions import UserNotFoundException
from family_tasks.models import DailyCompletion


class TestPenaltyCalculation:

    @pytest.mark.parametrize("task_points, penalty", [
        (10, 5),
        (7, 3),
        (1, 0),
        (0, 0),
        (-5, -3),  # floor division
    ])
    def test_half_of_task_points_floored(self, task_points, penalty):
        assert PointsService.calculate_penalty(task_points) == penalty

    def test_interaction_deltas(self):
        assert PointsService.interaction_delta("like") == 2
        assert PointsService.interaction_delta("dislike") == -2


class TestAddPoints:

    def test_adds_and_subtracts(self, db_session, user):
        service = PointsService(db_session)

        service.add_points(user.id, 10)
        service.add_points(user.id, -3)
        db_session.commit()
        db_session.refresh(user)

        assert user.points == 7

    def test_points_may_go_negative(self, db_session, user):
        """No floor is enforced on the ledger"""
        PointsService(db_session).add_points(user.id, -12)
        db_session.commit()
        db_session.refresh(user)

        assert user.points == -12

    def test_unknown_user(self, db_session):
        with pytest.raises(UserNotFoundException):
            PointsService(db_session).add_points(999, 5)


class TestDailyCompletion:

    def test_record_then_check(self, db_session, user, today, yesterday):
        service = DailyCompletionService(db_session)

        assert not service.has_completed_today(user.id, today)
        assert service.record_completion(user.id, today)
        db_session.commit()

        assert service.has_completed_today(user.id, today)
        assert not service.has_completed_today(user.id, yesterday)

    def test_second_record_is_noop(self, db_session, user, today):
        """At most one marker per (user, day)"""
        service = DailyCompletionService(db_session)

        assert service.record_completion(user.id, today)
        assert not service.record_completion(user.id, today)
        db_session.commit()

        count = db_session.query(DailyCompletion).filter(DailyCompletion.user_id == user.id).count()
        assert count == 1
