"""
Tests for InteractionService.
"""
import pytest
from datetime import datetime, timedelta

from family_tasks.services.interaction_service import InteractionService
from family_tasks.exceptions import (
    SelfInteractionException, InteractionRateLimitException,
    UserNotFoundException, InteractionNotFoundException
)
from family_tasks.tests.conftest import create_user

NOW = datetime(2024, 1, 11, 18, 30)


@pytest.fixture
def receiver(db_session):
    return create_user(db_session, username="bob", points=10)


class TestCreateInteraction:

    def test_like_adds_two_points(self, db_session, user, receiver):
        result = InteractionService(db_session).create_interaction(user.id, receiver.id, "like", now=NOW)

        db_session.refresh(receiver)
        db_session.refresh(user)
        assert result["interaction"].approved is True
        assert result["message"] == "Successfully liked the user."
        assert receiver.points == 12
        assert user.points == 0  # giver unaffected

    def test_dislike_removes_two_points(self, db_session, user, receiver):
        InteractionService(db_session).create_interaction(user.id, receiver.id, "dislike", now=NOW)

        db_session.refresh(receiver)
        assert receiver.points == 8

    def test_cannot_interact_with_yourself(self, db_session, user):
        with pytest.raises(SelfInteractionException):
            InteractionService(db_session).create_interaction(user.id, user.id, "like", now=NOW)

    def test_unknown_receiver(self, db_session, user):
        with pytest.raises(UserNotFoundException):
            InteractionService(db_session).create_interaction(user.id, 999, "like", now=NOW)

    def test_unknown_receiver_is_not_moderated(self, db_session, user, ai_service):
        service = InteractionService(db_session, ai_service, moderate=True)

        with pytest.raises(UserNotFoundException):
            service.create_interaction(user.id, 999, "like", reason="Helped with dishes", now=NOW)

        ai_service.verify_interaction.assert_not_called()

    def test_one_per_pair_per_24_hours(self, db_session, user, receiver):
        service = InteractionService(db_session)
        service.create_interaction(user.id, receiver.id, "like", now=NOW)

        with pytest.raises(InteractionRateLimitException):
            service.create_interaction(user.id, receiver.id, "dislike", now=NOW + timedelta(hours=23))

        db_session.refresh(receiver)
        assert receiver.points == 12

    def test_window_is_rolling(self, db_session, user, receiver):
        service = InteractionService(db_session)
        service.create_interaction(user.id, receiver.id, "like", now=NOW)
        service.create_interaction(user.id, receiver.id, "like", now=NOW + timedelta(hours=24, minutes=1))

        db_session.refresh(receiver)
        assert receiver.points == 14

    def test_limit_is_per_ordered_pair(self, db_session, user, receiver):
        service = InteractionService(db_session)
        service.create_interaction(user.id, receiver.id, "like", now=NOW)
        service.create_interaction(receiver.id, user.id, "like", now=NOW)

        db_session.refresh(user)
        assert user.points == 2

    def test_rejected_by_moderation_moves_no_points(self, db_session, user, receiver, ai_service):
        ai_service.verify_interaction.return_value = {"approved": False, "message": "Please be kind"}
        service = InteractionService(db_session, ai_service, moderate=True)

        result = service.create_interaction(user.id, receiver.id, "dislike", reason="meh", now=NOW)

        db_session.refresh(receiver)
        assert result["interaction"].approved is False
        assert result["message"] == "Please be kind"
        assert receiver.points == 10

    def test_moderation_skipped_without_reason(self, db_session, user, receiver, ai_service):
        service = InteractionService(db_session, ai_service, moderate=True)

        service.create_interaction(user.id, receiver.id, "like", now=NOW)

        ai_service.verify_interaction.assert_not_called()


class TestApproveInteraction:

    def test_approval_applies_points_once(self, db_session, user, receiver, ai_service):
        ai_service.verify_interaction.return_value = {"approved": False, "message": "Pending review"}
        pending = InteractionService(db_session, ai_service, moderate=True).create_interaction(
            user.id, receiver.id, "like", reason="helped with dishes", now=NOW
        )["interaction"]
        service = InteractionService(db_session)

        first = service.approve_interaction(pending.id)
        second = service.approve_interaction(pending.id)

        db_session.refresh(receiver)
        assert first["message"] == "Interaction approved"
        assert second["message"] == "Interaction was already approved"
        assert receiver.points == 12

    def test_unknown_interaction(self, db_session):
        with pytest.raises(InteractionNotFoundException):
            InteractionService(db_session).approve_interaction(999)


class TestInteractionQueries:

    def test_counts_only_approved(self, db_session, user, receiver, ai_service):
        third = create_user(db_session, username="carol")
        InteractionService(db_session).create_interaction(user.id, receiver.id, "like", now=NOW)
        ai_service.verify_interaction.return_value = {"approved": False, "message": "No"}
        InteractionService(db_session, ai_service, moderate=True).create_interaction(
            third.id, receiver.id, "dislike", reason="because", now=NOW
        )

        counts = InteractionService(db_session).get_interaction_counts(receiver.id)

        assert counts == {"likes": 1, "dislikes": 0}
        assert len(InteractionService(db_session).get_user_interactions(receiver.id)) == 2
