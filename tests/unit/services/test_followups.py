from __future__ import annotations

from datetime import date

import pytest

from pipeline_crm.core.exceptions import NotFoundError
from pipeline_crm.database.models import User
from pipeline_crm.services.activity_service import ActivityService
from pipeline_crm.services.next_action_service import NextActionService
from pipeline_crm.services.prospect_service import ProspectService


def _prospect(session):
    owner = User(email="owner@example.com", password="x", name="Owner")
    session.add(owner)
    session.commit()
    prospect = ProspectService(session).create_prospect(owner.id, {"name": "Acme"})
    return owner, prospect


def test_next_actions_sorted_by_planned_date_with_undated_last(session):
    owner, prospect = _prospect(session)
    service = NextActionService(session)
    service.create_next_action(prospect.id, owner.id, {"action_type": "undated"})
    service.create_next_action(prospect.id, owner.id, {"action_type": "later", "planned_date": date(2030, 5, 1)})
    service.create_next_action(prospect.id, owner.id, {"action_type": "sooner", "planned_date": date(2030, 1, 1)})

    listed = service.list_next_actions(prospect.id, owner.id)
    assert [action.action_type for action in listed] == ["sooner", "later", "undated"]


def test_completing_stamps_today_and_reopening_clears(session):
    owner, prospect = _prospect(session)
    service = NextActionService(session)
    action = service.create_next_action(prospect.id, owner.id, {"action_type": "call", "actor": "Owner"})

    done = service.update_next_action(action.id, owner.id, {"completed": True, "completed_note": "reached"})
    assert done.completed is True
    assert done.completed_date == date.today()
    assert done.completed_note == "reached"
    assert done.action_type == "call"

    reopened = service.update_next_action(action.id, owner.id, {"completed": False})
    assert reopened.completed is False
    assert reopened.completed_date is None


def test_next_action_owner_scoping(session):
    owner, prospect = _prospect(session)
    stranger = User(email="stranger@example.com", password="x", name="Stranger")
    session.add(stranger)
    session.commit()
    service = NextActionService(session)
    action = service.create_next_action(prospect.id, owner.id, {"action_type": "call"})

    with pytest.raises(NotFoundError):
        service.create_next_action(prospect.id, stranger.id, {"action_type": "call"})
    with pytest.raises(NotFoundError):
        service.update_next_action(action.id, stranger.id, {"completed": True})
    with pytest.raises(NotFoundError):
        service.delete_next_action(action.id, stranger.id)

    service.delete_next_action(action.id, owner.id)
    assert service.list_next_actions(prospect.id, owner.id) == []


def test_activities_record_author_newest_first(session):
    owner, prospect = _prospect(session)
    service = ActivityService(session)
    first = service.create_activity(prospect.id, owner.id, "Owner", {"activity_type": "call", "description": "Intro"})
    second = service.create_activity(prospect.id, owner.id, "Owner", {"activity_type": "email"})

    listed = service.list_activities(prospect.id, owner.id)
    assert [row.id for row in listed] == [second.id, first.id]
    assert listed[1].created_by == "Owner"

    with pytest.raises(NotFoundError):
        service.list_activities(prospect.id, owner.id + 100)
