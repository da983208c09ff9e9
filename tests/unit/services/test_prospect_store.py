from __future__ import annotations

from datetime import date, timedelta

import pytest

from pipeline_crm.core.exceptions import NotFoundError, ValidationError
from pipeline_crm.database.models import (
    Activity,
    Interlocutor,
    NextAction,
    Prospect,
    StatusHistoryEntry,
    User,
)
from pipeline_crm.services.prospect_service import ProspectService
from pipeline_crm.services.status_transitions import is_transition


def _seed_users(session):
    owner = User(email="owner@example.com", password="x", name="Owner")
    other = User(email="other@example.com", password="x", name="Other")
    session.add_all([owner, other])
    session.commit()
    return owner, other


def test_create_fills_defaults(session):
    owner, _ = _seed_users(session)
    prospect = ProspectService(session).create_prospect(owner.id, {"name": "Acme"})

    assert prospect.status == "Prospection"
    assert prospect.status_date == date.today()
    assert prospect.chance_percent == 20
    assert prospect.setup_amount == 0
    assert prospect.monthly_amount == 0
    assert prospect.annual_amount == 0
    assert prospect.training_amount == 0
    assert prospect.material_amount == 0
    assert prospect.user_id == owner.id


def test_create_rejects_negative_amount_and_bad_chance(session):
    owner, _ = _seed_users(session)
    service = ProspectService(session)
    with pytest.raises(ValidationError):
        service.create_prospect(owner.id, {"name": "Acme", "setup_amount": -1})
    with pytest.raises(ValidationError):
        service.create_prospect(owner.id, {"name": "Acme", "chance_percent": 101})
    with pytest.raises(ValidationError):
        service.create_prospect(owner.id, {"name": "   "})


def test_status_change_records_one_history_entry(session):
    owner, _ = _seed_users(session)
    service = ProspectService(session)
    prospect = service.create_prospect(owner.id, {"name": "Acme", "status": "Prospection"})
    prospect.status_date = date.today() - timedelta(days=10)
    session.commit()

    updated, entry = service.update_prospect(
        prospect.id, owner.id, {"name": "Acme", "status": "Negotiation", "notes": "call scheduled"}
    )

    assert entry is not None
    assert (entry.old_status, entry.new_status, entry.notes) == ("Prospection", "Negotiation", "call scheduled")
    assert entry.status_date == date.today()
    assert updated.status == "Negotiation"
    assert updated.status_date == date.today()

    history = service.list_status_history(prospect.id, owner.id)
    assert len(history) == 1


def test_same_status_update_adds_no_history(session):
    owner, _ = _seed_users(session)
    service = ProspectService(session)
    prospect = service.create_prospect(owner.id, {"name": "Acme", "status": "Negotiation"})
    old_date = date.today() - timedelta(days=3)
    prospect.status_date = old_date
    session.commit()

    _, entry = service.update_prospect(prospect.id, owner.id, {"name": "Acme", "status": "Negotiation"})

    assert entry is None
    assert session.query(StatusHistoryEntry).count() == 0
    assert session.get(Prospect, prospect.id).status_date == old_date


def test_empty_previous_status_is_not_a_transition(session):
    owner, _ = _seed_users(session)
    service = ProspectService(session)
    prospect = service.create_prospect(owner.id, {"name": "Acme"})
    prospect.status = None
    session.commit()

    updated, entry = service.update_prospect(prospect.id, owner.id, {"name": "Acme", "status": "Qualification"})

    assert entry is None
    assert updated.status == "Qualification"
    assert session.query(StatusHistoryEntry).count() == 0


def test_transition_predicate():
    assert is_transition("Prospection", "Gagné")
    assert not is_transition("Prospection", "Prospection")
    assert not is_transition("", "Gagné")
    assert not is_transition(None, "Gagné")


def test_omitted_status_keeps_current_and_resets_amounts(session):
    owner, _ = _seed_users(session)
    service = ProspectService(session)
    prospect = service.create_prospect(
        owner.id, {"name": "Acme", "status": "Proposition", "setup_amount": 900, "chance_percent": 60}
    )

    updated, entry = service.update_prospect(prospect.id, owner.id, {"name": "Acme Corp"})

    assert entry is None
    assert updated.name == "Acme Corp"
    assert updated.status == "Proposition"
    assert updated.setup_amount == 0
    assert updated.chance_percent == 20


def test_owner_scoping_hides_foreign_prospects(session):
    owner, other = _seed_users(session)
    service = ProspectService(session)
    prospect = service.create_prospect(owner.id, {"name": "Acme"})

    assert service.list_prospects(other.id) == []
    with pytest.raises(NotFoundError):
        service.get_prospect(prospect.id, other.id)
    with pytest.raises(NotFoundError):
        service.update_prospect(prospect.id, other.id, {"name": "Hijack", "status": "Perdu"})
    with pytest.raises(NotFoundError):
        service.delete_prospect(prospect.id, other.id)
    assert session.get(Prospect, prospect.id).name == "Acme"


def test_missing_prospect_update_is_not_found(session):
    owner, _ = _seed_users(session)
    with pytest.raises(NotFoundError):
        ProspectService(session).update_prospect(9999, owner.id, {"name": "Ghost", "status": "Gagné"})
    assert session.query(StatusHistoryEntry).count() == 0


def test_listing_is_newest_first(session):
    owner, _ = _seed_users(session)
    service = ProspectService(session)
    first = service.create_prospect(owner.id, {"name": "First"})
    second = service.create_prospect(owner.id, {"name": "Second"})

    assert [p.id for p in service.list_prospects(owner.id)] == [second.id, first.id]


def test_delete_cascades_to_dependents(session):
    owner, _ = _seed_users(session)
    service = ProspectService(session)
    prospect = service.create_prospect(owner.id, {"name": "Acme", "status": "Prospection"})
    service.update_prospect(prospect.id, owner.id, {"name": "Acme", "status": "Gagné"})
    session.add_all(
        [
            NextAction(prospect_id=prospect.id, action_type="call", user_id=owner.id),
            Interlocutor(prospect_id=prospect.id, name="Bob"),
            Activity(prospect_id=prospect.id, activity_type="email", user_id=owner.id),
        ]
    )
    session.commit()

    service.delete_prospect(prospect.id, owner.id)

    assert session.query(Prospect).count() == 0
    assert session.query(NextAction).count() == 0
    assert session.query(Interlocutor).count() == 0
    assert session.query(StatusHistoryEntry).count() == 0
    assert session.query(Activity).count() == 0
