from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from spruce.app.core.exceptions import NotFoundError
from spruce.app.db.seed import build_store

NOW = datetime(2024, 5, 10, 9, 30, tzinfo=UTC)


@pytest.fixture
def store():
    return build_store(lead_count=0, clock=lambda: NOW)


def lead_fields(**overrides):
    fields = {
        "name": "Aarav Sharma",
        "email": "aarav.sharma@example.com",
        "phone_numbers": [{"title": "Mobile", "number": "9876543210"}],
        "source": "Website",
        "city": "Pune",
    }
    fields.update(overrides)
    return fields


def test_create_lead_starts_new_with_system_activity(store):
    lead = store.create_lead(lead_fields())
    assert lead.stage == "New"
    assert lead.assigned_user_id == "user-1"
    assert lead.created_at == NOW
    assert lead.tasks == [] and lead.documents == [] and lead.contacts == []
    assert len(lead.activities) == 1
    activity = lead.activities[0]
    assert activity.type == "System"
    assert activity.outcome == "Lead Created"
    assert "Website" in activity.notes


def test_create_lead_ignores_store_managed_fields(store):
    lead = store.create_lead(lead_fields(stage="Enrolled", assigned_user_id="user-5", id="999"))
    assert lead.stage == "New"
    assert lead.assigned_user_id == "user-1"
    assert lead.id != "999"


def test_new_leads_go_to_head_of_collection(store):
    first = store.create_lead(lead_fields())
    second = store.create_lead(lead_fields(name="Sanya Iyer"))
    assert [lead.id for lead in store.leads] == [second.id, first.id]


def test_lead_ids_are_never_reused(store):
    first = store.create_lead(lead_fields())
    second = store.create_lead(lead_fields())
    store.bulk_delete([second.id])
    third = store.create_lead(lead_fields())
    assert len({first.id, second.id, third.id}) == 3
    assert first.id == "001"


def test_update_lead_merges_only_given_fields(store):
    lead = store.create_lead(lead_fields())
    email_before = lead.email
    store.update_lead(lead.id, {"assigned_user_id": "user-5"})
    reread = store.get_lead(lead.id)
    assert reread.assigned_user_id == "user-5"
    assert reread.email == email_before
    assert reread.city == "Pune"


def test_update_lead_cannot_touch_activities(store):
    lead = store.create_lead(lead_fields())
    store.update_lead(lead.id, {"activities": [], "city": "Delhi"})
    assert len(lead.activities) == 1
    assert lead.city == "Delhi"


def test_update_missing_lead_raises_not_found(store):
    with pytest.raises(NotFoundError) as exc:
        store.update_lead("404", {"city": "Delhi"})
    assert str(exc.value) == "Lead not found."


def test_update_with_invalid_stage_leaves_lead_untouched(store):
    lead = store.create_lead(lead_fields())
    with pytest.raises(ValidationError):
        store.update_lead(lead.id, {"city": "Delhi", "stage": "Archived"})
    assert lead.city == "Pune"
    assert lead.stage == "New"


def test_add_activity_inserts_at_head(store):
    lead = store.create_lead(lead_fields())
    activity = store.add_activity(lead.id, {"type": "Call", "outcome": "No answer", "notes": "Rang twice", "user_id": "user-5"})
    assert lead.activities[0] == activity
    assert lead.activities[1].type == "System"


def test_log_activity_applies_lead_updates(store):
    lead = store.create_lead(lead_fields())
    store.log_activity(
        lead.id,
        {"type": "Call", "outcome": "Interested", "notes": "Wants a demo", "user_id": "user-5"},
        {"stage": "Contacted", "course_interest": "Digital Marketing Pro"},
    )
    assert lead.stage == "Contacted"
    assert lead.course_interest == "Digital Marketing Pro"
    assert len(lead.activities) == 2


def test_log_activity_is_all_or_nothing(store):
    lead = store.create_lead(lead_fields())
    with pytest.raises(ValidationError):
        store.log_activity(
            lead.id,
            {"type": "Call", "outcome": "Interested", "notes": "Wants a demo", "user_id": "user-5"},
            {"stage": "Archived"},
        )
    assert len(lead.activities) == 1
    assert lead.stage == "New"


def test_add_activity_for_missing_lead(store):
    with pytest.raises(NotFoundError):
        store.add_activity("404", {"type": "Call", "outcome": "No answer", "notes": "n/a", "user_id": "user-5"})


def test_add_task_is_pending_and_globally_listed(store):
    lead = store.create_lead(lead_fields())
    task = store.add_task(
        lead.id,
        {
            "type": "Follow-up",
            "due_date": NOW + timedelta(days=1),
            "priority": "High",
            "notes": "Call back",
            "assigned_user_id": "user-5",
            "status": "Completed",
        },
    )
    assert task.status == "Pending"
    assert task.lead_id == lead.id
    assert lead.tasks == [task]
    assert task in store.tasks


def test_add_task_for_missing_lead(store):
    with pytest.raises(NotFoundError):
        store.add_task("404", {"type": "Meeting", "due_date": NOW, "priority": "Low", "notes": "Visit", "assigned_user_id": "user-5"})
    assert store.tasks == []


def test_bulk_update_and_assign(store):
    a = store.create_lead(lead_fields())
    b = store.create_lead(lead_fields())
    c = store.create_lead(lead_fields())
    assert store.bulk_update([a.id, b.id], {"stage": "Qualified"}) == 2
    assert (a.stage, b.stage, c.stage) == ("Qualified", "Qualified", "New")

    assert store.bulk_assign({a.id: "user-5", c.id: "user-6"}) == 2
    assert (a.assigned_user_id, b.assigned_user_id, c.assigned_user_id) == ("user-5", "user-1", "user-6")


def test_bulk_update_with_unknown_id_changes_nothing(store):
    a = store.create_lead(lead_fields())
    with pytest.raises(NotFoundError) as exc:
        store.bulk_update([a.id, "404"], {"stage": "Dropped"})
    assert exc.value.ids == ["404"]
    assert a.stage == "New"


def test_bulk_delete_removes_leads_and_their_tasks(store):
    a = store.create_lead(lead_fields())
    b = store.create_lead(lead_fields())
    keep = store.create_lead(lead_fields(name="Kabir Das"))
    store.add_task(a.id, {"type": "Meeting", "due_date": NOW, "priority": "Low", "notes": "Visit", "assigned_user_id": "user-5"})
    kept_task = store.add_task(keep.id, {"type": "Meeting", "due_date": NOW, "priority": "Low", "notes": "Visit", "assigned_user_id": "user-5"})
    snapshot = keep.model_dump()

    assert store.bulk_delete([a.id, b.id]) == 2
    assert store.find_lead(a.id) is None
    assert store.find_lead(b.id) is None
    assert store.get_lead(keep.id).model_dump() == snapshot
    assert store.tasks == [kept_task]


def test_bulk_delete_with_unknown_id_deletes_nothing(store):
    a = store.create_lead(lead_fields())
    with pytest.raises(NotFoundError):
        store.bulk_delete([a.id, "404"])
    assert store.find_lead(a.id) is a


def test_counselors_and_new_user_ids(store):
    assert {user.id for user in store.counselors()} == {"user-5", "user-6", "user-11", "user-12"}
    user = store.add_user("Meera Shah", "meera.shah@example.com", store.find_role("counselor"))
    assert user.id not in {"user-1", "user-11", "user-12"}
    assert user in store.counselors()
