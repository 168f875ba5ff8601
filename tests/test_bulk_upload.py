import asyncio
from collections import Counter
from datetime import UTC, datetime

import pytest

from spruce.app.db.seed import build_store
from spruce.app.services.bulk_upload import bulk_upload_leads, decode_csv, row_to_payload

NOW = datetime(2024, 5, 10, 9, 30, tzinfo=UTC)

CSV = (
    "Name,Email,Phone,Source,City\n"
    "Aarav Sharma,aarav@example.com,9876543210,Website,Pune\n"
    "Sanya Iyer,sanya@example.com,9876543211,Walk-in,Delhi\n"
    "X,not-an-email,,Website,Mumbai\n"
    "Kabir Das,kabir@example.com,,Newspaper,Chennai\n"
).encode()


@pytest.fixture
def store():
    return build_store(lead_count=0, clock=lambda: NOW)


def upload(store, filename, content, counselor_ids=()):
    return asyncio.run(bulk_upload_leads(store, filename, content, counselor_ids, delay=0))


def test_rows_are_mapped_to_lead_fields():
    rows = decode_csv(b"\xef\xbb\xbfFull Name,Mobile,Course\nDiya Gupta,9876543219,Digital Marketing Pro\n")
    payload = row_to_payload(rows[0])
    assert payload == {
        "name": "Diya Gupta",
        "course_interest": "Digital Marketing Pro",
        "phone_numbers": [{"title": "Mobile", "number": "9876543219"}],
    }


def test_upload_creates_valid_rows_and_skips_bad_ones(store):
    state = upload(store, "leads.csv", CSV)

    assert state.ok
    assert state.message == "leads.csv has been uploaded. 3 lead(s) created. 1 row(s) skipped."
    result = state.data
    assert len(result.created_ids) == 3
    assert [row.row for row in result.failed_rows] == [3]
    assert "email" in result.failed_rows[0].errors
    assert all(lead.stage == "New" for lead in store.leads)


def test_upload_distributes_to_counselors(store):
    state = upload(store, "leads.csv", CSV, ["user-5", "user-6"])

    assert state.message.startswith("leads.csv has been processed and leads have been distributed among 2 counselor(s).")
    assert state.data.distributed == 3
    assert Counter(lead.assigned_user_id for lead in store.leads) == {"user-5": 2, "user-6": 1}


def test_upload_rejects_other_formats(store):
    state = upload(store, "leads.xlsx", b"")
    assert state.error == "Please upload a .csv file."
    assert store.leads == []


def test_upload_rejects_unknown_counselors(store):
    state = upload(store, "leads.csv", CSV, ["user-404"])
    assert state.code == "not_found"
    assert store.leads == []
