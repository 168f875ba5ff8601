"""Read-side views over the lead collection: Kanban columns, funnel, follow-ups.

Every function is a pure projection recomputed from the leads it is given.
"""

from collections.abc import Iterable, Sequence
from datetime import date
from typing import Optional

from spruce.app.core.time import ensure_utc, is_same_day
from spruce.app.db.store import EntityStore
from spruce.app.models.lead import KANBAN_STAGES, Lead, Task

PRIORITY_RANK = {"High": 0, "Medium": 1, "Low": 2}
UPCOMING_TASK_LIMIT = 5


def group_by_stage(leads: Iterable[Lead]) -> dict[str, list[Lead]]:
    columns: dict[str, list[Lead]] = {stage: [] for stage in KANBAN_STAGES}
    for lead in leads:
        columns[lead.stage].append(lead)
    return columns


def next_follow_up(lead: Lead) -> Optional[Task]:
    """Earliest-due pending Follow-up task on the lead."""
    pending = [task for task in lead.tasks if task.type == "Follow-up" and task.status == "Pending"]
    if not pending:
        return None
    return min(pending, key=lambda task: ensure_utc(task.due_date))


def last_touched_at(lead: Lead):
    if lead.activities:
        return ensure_utc(lead.activities[0].timestamp)
    return ensure_utc(lead.created_at)


def _priority_key(lead: Lead):
    follow_up = next_follow_up(lead)
    if follow_up is not None:
        return (0, PRIORITY_RANK[follow_up.priority], ensure_utc(follow_up.due_date).timestamp())
    return (1, 0, -last_touched_at(lead).timestamp())


def sort_stage_column(leads: Iterable[Lead], by_priority: bool = False) -> list[Lead]:
    """
    Default order is newest first. With ``by_priority`` leads with a pending
    follow-up come first, ordered by task priority then due date; the rest
    follow by most recent activity (or creation) time.
    """
    ordered = sorted(leads, key=lambda lead: ensure_utc(lead.created_at), reverse=True)
    if by_priority:
        ordered.sort(key=_priority_key)
    return ordered


def kanban_board(leads: Iterable[Lead], prioritized_stages: Sequence[str] = ()) -> dict[str, list[Lead]]:
    return {
        stage: sort_stage_column(column, by_priority=stage in prioritized_stages)
        for stage, column in group_by_stage(leads).items()
    }


def is_missed_follow_up(lead: Lead, today: date) -> bool:
    """A Follow-up is due today and nobody has touched the lead today."""
    due_today = any(
        task.type == "Follow-up" and task.status == "Pending" and is_same_day(task.due_date, today)
        for task in lead.tasks
    )
    if not due_today:
        return False
    return not any(is_same_day(activity.timestamp, today) for activity in lead.activities)


def find_missed_follow_up(leads: Iterable[Lead], today: date) -> Optional[Lead]:
    return next((lead for lead in leads if is_missed_follow_up(lead, today)), None)


def funnel_counts(leads: Iterable[Lead]) -> list[dict]:
    """Lead count per stage (Dropped excluded) with a ratio against the largest bucket."""
    columns = group_by_stage(leads)
    counts = [(stage, len(columns[stage])) for stage in KANBAN_STAGES if stage != "Dropped"]
    largest = max((count for _, count in counts), default=0)
    return [
        {"stage": stage, "count": count, "ratio": count / largest if largest else 0.0}
        for stage, count in counts
    ]


def leads_with_activity_on(leads: Iterable[Lead], day: date) -> list[Lead]:
    return [lead for lead in leads if any(is_same_day(activity.timestamp, day) for activity in lead.activities)]


def search_leads(leads: Iterable[Lead], query: str) -> list[Lead]:
    """Case-insensitive match of every whitespace-separated token against name, email or source."""
    tokens = [token.lower() for token in query.split() if token]
    results = []
    for lead in leads:
        haystack = f"{lead.name} {lead.email} {lead.source}".lower()
        if all(token in haystack for token in tokens):
            results.append(lead)
    return results


def counselor_summary(store: EntityStore, user_id: str, today: date) -> dict:
    leads = [lead for lead in store.leads if lead.assigned_user_id == user_id]
    enrolled = sum(1 for lead in leads if lead.stage == "Enrolled")
    tasks = [task for task in store.tasks if task.assigned_user_id == user_id]
    missed = find_missed_follow_up(leads, today)
    return {
        "as_of": today.isoformat(),
        "user_id": user_id,
        "total_leads": len(leads),
        "enrolled_leads": enrolled,
        "conversion_rate": round(enrolled / len(leads) * 100) if leads else 0,
        "upcoming_tasks": [task for task in tasks if task.status == "Pending"][:UPCOMING_TASK_LIMIT],
        "missed_follow_up": missed,
        "funnel": funnel_counts(leads),
    }
