"""Round-robin distribution of new leads across selected counselors."""

import logging
from collections.abc import Sequence

from spruce.app.db.store import EntityStore
from spruce.app.schemas.action import ActionState
from spruce.app.services.leads import bulk_update_leads

logger = logging.getLogger(__name__)


def round_robin(lead_ids: Sequence[str], counselor_ids: Sequence[str]) -> list[dict[str, str]]:
    """
    Pair ``lead_ids[i]`` with ``counselor_ids[i % k]``.

    Every counselor ends up with ``n // k`` or ``n // k + 1`` leads and the
    first ``n % k`` counselors, in the order given, take the extra one.
    """
    if not counselor_ids:
        raise ValueError("At least one counselor is required.")
    return [
        {"lead_id": lead_id, "assigned_user_id": counselor_ids[index % len(counselor_ids)]}
        for index, lead_id in enumerate(lead_ids)
    ]


def unknown_users(store: EntityStore, user_ids: Sequence[str]) -> list[str]:
    return [user_id for user_id in user_ids if store.find_user(user_id) is None]


def distribute_new_leads(store: EntityStore, counselor_ids: Sequence[str]) -> ActionState:
    """Spread every lead currently in stage New across ``counselor_ids``."""
    counselor_ids = list(dict.fromkeys(counselor_ids))
    if not counselor_ids:
        return ActionState(error="Please select at least one counselor.", code="validation")
    missing = unknown_users(store, counselor_ids)
    if missing:
        return ActionState(error=f"Unknown counselor(s): {', '.join(missing)}.", code="not_found")

    new_lead_ids = [lead.id for lead in store.leads if lead.stage == "New"]
    if not new_lead_ids:
        return ActionState(error="No new leads to distribute.", code="validation")

    logger.info("Distributing %d new leads across %d counselors", len(new_lead_ids), len(counselor_ids))
    return bulk_update_leads(store, {"distribution_list": round_robin(new_lead_ids, counselor_ids)})
