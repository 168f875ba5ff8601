"""In-memory entity store for leads, tasks and the user/course directory.

One store is created at application start and handed to every operation.
All methods run to completion without yielding; there is no locking, so
concurrent callers get last-write-wins semantics.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime
from typing import Any, Optional

from spruce.app.core.exceptions import NotFoundError
from spruce.app.core.settings import Settings, get_settings
from spruce.app.core.time import utc_now
from spruce.app.models.course import Course
from spruce.app.models.institution import Institution
from spruce.app.models.lead import Activity, Lead, Task
from spruce.app.models.user import Role, RoleRef, User

logger = logging.getLogger(__name__)

# Fields owned by the store; callers can never overwrite them through updates.
LOCKED_LEAD_FIELDS = {"id", "created_at", "activities", "tasks", "documents"}
# Additional fields the store fills in itself on creation.
CREATE_MANAGED_FIELDS = LOCKED_LEAD_FIELDS | {"stage", "assigned_user_id", "contacts"}


class EntityStore:
    def __init__(self, settings: Optional[Settings] = None, *, clock: Callable[[], datetime] = utc_now):
        self.settings = settings or get_settings()
        self.clock = clock
        self._leads: list[Lead] = []
        self._tasks: list[Task] = []
        self._users: list[User] = []
        self._roles: list[Role] = []
        self._courses: list[Course] = []
        self._institutions: list[Institution] = []
        self._sequences: dict[str, int] = {}
        self._issued: dict[str, set[str]] = {}

    # -- identity -----------------------------------------------------------

    def _allocate(self, kind: str, template: str) -> str:
        issued = self._issued.setdefault(kind, set())
        while True:
            self._sequences[kind] = self._sequences.get(kind, 0) + 1
            candidate = template.format(self._sequences[kind])
            if candidate not in issued:
                issued.add(candidate)
                return candidate

    def _register(self, kind: str, ids: Iterable[str]) -> None:
        self._issued.setdefault(kind, set()).update(ids)

    def new_lead_id(self) -> str:
        return self._allocate("lead", "{:03d}")

    def new_activity_id(self) -> str:
        return self._allocate("activity", "ACT-{}")

    def new_task_id(self) -> str:
        return self._allocate("task", "TSK-{}")

    # -- loading ------------------------------------------------------------

    def load_leads(self, leads: Iterable[Lead]) -> None:
        """Append pre-built leads (seed data) and index their ids and tasks."""
        for lead in leads:
            self._register("lead", [lead.id])
            self._register("activity", [activity.id for activity in lead.activities])
            self._register("task", [task.id for task in lead.tasks])
            self._leads.append(lead)
            self._tasks.extend(lead.tasks)

    def load_directory(
        self,
        *,
        users: Iterable[User] = (),
        roles: Iterable[Role] = (),
        courses: Iterable[Course] = (),
        institutions: Iterable[Institution] = (),
    ) -> None:
        for user in users:
            self._register("user", [user.id])
            self._users.append(user)
        self._roles.extend(roles)
        for course in courses:
            self._register("course", [course.id])
            self._courses.append(course)
        for institution in institutions:
            self._register("institution", [institution.id])
            self._institutions.append(institution)

    # -- reads --------------------------------------------------------------

    @property
    def leads(self) -> list[Lead]:
        return list(self._leads)

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    @property
    def users(self) -> list[User]:
        return list(self._users)

    @property
    def roles(self) -> list[Role]:
        return list(self._roles)

    @property
    def courses(self) -> list[Course]:
        return list(self._courses)

    @property
    def institutions(self) -> list[Institution]:
        return list(self._institutions)

    def find_lead(self, lead_id: str) -> Optional[Lead]:
        return next((lead for lead in self._leads if lead.id == lead_id), None)

    def get_lead(self, lead_id: str) -> Lead:
        lead = self.find_lead(lead_id)
        if lead is None:
            raise NotFoundError("Lead", [lead_id])
        return lead

    def find_user(self, user_id: str) -> Optional[User]:
        return next((user for user in self._users if user.id == user_id), None)

    def get_user(self, user_id: str) -> User:
        user = self.find_user(user_id)
        if user is None:
            raise NotFoundError("User", [user_id])
        return user

    def find_role(self, role_id: str) -> Optional[Role]:
        return next((role for role in self._roles if role.id == role_id), None)

    def counselors(self) -> list[User]:
        return [user for user in self._users if user.role.id == "counselor"]

    # -- lead mutations -----------------------------------------------------

    def _require_leads(self, lead_ids: Iterable[str]) -> list[Lead]:
        """Resolve every id or raise before anything is touched."""
        wanted = list(dict.fromkeys(lead_ids))
        known = {lead.id for lead in self._leads}
        missing = [lead_id for lead_id in wanted if lead_id not in known]
        if missing:
            raise NotFoundError("Lead", missing)
        wanted_set = set(wanted)
        return [lead for lead in self._leads if lead.id in wanted_set]

    @staticmethod
    def _prepare(lead: Lead, fields: Mapping[str, Any]) -> dict[str, Any]:
        """
        Validate ``fields`` against a throwaway copy of ``lead`` and return the
        coerced values, so a bad value fails before any real record changes.
        """
        probe = lead.model_copy()
        values = {}
        for key, value in fields.items():
            if key in LOCKED_LEAD_FIELDS:
                continue
            setattr(probe, key, value)
            values[key] = getattr(probe, key)
        return values

    @staticmethod
    def _apply(lead: Lead, values: Mapping[str, Any]) -> None:
        for key, value in values.items():
            setattr(lead, key, value)

    def create_lead(self, fields: Mapping[str, Any]) -> Lead:
        now = self.clock()
        data = {key: value for key, value in fields.items() if key not in CREATE_MANAGED_FIELDS}
        lead_id = self.new_lead_id()
        creation = Activity(
            id=self.new_activity_id(),
            type="System",
            timestamp=now,
            outcome="Lead Created",
            notes=f"Lead was created in the system via {data.get('source')}.",
            user_id=self.settings.system_user_id,
        )
        lead = Lead(
            **data,
            id=lead_id,
            stage="New",
            created_at=now,
            assigned_user_id=self.settings.default_owner_id,
            activities=[creation],
            tasks=[],
            documents=[],
            contacts=[],
        )
        self._leads.insert(0, lead)
        logger.info("Created lead %s (source=%s)", lead.id, lead.source)
        return lead

    def update_lead(self, lead_id: str, fields: Mapping[str, Any]) -> Lead:
        lead = self.get_lead(lead_id)
        values = self._prepare(lead, fields)
        self._apply(lead, values)
        logger.info("Updated lead %s fields=%s", lead.id, sorted(values))
        return lead

    def add_activity(self, lead_id: str, fields: Mapping[str, Any]) -> Activity:
        return self.log_activity(lead_id, fields)

    def log_activity(
        self,
        lead_id: str,
        fields: Mapping[str, Any],
        lead_updates: Optional[Mapping[str, Any]] = None,
    ) -> Activity:
        """
        Record an activity and, in the same step, apply ``lead_updates``
        (course interest, stage) to the lead. Either both writes happen or neither.
        """
        lead = self.get_lead(lead_id)
        values = self._prepare(lead, lead_updates or {})
        activity = Activity(
            **{key: value for key, value in fields.items() if key not in {"id", "timestamp"}},
            id=self.new_activity_id(),
            timestamp=self.clock(),
        )
        lead.activities.insert(0, activity)
        self._apply(lead, values)
        logger.info("Logged %s activity %s on lead %s", activity.type, activity.id, lead.id)
        return activity

    def add_task(self, lead_id: str, fields: Mapping[str, Any]) -> Task:
        lead = self.get_lead(lead_id)
        task = Task(
            **{key: value for key, value in fields.items() if key not in {"id", "lead_id", "status"}},
            id=self.new_task_id(),
            lead_id=lead.id,
            status="Pending",
        )
        lead.tasks.append(task)
        self._tasks.append(task)
        logger.info("Added task %s to lead %s", task.id, lead.id)
        return task

    def bulk_assign(self, assignments: Mapping[str, str]) -> int:
        """Give each lead in ``assignments`` its own assignee (distribution)."""
        targets = self._require_leads(assignments.keys())
        prepared = [(lead, self._prepare(lead, {"assigned_user_id": assignments[lead.id]})) for lead in targets]
        for lead, values in prepared:
            self._apply(lead, values)
        logger.info("Distributed %d leads across %d assignees", len(targets), len(set(assignments.values())))
        return len(targets)

    def bulk_update(self, lead_ids: Iterable[str], fields: Mapping[str, Any]) -> int:
        """Apply the same ``fields`` to every lead in ``lead_ids``."""
        targets = self._require_leads(lead_ids)
        if not targets or not fields:
            return 0
        values = self._prepare(targets[0], fields)
        for lead in targets:
            self._apply(lead, values)
        logger.info("Bulk updated %d leads fields=%s", len(targets), sorted(values))
        return len(targets)

    def bulk_delete(self, lead_ids: Iterable[str]) -> int:
        """Remove the leads and the tasks that belong to them."""
        targets = self._require_leads(lead_ids)
        doomed = {lead.id for lead in targets}
        self._leads = [lead for lead in self._leads if lead.id not in doomed]
        self._tasks = [task for task in self._tasks if task.lead_id not in doomed]
        logger.info("Deleted %d leads", len(doomed))
        return len(doomed)

    # -- directory mutations ------------------------------------------------

    def add_user(self, name: str, email: str, role: Role) -> User:
        user = User(
            id=self._allocate("user", "user-{}"),
            name=name,
            email=email,
            role=RoleRef(id=role.id, name=role.name),
        )
        self._users.append(user)
        logger.info("Added user %s with role %s", user.id, role.id)
        return user

    def add_course(self, fields: Mapping[str, Any]) -> Course:
        course_id = self._allocate("course", "COURSE-{:03d}")
        number = int(course_id.split("-")[1])
        course = Course(**fields, id=course_id, image_url=f"course-{number}")
        self._courses.append(course)
        logger.info("Added course %s", course.id)
        return course

    def add_institution(self, fields: Mapping[str, Any]) -> Institution:
        institution = Institution(
            **fields,
            id=self._allocate("institution", "INST-{:03d}"),
            contacts=[],
            activities=[],
        )
        self._institutions.insert(0, institution)
        logger.info("Added institution %s", institution.id)
        return institution
