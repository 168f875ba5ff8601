"""Seed data for local development: directory records plus synthetic leads.

Nothing here runs implicitly. ``build_store`` is called once at startup (or
from a test) and a fixed ``seed`` gives the same leads every time.
"""

import logging
import random
from collections.abc import Callable
from datetime import datetime, timedelta
from typing import Optional

from spruce.app.core.settings import Settings, get_settings
from spruce.app.core.time import utc_now
from spruce.app.db.store import EntityStore
from spruce.app.models.course import Course
from spruce.app.models.institution import Institution, InstitutionContact
from spruce.app.models.lead import KANBAN_STAGES, Activity, Lead, LeadContact, PhoneNumber, Task
from spruce.app.models.user import Role, RoleRef, User

logger = logging.getLogger(__name__)

FIRST_NAMES = [
    "Aarav", "Sanya", "Rohan", "Priya", "Aditya", "Diya", "Vivaan", "Ananya", "Kabir", "Ishaan",
    "Mira", "Arjun", "Zoya", "Kian", "Anika", "Reyansh", "Saanvi", "Advik", "Kiara", "Ayaan",
    "Aadhya", "Dhruv", "Myra", "Vihaan", "Anvi", "Sai", "Riya", "Arnav", "Pari", "Neel",
]
LAST_NAMES = [
    "Sharma", "Iyer", "Mehta", "Patel", "Singh", "Gupta", "Kumar", "Reddy", "Das", "Joshi",
    "Kapoor", "Nair", "Khan", "Malhotra", "Verma", "Chopra", "Ghosh", "Jain", "Menon", "Rao",
]
SOURCES = ["Website", "Referral - Alumni", "Social Media - Instagram", "Walk-in", "Online", "College Seminar", "Newspaper"]
EDUCATIONS = ["B.Tech CSE", "B.Com", "12th Grade", "M.Sc IT", "BCA", "B.A. English", "Diploma in IT", "MBA"]
COLLEGES = ["IIT Delhi", "Mumbai University", "Nirma University", "IGNOU", "VIT Vellore", "Anna University", "SPPU", "Christ University"]
CITIES = ["Delhi", "Mumbai", "Ahmedabad", "Pune", "Bangalore", "Chennai", "Kolkata"]
ACTIVITY_TYPES = ["Call", "Email", "SMS", "WhatsApp", "Walk-in"]
ACTIVITY_OUTCOMES = ["Sent info", "No answer", "Followed up", "Demo scheduled"]

DEFAULT_ROLES = [
    Role(
        id="super-admin",
        name="Super Admin",
        core_responsibilities="Full system governance, configuration, and control.",
        access_scope="Organization-wide",
        key_privileges="Create/assign roles, configure global settings, full data CRUD, audit logs.",
        limitations="Cannot be deleted, only reassigned.",
    ),
    Role(
        id="admin",
        name="Admin",
        core_responsibilities="Manages daily operational settings, user accounts, and content.",
        access_scope="System-wide (configurable)",
        key_privileges="User management, course content, system reports.",
        limitations="Cannot create new roles or change global system settings.",
    ),
    Role(
        id="counselor",
        name="Counselor",
        core_responsibilities="Manages lead and student interactions, from initial contact to enrollment.",
        access_scope="Assigned Leads & Students",
        key_privileges="Manage leads, update student status, log communications.",
        limitations="Cannot access financial data or system-wide settings.",
    ),
    Role(
        id="faculty-trainer",
        name="Faculty/Trainer",
        core_responsibilities="Delivers course content and tracks student progress.",
        access_scope="Assigned Batches",
        key_privileges="View enrolled students, manage course material.",
        limitations="No access to the lead pipeline.",
    ),
    Role(
        id="finance",
        name="Finance",
        core_responsibilities="Handles fee collection, invoicing and refunds.",
        access_scope="Financial records",
        key_privileges="View and reconcile payments, issue receipts.",
        limitations="Cannot modify leads or courses.",
    ),
]

_USER_ROWS = [
    ("user-1", "Super Admin", "admin@spruce.com", "super-admin"),
    ("user-2", "Sanya Iyer", "sanya.iyer@example.com", "admin"),
    ("user-3", "Rohan Mehta", "rohan.mehta@example.com", "admin"),
    ("user-4", "Anjali Rao", "anjali.rao@example.com", "admin"),
    ("user-5", "Shivani Bisen", "shivani.bisen@example.com", "counselor"),
    ("user-6", "Pooja Verma", "pooja.verma@example.com", "counselor"),
    ("user-11", "Shivani Pande", "shivani.pande@example.com", "counselor"),
    ("user-12", "Pratiksha", "pratiksha@example.com", "counselor"),
    ("user-7", "Aditya Verma", "aditya.verma@example.com", "faculty-trainer"),
    ("user-8", "Sneha Reddy", "sneha.reddy@example.com", "faculty-trainer"),
    ("user-9", "Arjun Nair", "arjun.nair@example.com", "finance"),
    ("user-10", "Kabir Das", "kabir.das@example.com", "finance"),
]


def default_users() -> list[User]:
    names = {role.id: role.name for role in DEFAULT_ROLES}
    return [
        User(id=user_id, name=name, email=email, role=RoleRef(id=role_id, name=names[role_id]))
        for user_id, name, email, role_id in _USER_ROWS
    ]


def default_courses() -> list[Course]:
    rows = [
        ("Full Stack Web Development", "Front-end and back-end technologies for complete web applications.", "6 Months", 75000, "Rohan Mehta"),
        ("Data Science & Machine Learning", "Data analysis, visualization and machine learning with Python.", "8 Months", 90000, "Priya Sharma"),
        ("Digital Marketing Pro", "SEO, SEM, social media marketing and content strategy.", "4 Months", 45000, "Aditya Verma"),
        ("Cyber Security Essentials", "Network security, ethical hacking and cryptography fundamentals.", "5 Months", 60000, "Sneha Reddy"),
        ("Cloud Computing with AWS", "Cloud infrastructure with EC2, S3, RDS and Lambda.", "5 Months", 65000, "Vikram Singh"),
        ("UI/UX Design Fundamentals", "User-centric design, wireframing, prototyping and user testing.", "3 Months", 40000, "Anjali Rao"),
    ]
    return [
        Course(
            id=f"COURSE-{index:03d}",
            title=title,
            description=description,
            duration=duration,
            fees=fees,
            instructor=instructor,
            image_url=f"course-{index}",
        )
        for index, (title, description, duration, fees, instructor) in enumerate(rows, start=1)
    ]


def default_institutions(now: datetime) -> list[Institution]:
    return [
        Institution(
            id="INST-001",
            name="IIT Delhi",
            type="University",
            city="New Delhi",
            state="Delhi",
            country="India",
            website="home.iitd.ac.in",
            contacts=[
                InstitutionContact(id="ICON-001-1", name="Dr. Anish Kapoor", designation="Dean of Admissions", email="dean.admissions@iitd.ac.in", phone="9876543210"),
            ],
            activities=[
                Activity(
                    id="ACT-I1-1",
                    type="Call",
                    timestamp=now - timedelta(days=2),
                    outcome="Discussed partnership for 2025.",
                    notes="Positive response. Scheduled a follow-up meeting.",
                    user_id="user-5",
                ),
            ],
            assigned_user_id="user-5",
        ),
        Institution(
            id="INST-002",
            name="St. Xavier's College, Mumbai",
            type="College",
            city="Mumbai",
            state="Maharashtra",
            country="India",
            website="xaviers.edu",
            contacts=[
                InstitutionContact(id="ICON-002-1", name="Fr. John Almeida", designation="Principal", email="principal@xaviers.edu", phone="9988776655"),
            ],
            assigned_user_id="user-6",
        ),
        Institution(
            id="INST-003",
            name="Tech Solutions Inc.",
            type="Corporate",
            city="Bengaluru",
            state="Karnataka",
            country="India",
            website="techsolutions.com",
            assigned_user_id="user-5",
        ),
    ]


def generate_leads(store: EntityStore, count: int, *, rng: random.Random, now: datetime) -> list[Lead]:
    """Build ``count`` synthetic leads using ids allocated by ``store``."""
    counselor_ids = [user.id for user in store.counselors()] or [store.settings.default_owner_id]
    course_titles = [course.title for course in store.courses] or [None]
    leads = []
    for index in range(1, count + 1):
        first_name = rng.choice(FIRST_NAMES)
        last_name = rng.choice(LAST_NAMES)
        name = f"{first_name} {last_name}"
        stage = rng.choice(KANBAN_STAGES)
        lead_id = store.new_lead_id()

        activities = []
        if rng.random() > 0.3:
            for _ in range(rng.randint(1, 3)):
                activities.append(
                    Activity(
                        id=store.new_activity_id(),
                        type=rng.choice(ACTIVITY_TYPES),
                        timestamp=now - timedelta(seconds=rng.uniform(0, 30 * 24 * 3600)),
                        outcome=rng.choice(ACTIVITY_OUTCOMES),
                        notes="This is a sample note for the activity.",
                        user_id=rng.choice(counselor_ids),
                    )
                )
            activities.sort(key=lambda activity: activity.timestamp, reverse=True)

        tasks = []
        if stage not in ("Enrolled", "Dropped") and rng.random() > 0.5:
            tasks.append(
                Task(
                    id=store.new_task_id(),
                    lead_id=lead_id,
                    type="Follow-up",
                    due_date=now + timedelta(seconds=rng.uniform(0, 14 * 24 * 3600)),
                    status="Pending",
                    priority=rng.choice(["High", "Medium", "Low"]),
                    notes=f"Follow up with {name}",
                    assigned_user_id=rng.choice(counselor_ids),
                )
            )

        contacts = []
        if rng.random() > 0.7:
            parent_first_name = rng.choice(FIRST_NAMES)
            contacts.append(
                LeadContact(
                    id=f"CONTACT-{lead_id}-1",
                    name=f"{parent_first_name} {last_name}",
                    relation="Father",
                    phone=f"998877{10000 + index:05d}",
                    email=f"{parent_first_name.lower()}.{last_name.lower()}@example.com",
                )
            )

        leads.append(
            Lead(
                id=lead_id,
                name=name,
                email=f"{first_name.lower()}.{last_name.lower()}{index}@example.com",
                stage=stage,
                source=rng.choice(SOURCES),
                assigned_user_id=rng.choice(counselor_ids),
                created_at=now - timedelta(seconds=rng.uniform(0, 30 * 24 * 3600)),
                phone_numbers=[PhoneNumber(title="Mobile", number=f"98765{10000 + index:05d}")],
                education=rng.choice(EDUCATIONS),
                college=rng.choice(COLLEGES),
                status=rng.choice(["Passed", "Pursuing"]),
                course_interest=rng.choice(course_titles),
                city=rng.choice(CITIES),
                gender=rng.choice(["Male", "Female", "Other"]),
                dob=(now - timedelta(days=rng.uniform(18, 28) * 365)).date().isoformat(),
                activities=activities,
                tasks=tasks,
                documents=[],
                contacts=contacts,
            )
        )
    return leads


def build_store(
    settings: Optional[Settings] = None,
    *,
    lead_count: Optional[int] = None,
    seed: Optional[int] = None,
    clock: Callable[[], datetime] = utc_now,
) -> EntityStore:
    """Create a store holding the default directory and ``lead_count`` seeded leads."""
    settings = settings or get_settings()
    lead_count = settings.seed_lead_count if lead_count is None else lead_count
    seed = settings.seed_random_seed if seed is None else seed

    store = EntityStore(settings, clock=clock)
    now = clock()
    store.load_directory(
        users=default_users(),
        roles=DEFAULT_ROLES,
        courses=default_courses(),
        institutions=default_institutions(now),
    )
    store.load_leads(generate_leads(store, lead_count, rng=random.Random(seed), now=now))
    logger.info("Seeded store with %d leads (seed=%s)", lead_count, seed)
    return store
