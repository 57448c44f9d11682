"""
Seed command to populate the database with demo data for frontend development.

Usage:
    python manage.py seed_demo
    python manage.py seed_demo --clear  # Clear existing demo data first
"""

import logging
from datetime import date
from datetime import timedelta

from django.contrib.auth.models import Group as AuthGroup
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from projectsync.academics.models import AcademicSession
from projectsync.academics.models import DeadlineType
from projectsync.academics.models import SessionDeadline
from projectsync.core.roles import Role
from projectsync.groups.models import ProjectGroup
from projectsync.projects.models import Project
from projectsync.projects.services import review_project
from projectsync.supervision.services import assign_supervisor
from projectsync.users.models import User

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "demo123"
DEMO_SESSION = "Demo 2025-2026"
DEMO_DOMAIN = "demo.projectsync.edu"

STAFF = [
    ("pmo", "Ayesha", "Khan", Role.PMO),
    ("exams", "Usman", "Tariq", Role.EXAM_CELL),
    ("panel", "Farah", "Naveed", Role.EXTERNAL_PANEL),
    ("dr.ahmed", "Imran", "Ahmed", Role.SUPERVISOR),
    ("dr.saleem", "Nadia", "Saleem", Role.SUPERVISOR),
]

STUDENTS = [
    ("ali.raza", "Ali", "Raza"),
    ("sara.malik", "Sara", "Malik"),
    ("hamza.iqbal", "Hamza", "Iqbal"),
    ("zainab.shah", "Zainab", "Shah"),
    ("omar.farooq", "Omar", "Farooq"),
    ("maryam.butt", "Maryam", "Butt"),
    ("bilal.aslam", "Bilal", "Aslam"),
    ("hina.javed", "Hina", "Javed"),
]


class Command(BaseCommand):
    help = "Seed database with demo data for frontend development"

    def add_arguments(self, parser):
        parser.add_argument(
            "--clear",
            action="store_true",
            help="Clear existing demo data before seeding",
        )

    def handle(self, *args, **options):
        if options["clear"]:
            self.clear_demo_data()

        self.stdout.write("Creating demo data...")
        self.create_role_groups()

        with transaction.atomic():
            staff = {
                role: self.create_user(f"{local}@{DEMO_DOMAIN}", first_name, last_name, role=role)
                for local, first_name, last_name, role in STAFF
                if role != Role.SUPERVISOR
            }
            supervisors = [
                self.create_user(f"{local}@{DEMO_DOMAIN}", first_name, last_name, role=role)
                for local, first_name, last_name, role in STAFF
                if role == Role.SUPERVISOR
            ]
            students = [
                self.create_user(f"{local}@{DEMO_DOMAIN}", first_name, last_name, role=Role.STUDENT)
                for local, first_name, last_name in STUDENTS
            ]

            session = self.create_session()
            approved, submitted, forming = self.create_groups(session, students)

            # Group 1: supervised, project approved with milestones
            assign_supervisor(approved, supervisors[0], staff[Role.PMO])
            project = Project.objects.create(
                group=approved,
                title="Smart Campus Attendance",
                abstract="Face recognition based attendance tracking for lecture halls.",
                domain="Machine Learning",
            )
            project.submit()
            project.save()
            review_project(project, True, staff[Role.PMO])
            self.stdout.write(f"  Created project: {project.title} (approved)")

            # Group 2: supervised, project waiting for review
            assign_supervisor(submitted, supervisors[1], staff[Role.PMO])
            project = Project.objects.create(
                group=submitted,
                title="Blood Donation Network",
                abstract="Matching donors and hospitals by blood group and location.",
                domain="Web",
            )
            project.submit()
            project.save()
            self.stdout.write(f"  Created project: {project.title} (submitted)")

        solitaires = students[6:]
        self.stdout.write(self.style.SUCCESS("\nDemo data created successfully!"))
        self.stdout.write("\nSummary:")
        self.stdout.write(f"  - Session: {session.name} (active)")
        self.stdout.write(f"  - Staff: {', '.join(u.email for u in staff.values())}")
        self.stdout.write(f"  - Supervisors: {', '.join(u.email for u in supervisors)}")
        self.stdout.write(f"  - {len(students)} students, {len(solitaires)} without a group")
        self.stdout.write(f"  - Groups: {approved.name}, {submitted.name}, {forming.name}")
        self.stdout.write(f"\nDefault password for all users: {DEMO_PASSWORD}")

    def create_role_groups(self):
        """Create Django auth groups for roles."""
        for role in Role:
            AuthGroup.objects.get_or_create(name=role.value)
        self.stdout.write("  Role groups created/verified")

    def create_user(self, email, first_name, last_name, role):
        """Create a user if not exists."""
        user, created = User.objects.get_or_create(
            email=email,
            defaults={
                "first_name": first_name,
                "last_name": last_name,
                "is_active": True,
            },
        )
        if created:
            user.set_password(DEMO_PASSWORD)
            user.save()
            user.set_role(role)
            self.stdout.write(f"  Created user: {email} ({role.value})")
        return user

    def create_session(self):
        today = date.today()
        now = timezone.now()
        session = AcademicSession.objects.create(
            name=DEMO_SESSION,
            start_date=today - timedelta(days=30),
            end_date=today + timedelta(days=300),
        )
        session.activate()

        deadlines = [
            (DeadlineType.GROUP_FORMATION, "Group formation", 10),
            (DeadlineType.SUPERVISOR_SELECTION, "Supervisor selection", 20),
            (DeadlineType.PROPOSAL, "Proposal submission", 45),
            (DeadlineType.MID_TERM, "Mid-term report", 140),
            (DeadlineType.FINAL, "Final report and defence", 280),
        ]
        for deadline_type, name, days in deadlines:
            SessionDeadline.objects.create(
                session=session,
                deadline_type=deadline_type,
                name=name,
                due_date=now + timedelta(days=days),
            )
        self.stdout.write(f"  Created session: {session.name} with {len(deadlines)} deadlines")
        return session

    def create_groups(self, session, students):
        approved = ProjectGroup.objects.create(name="Vision Squad", leader=students[0], session=session)
        approved.members.add(students[1], students[2])

        submitted = ProjectGroup.objects.create(name="Life Savers", leader=students[3], session=session)
        submitted.members.add(students[4])

        # Leader only, still recruiting
        forming = ProjectGroup.objects.create(name="Byte Builders", leader=students[5], session=session)

        for group in (approved, submitted, forming):
            self.stdout.write(f"  Created group: {group.name} ({group.member_count} members)")
        return approved, submitted, forming

    def clear_demo_data(self):
        """Clear existing demo data."""
        self.stdout.write("Clearing existing demo data...")

        # Groups cascade to projects, submissions and evaluations
        ProjectGroup.objects.filter(session__name=DEMO_SESSION).delete()
        AcademicSession.objects.filter(name=DEMO_SESSION).delete()
        User.objects.filter(email__endswith=f"@{DEMO_DOMAIN}").delete()

        self.stdout.write(self.style.WARNING("  Demo data cleared"))
