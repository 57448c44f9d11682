from datetime import date
from datetime import timedelta

import pytest
from django.contrib.auth.models import Group
from django.test import Client

from projectsync.academics.models import AcademicSession
from projectsync.core.roles import Role
from projectsync.groups.models import GroupStatus
from projectsync.groups.models import ProjectGroup
from projectsync.projects.models import Project
from projectsync.projects.models import ProjectStatus
from projectsync.users.tests.factories import UserFactory

PASSWORD = "testpass123"


@pytest.fixture(autouse=True)
def _media_storage(settings, tmp_path):
    settings.MEDIA_ROOT = tmp_path / "media"


@pytest.fixture
def role_groups(db):
    """Create all role groups."""
    return {role: Group.objects.get_or_create(name=role.value)[0] for role in Role}


@pytest.fixture
def student(role_groups):
    return UserFactory(email="student@projectsync.edu", first_name="Sana", role=Role.STUDENT)


@pytest.fixture
def student2(role_groups):
    return UserFactory(email="student2@projectsync.edu", first_name="Bilal", role=Role.STUDENT)


@pytest.fixture
def student3(role_groups):
    return UserFactory(email="student3@projectsync.edu", first_name="Hira", role=Role.STUDENT)


@pytest.fixture
def supervisor(role_groups):
    return UserFactory(email="supervisor@projectsync.edu", first_name="Kamran", role=Role.SUPERVISOR)


@pytest.fixture
def pmo(role_groups):
    return UserFactory(email="pmo@projectsync.edu", first_name="Ayesha", role=Role.PMO)


@pytest.fixture
def external(role_groups):
    return UserFactory(email="external@projectsync.edu", first_name="Imran", role=Role.EXTERNAL_PANEL)


@pytest.fixture
def exam_cell(role_groups):
    return UserFactory(email="exams@projectsync.edu", first_name="Nadia", role=Role.EXAM_CELL)


@pytest.fixture
def admin_user(role_groups):
    return UserFactory(email="admin@projectsync.edu", first_name="Admin", role=Role.ADMIN, is_staff=True)


def login(user) -> Client:
    """Return a client logged in through the session API."""
    client = Client()
    response = client.get("/api/auth/csrf")
    csrf_token = response.json()["csrf_token"]
    client.post(
        "/api/auth/login",
        data={"email": user.email, "password": PASSWORD},
        content_type="application/json",
        HTTP_X_CSRFTOKEN=csrf_token,
    )
    client.csrf_token = csrf_token
    return client


@pytest.fixture
def client_for():
    """Return a function that logs a user in and returns the client."""
    return login


@pytest.fixture
def active_session(db):
    today = date.today()
    return AcademicSession.objects.create(
        name="2025-2026",
        start_date=today - timedelta(days=30),
        end_date=today + timedelta(days=300),
        is_active=True,
    )


@pytest.fixture
def group(active_session, student, student2):
    """Open group led by ``student`` with ``student2`` as member."""
    group = ProjectGroup.objects.create(name="Team Alpha", leader=student, session=active_session)
    group.members.add(student2)
    return group


@pytest.fixture
def project(group):
    return Project.objects.create(
        group=group,
        title="Smart Attendance System",
        abstract="Face recognition based attendance for lecture halls.",
        domain="Machine Learning",
    )


@pytest.fixture
def approved_project(project, supervisor):
    """``project`` approved, with ``supervisor`` assigned to its group."""
    group = project.group
    group.supervisor = supervisor
    group.status = GroupStatus.LOCKED
    group.save()
    project.supervisor = supervisor
    project.status = ProjectStatus.APPROVED
    project.save()
    return project
