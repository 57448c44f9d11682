"""
Tests for the authentication API endpoints.
"""

import pytest
from allauth.account.models import EmailAddress
from allauth.account.models import EmailConfirmationHMAC
from django.core import mail
from django.test import Client

from projectsync.core.roles import Role
from projectsync.users.models import User
from projectsync.users.tests.factories import UserFactory


@pytest.fixture
def unauthenticated_client():
    client = Client()
    response = client.get("/api/auth/csrf")
    client.csrf_token = response.json()["csrf_token"]
    return client


def post_json(client, path, data):
    return client.post(
        path,
        data=data,
        content_type="application/json",
        HTTP_X_CSRFTOKEN=getattr(client, "csrf_token", ""),
    )


@pytest.mark.django_db
class TestLoginEndpoint:
    """Tests for POST /api/auth/login."""

    def test_login_returns_profile_with_role(self, unauthenticated_client, student):
        response = post_json(
            unauthenticated_client,
            "/api/auth/login",
            {"email": student.email, "password": "testpass123"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["user"]["email"] == student.email
        assert data["user"]["role"] == "student"

    def test_wrong_password(self, unauthenticated_client, student):
        response = post_json(
            unauthenticated_client,
            "/api/auth/login",
            {"email": student.email, "password": "wrong-password"},
        )

        assert response.status_code == 401
        assert response.json()["code"] == "INVALID_CREDENTIALS"

    def test_deactivated_account(self, unauthenticated_client, role_groups):
        user = UserFactory(email="gone@projectsync.edu", is_active=False, role=Role.STUDENT)

        response = post_json(
            unauthenticated_client,
            "/api/auth/login",
            {"email": user.email, "password": "testpass123"},
        )

        assert response.status_code == 401
        assert response.json()["code"] == "ACCOUNT_DISABLED"


@pytest.mark.django_db
class TestMeEndpoint:
    """Tests for GET /api/auth/me."""

    def test_authenticated_user_gets_profile(self, client_for, supervisor):
        response = client_for(supervisor).get("/api/auth/me")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == str(supervisor.id)
        assert data["role"] == "supervisor"

    def test_unauthenticated_user_rejected(self, unauthenticated_client):
        response = unauthenticated_client.get("/api/auth/me")

        assert response.status_code == 401
        assert response.json()["code"] == "NOT_AUTHENTICATED"

    def test_logout_ends_session(self, client_for, student):
        client = client_for(student)
        client.post("/api/auth/logout")

        assert client.get("/api/auth/me").status_code == 401


@pytest.mark.django_db
class TestSignupEndpoint:
    """Tests for POST /api/auth/signup."""

    payload = {
        "email": "new.student@projectsync.edu",
        "first_name": "Zara",
        "last_name": "Khan",
        "password": "Kq8!vTz2mW",
        "password_confirm": "Kq8!vTz2mW",
        "enrollment_number": "FA21-BSE-041",
        "semester": 8,
    }

    def test_signup_creates_active_student(self, unauthenticated_client, role_groups):
        response = post_json(unauthenticated_client, "/api/auth/signup", self.payload)

        assert response.status_code == 201
        user = User.objects.get(email="new.student@projectsync.edu")
        assert user.is_active
        assert user.role == "student"
        assert user.enrollment_number == "FA21-BSE-041"

    def test_duplicate_email(self, unauthenticated_client, role_groups):
        UserFactory(email="new.student@projectsync.edu")

        response = post_json(unauthenticated_client, "/api/auth/signup", self.payload)

        assert response.status_code == 409
        assert response.json()["code"] == "ALREADY_EXISTS"

    def test_password_mismatch(self, unauthenticated_client, role_groups):
        payload = {**self.payload, "password_confirm": "something-else"}

        response = post_json(unauthenticated_client, "/api/auth/signup", payload)

        assert response.status_code == 422

    def test_student_email_domain_enforced(self, unauthenticated_client, role_groups, settings):
        settings.STUDENT_EMAIL_DOMAIN = "uni.edu"

        response = post_json(unauthenticated_client, "/api/auth/signup", self.payload)

        assert response.status_code == 400
        assert "uni.edu" in response.json()["message"]
        assert not User.objects.filter(email="new.student@projectsync.edu").exists()


@pytest.mark.django_db
class TestVerifyEmailEndpoint:
    """Tests for POST /api/auth/verify-email."""

    def test_valid_key_verifies_address(self, unauthenticated_client, student):
        address = EmailAddress.objects.create(user=student, email=student.email, primary=True, verified=False)
        key = EmailConfirmationHMAC(address).key

        response = post_json(unauthenticated_client, "/api/auth/verify-email", {"key": key})

        assert response.status_code == 200
        assert response.json()["message"] == "Email verified."
        address.refresh_from_db()
        assert address.verified

    def test_invalid_key(self, unauthenticated_client, student):
        address = EmailAddress.objects.create(user=student, email=student.email, primary=True, verified=False)

        response = post_json(unauthenticated_client, "/api/auth/verify-email", {"key": "not-a-real-key"})

        assert response.status_code == 400
        address.refresh_from_db()
        assert not address.verified


@pytest.mark.django_db
class TestPasswordEndpoints:
    def test_reset_request_sends_mail(self, unauthenticated_client, student):
        response = post_json(unauthenticated_client, "/api/auth/password-reset", {"email": student.email})

        assert response.status_code == 200
        assert len(mail.outbox) == 1
        assert student.email in mail.outbox[0].to

    def test_reset_request_unknown_email_is_silent(self, unauthenticated_client, db):
        response = post_json(unauthenticated_client, "/api/auth/password-reset", {"email": "nobody@projectsync.edu"})

        assert response.status_code == 200
        assert len(mail.outbox) == 0

    def test_change_password(self, client_for, student):
        client = client_for(student)

        response = post_json(
            client,
            "/api/auth/password-change",
            {
                "current_password": "testpass123",
                "new_password": "Lp9#rQx4nB",
                "new_password_confirm": "Lp9#rQx4nB",
            },
        )

        assert response.status_code == 200
        student.refresh_from_db()
        assert student.check_password("Lp9#rQx4nB")

    def test_change_password_wrong_current(self, client_for, student):
        response = post_json(
            client_for(student),
            "/api/auth/password-change",
            {
                "current_password": "nope",
                "new_password": "Lp9#rQx4nB",
                "new_password_confirm": "Lp9#rQx4nB",
            },
        )

        assert response.status_code == 400
