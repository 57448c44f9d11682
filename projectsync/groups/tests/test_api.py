"""
Tests for the groups API endpoints.
"""

from datetime import timedelta

import pytest
from django.utils import timezone

from projectsync.academics.models import SessionDeadline
from projectsync.groups.models import GroupInvitation
from projectsync.groups.models import GroupStatus
from projectsync.groups.models import InvitationStatus
from projectsync.groups.models import ProjectGroup
from projectsync.notifications.models import Notification
from projectsync.notifications.models import NotificationType


@pytest.mark.django_db
class TestCreateGroupEndpoint:
    """Tests for POST /api/groups/."""

    def test_student_creates_group(self, client_for, student, active_session):
        response = client_for(student).post(
            "/api/groups/",
            data={"name": "Team Alpha"},
            content_type="application/json",
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Team Alpha"
        assert data["leader"]["id"] == str(student.id)
        assert data["member_count"] == 1
        assert data["status"] == "open"

    def test_without_active_session(self, client_for, student):
        response = client_for(student).post(
            "/api/groups/",
            data={"name": "Team Alpha"},
            content_type="application/json",
        )

        assert response.status_code == 400

    def test_student_already_in_group(self, client_for, student2, group):
        response = client_for(student2).post(
            "/api/groups/",
            data={"name": "Another"},
            content_type="application/json",
        )

        assert response.status_code == 409

    def test_supervisor_cannot_create(self, client_for, supervisor, active_session):
        response = client_for(supervisor).post(
            "/api/groups/",
            data={"name": "Staff group"},
            content_type="application/json",
        )

        assert response.status_code == 403

    def test_after_formation_deadline(self, client_for, student, active_session):
        SessionDeadline.objects.create(
            session=active_session,
            name="Group formation",
            deadline_type="group_formation",
            due_date=timezone.now() - timedelta(days=1),
        )

        response = client_for(student).post(
            "/api/groups/",
            data={"name": "Late"},
            content_type="application/json",
        )

        assert response.status_code == 400
        assert "deadline" in response.json()["message"]

    def test_duplicate_name_in_session(self, client_for, student3, group):
        response = client_for(student3).post(
            "/api/groups/",
            data={"name": group.name},
            content_type="application/json",
        )

        assert response.status_code == 409

    def test_creating_declines_pending_invitations(self, client_for, student, student3, group):
        invitation = GroupInvitation.objects.create(group=group, invitee=student3, invited_by=student)

        response = client_for(student3).post(
            "/api/groups/",
            data={"name": "Own team"},
            content_type="application/json",
        )

        assert response.status_code == 201
        invitation.refresh_from_db()
        assert invitation.status == InvitationStatus.DECLINED


@pytest.mark.django_db
class TestViewGroups:
    def test_my_group(self, client_for, student2, group):
        response = client_for(student2).get("/api/groups/my")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == str(group.id)
        assert len(data["members"]) == 2
        assert data["project_id"] is None

    def test_my_group_none(self, client_for, student3, active_session):
        response = client_for(student3).get("/api/groups/my")

        assert response.status_code == 404

    def test_outsider_cannot_view_group(self, client_for, student3, group):
        response = client_for(student3).get(f"/api/groups/{group.id}")

        assert response.status_code == 403

    def test_pmo_sees_all_groups(self, client_for, pmo, group):
        response = client_for(pmo).get("/api/groups/")

        assert response.status_code == 200
        assert [g["id"] for g in response.json()] == [str(group.id)]

    def test_student_sees_only_own_groups(self, client_for, student3, group):
        response = client_for(student3).get("/api/groups/")

        assert response.json() == []

    def test_available_students(self, client_for, student, student3, group):
        response = client_for(student).get("/api/groups/available-students")

        assert response.status_code == 200
        assert [s["id"] for s in response.json()] == [str(student3.id)]


@pytest.mark.django_db
class TestInvitations:
    def test_leader_invites_student(self, client_for, student, student3, group):
        response = client_for(student).post(
            f"/api/groups/{group.id}/invite",
            data={"invitee_email": student3.email, "message": "Join us"},
            content_type="application/json",
        )

        assert response.status_code == 201
        assert response.json()["status"] == "pending"
        assert Notification.objects.filter(
            user=student3,
            notification_type=NotificationType.GROUP_INVITATION,
        ).exists()

    def test_member_cannot_invite(self, client_for, student2, student3, group):
        response = client_for(student2).post(
            f"/api/groups/{group.id}/invite",
            data={"invitee_email": student3.email},
            content_type="application/json",
        )

        assert response.status_code == 403

    def test_cannot_invite_grouped_student(self, client_for, student, student3, active_session, group):
        ProjectGroup.objects.create(name="Team Gamma", leader=student3, session=active_session)

        response = client_for(student).post(
            f"/api/groups/{group.id}/invite",
            data={"invitee_email": student3.email},
            content_type="application/json",
        )

        assert response.status_code == 400

    def test_cannot_invite_staff(self, client_for, student, supervisor, group):
        response = client_for(student).post(
            f"/api/groups/{group.id}/invite",
            data={"invitee_email": supervisor.email},
            content_type="application/json",
        )

        assert response.status_code == 400

    def test_duplicate_pending_invitation(self, client_for, student, student3, group):
        GroupInvitation.objects.create(group=group, invitee=student3, invited_by=student)

        response = client_for(student).post(
            f"/api/groups/{group.id}/invite",
            data={"invitee_email": student3.email},
            content_type="application/json",
        )

        assert response.status_code == 409

    def test_invitee_accepts(self, client_for, student, student3, group):
        invitation = GroupInvitation.objects.create(group=group, invitee=student3, invited_by=student)

        response = client_for(student3).post(
            f"/api/groups/invitations/{invitation.id}/respond",
            data={"accept": True},
            content_type="application/json",
        )

        assert response.status_code == 200
        assert response.json()["status"] == "accepted"
        assert group.is_member(student3)

    def test_only_invitee_can_respond(self, client_for, student, student2, student3, group):
        invitation = GroupInvitation.objects.create(group=group, invitee=student3, invited_by=student)

        response = client_for(student2).post(
            f"/api/groups/invitations/{invitation.id}/respond",
            data={"accept": True},
            content_type="application/json",
        )

        assert response.status_code == 403

    def test_received_invitations(self, client_for, student, student3, group):
        GroupInvitation.objects.create(group=group, invitee=student3, invited_by=student)

        response = client_for(student3).get("/api/groups/invitations/received")

        assert response.status_code == 200
        assert response.json()[0]["group_name"] == group.name

    def test_leader_cancels_invitation(self, client_for, student, student3, group):
        invitation = GroupInvitation.objects.create(group=group, invitee=student3, invited_by=student)

        response = client_for(student).post(f"/api/groups/{group.id}/invitations/{invitation.id}/cancel")

        assert response.status_code == 200
        invitation.refresh_from_db()
        assert invitation.status == InvitationStatus.CANCELLED


@pytest.mark.django_db
class TestMembership:
    def test_member_leaves(self, client_for, student2, group):
        response = client_for(student2).post(f"/api/groups/{group.id}/leave")

        assert response.status_code == 200
        assert not group.is_member(student2)

    def test_leader_cannot_leave(self, client_for, student, group):
        response = client_for(student).post(f"/api/groups/{group.id}/leave")

        assert response.status_code == 400

    def test_cannot_leave_locked_group(self, client_for, student2, group):
        group.status = GroupStatus.LOCKED
        group.save()

        response = client_for(student2).post(f"/api/groups/{group.id}/leave")

        assert response.status_code == 400
        assert group.is_member(student2)

    def test_leader_removes_member(self, client_for, student, student2, group):
        response = client_for(student).post(f"/api/groups/{group.id}/members/{student2.id}/remove")

        assert response.status_code == 200
        assert response.json()["member_count"] == 1

    def test_transfer_leadership(self, client_for, student, student2, group):
        response = client_for(student).post(
            f"/api/groups/{group.id}/transfer-leadership",
            data={"new_leader_id": str(student2.id)},
            content_type="application/json",
        )

        assert response.status_code == 200
        assert response.json()["leader"]["id"] == str(student2.id)
