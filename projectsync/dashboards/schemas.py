from uuid import UUID

from ninja import Schema


class StudentDashboardSchema(Schema):
    group_id: UUID | None
    group_name: str | None
    group_status: str | None
    member_count: int
    supervisor_name: str | None
    project_id: UUID | None
    project_status: str | None
    milestone_progress: int
    pending_invitations: int
    upcoming_deadlines: int
    unread_notifications: int
    results_published: bool


class SupervisorDashboardSchema(Schema):
    supervised_groups: int
    capacity: int
    pending_requests: int
    projects_to_review: int
    submissions_to_review: int
    pending_evaluations: int
    unread_notifications: int


class PMODashboardSchema(Schema):
    students: int
    supervisors: int
    groups: int
    groups_without_supervisor: int
    projects_by_status: dict[str, int]
    pending_supervision_requests: int
    submissions_to_review: int
    overdue_milestones: int


class ExternalDashboardSchema(Schema):
    projects_to_evaluate: int
    evaluations_submitted: int
    evaluations_locked: int


class ExamCellDashboardSchema(Schema):
    approved_projects: int
    evaluations_submitted: int
    results_compiled: int
    results_published: bool


class AdminDashboardSchema(Schema):
    users_by_role: dict[str, int]
    active_users: int
    inactive_users: int
    sessions: int
    active_session: str | None
    audit_entries_last_24h: int
