"""
SQLAlchemy models for the database.
Maps domain entities to database tables.

Projects, tasks, memberships, profiles and policies are mirrors of tables
owned by other subsystems; this service only reads them.
"""

import uuid

from sqlalchemy import (
    Column, Integer, String, DateTime, Text, Boolean,
    Numeric, Date, ForeignKey, Uuid, Enum as SQLEnum,
    Index, UniqueConstraint, CheckConstraint
)
from sqlalchemy.sql import func

from timeledger.domain.models.timesheet import TimesheetStatus
from timeledger.infrastructure.db.database import Base


class ProjectModel(Base):
    """Project table (read only)"""
    __tablename__ = 'projects'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    code = Column(String(50))


class TaskModel(Base):
    """Task table (read only)"""
    __tablename__ = 'tasks'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, nullable=False, index=True)
    project_id = Column(Uuid, ForeignKey('projects.id'), nullable=False)
    name = Column(String(255), nullable=False)


class ProjectMemberModel(Base):
    """Project membership table (read only)"""
    __tablename__ = 'project_members'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, nullable=False)
    project_id = Column(Uuid, ForeignKey('projects.id'), nullable=False)
    user_id = Column(Uuid, nullable=False)
    role = Column(String(50), default="member")

    __table_args__ = (
        UniqueConstraint('tenant_id', 'project_id', 'user_id', name='uq_project_members_user'),
    )


class ProfileModel(Base):
    """User profile mirror holding the reporting line (read only)"""
    __tablename__ = 'profiles'

    user_id = Column(Uuid, primary_key=True)
    tenant_id = Column(Uuid, nullable=False, index=True)
    manager_user_id = Column(Uuid, index=True)


class TimesheetPolicyModel(Base):
    """Per-tenant timesheet settings (read only)"""
    __tablename__ = 'timesheet_policies'

    tenant_id = Column(Uuid, primary_key=True)
    week_start = Column(Integer, nullable=False, default=1)
    max_hours_per_day = Column(Numeric(5, 2))
    allow_overtime = Column(Boolean, default=False)
    lock_after_approval = Column(Boolean, default=True)


class TimeEntryModel(Base):
    """Time entry table"""
    __tablename__ = 'time_entries'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, nullable=False)
    user_id = Column(Uuid, nullable=False)
    project_id = Column(Uuid, ForeignKey('projects.id', name='fk_time_entries_project'), nullable=False)
    task_id = Column(Uuid, ForeignKey('tasks.id', name='fk_time_entries_task'))

    week_start_date = Column(Date, nullable=False)
    day_of_week = Column(Integer, nullable=False)
    hours = Column(Numeric(5, 2), nullable=False)
    note = Column(Text)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Constraints and indexes
    __table_args__ = (
        UniqueConstraint(
            'tenant_id', 'user_id', 'project_id', 'task_id', 'week_start_date', 'day_of_week',
            name='uq_time_entries_key',
            postgresql_nulls_not_distinct=True
        ),
        CheckConstraint('day_of_week >= 0 AND day_of_week <= 6', name='ck_time_entries_day_of_week'),
        CheckConstraint('hours >= 0 AND hours <= 24', name='ck_time_entries_hours'),
        Index('idx_time_entries_user_week', 'user_id', 'week_start_date'),
        Index('idx_time_entries_tenant_user_week', 'tenant_id', 'user_id', 'week_start_date'),
        Index('idx_time_entries_project', 'project_id'),
    )


class TimesheetModel(Base):
    """Timesheet table"""
    __tablename__ = 'timesheets'

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, nullable=False)
    user_id = Column(Uuid, nullable=False)
    week_start_date = Column(Date, nullable=False)

    status = Column(
        SQLEnum(
            TimesheetStatus,
            name='timesheet_status',
            values_callable=lambda enum: [member.value for member in enum]
        ),
        nullable=False,
        default=TimesheetStatus.DRAFT
    )

    # Approval workflow
    submitted_at = Column(DateTime)
    submitted_by_user_id = Column(Uuid)
    reviewed_at = Column(DateTime)
    reviewed_by_user_id = Column(Uuid)
    review_note = Column(Text)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now(), nullable=False)
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint('tenant_id', 'user_id', 'week_start_date', name='uq_timesheets_tenant_user_week'),
        Index('idx_timesheets_tenant_status', 'tenant_id', 'status'),
    )
