"""create_attendance_tables

Revision ID: 3a7e91c4d2f0
Revises:
Create Date: 2026-01-05 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3a7e91c4d2f0'
down_revision = None
branch_labels = None
depends_on = None

COURSE_ROLES = ('Professor', 'TA', 'Tutor', 'Team Leader', 'Student')


def upgrade():
    # Directory tables, owned by course management and only read here
    op.create_table(
        'users',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('email', sa.String(length=320), nullable=False, unique=True),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
    )
    op.create_table(
        'terms',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
    )
    op.create_table(
        'courses',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('term_id', sa.String(length=36), sa.ForeignKey('terms.id'), nullable=False),
        sa.Column('code', sa.String(length=20), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
    )
    op.create_table(
        'enrollments',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('user_id', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('course_id', sa.String(length=36), sa.ForeignKey('courses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('role', sa.Enum(*COURSE_ROLES, name='course_role'), nullable=False),
        sa.UniqueConstraint('user_id', 'course_id', name='uq_enrollment_user_course'),
    )
    op.create_index('idx_enrollments_course', 'enrollments', ['course_id'])
    op.create_table(
        'teams',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('course_id', sa.String(length=36), sa.ForeignKey('courses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
    )
    op.create_table(
        'team_memberships',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('team_id', sa.String(length=36), sa.ForeignKey('teams.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.UniqueConstraint('team_id', 'user_id', name='uq_team_membership'),
    )

    op.create_table(
        'meetings',
        sa.Column('id', sa.String(length=36), primary_key=True),
        sa.Column('creator_id', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('course_id', sa.String(length=36), sa.ForeignKey('courses.id', ondelete='CASCADE'), nullable=False),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('meeting_date', sa.Date(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('location', sa.String(length=200), nullable=True),
        sa.Column('meeting_type', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_recurring', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            'parent_meeting_id',
            sa.String(length=36),
            sa.ForeignKey('meetings.id', ondelete='SET NULL'),
            nullable=True,
        ),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('idx_meetings_course', 'meetings', ['course_id'])
    op.create_index('idx_meetings_parent_date', 'meetings', ['parent_meeting_id', 'meeting_date'])

    op.create_table(
        'participants',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('meeting_id', sa.String(length=36), sa.ForeignKey('meetings.id', ondelete='CASCADE'), nullable=False),
        sa.Column('user_id', sa.String(length=36), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('present', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('attendance_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('meeting_id', 'user_id', name='uq_participant_meeting_user'),
    )
    op.create_index('idx_participants_user', 'participants', ['user_id'])

    op.create_table(
        'meeting_codes',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('meeting_id', sa.String(length=36), sa.ForeignKey('meetings.id', ondelete='CASCADE'), nullable=False),
        sa.Column('code', sa.String(length=16), nullable=False),
        sa.Column('qr_url', sa.String(length=1024), nullable=False),
        sa.Column('valid_start', sa.DateTime(timezone=True), nullable=False),
        sa.Column('valid_end', sa.DateTime(timezone=True), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('idx_meeting_codes_meeting_code', 'meeting_codes', ['meeting_id', 'code'])


def downgrade():
    op.drop_index('idx_meeting_codes_meeting_code', table_name='meeting_codes')
    op.drop_table('meeting_codes')
    op.drop_index('idx_participants_user', table_name='participants')
    op.drop_table('participants')
    op.drop_index('idx_meetings_parent_date', table_name='meetings')
    op.drop_index('idx_meetings_course', table_name='meetings')
    op.drop_table('meetings')
    op.drop_table('team_memberships')
    op.drop_table('teams')
    op.drop_index('idx_enrollments_course', table_name='enrollments')
    op.drop_table('enrollments')
    op.drop_table('courses')
    op.drop_table('terms')
    op.drop_table('users')
    sa.Enum(name='course_role').drop(op.get_bind(), checkfirst=True)
