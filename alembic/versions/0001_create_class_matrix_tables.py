"""Create class, roster, column, record and notification tables

Revision ID: 3a1f9c2d7e10
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3a1f9c2d7e10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the class aggregate, the record store and the notification inbox."""
    op.create_table(
        'classes',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('code', sa.String(length=6), nullable=False),
        sa.Column('teacher_id', sa.String(), nullable=False),
        sa.Column('is_archived', sa.Boolean(), nullable=False),
        sa.Column('schedule', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
    )
    op.create_index('ix_classes_id', 'classes', ['id'])
    op.create_index('ix_classes_name', 'classes', ['name'])
    op.create_index('ix_classes_code', 'classes', ['code'], unique=True)
    op.create_index('ix_classes_teacher_id', 'classes', ['teacher_id'])

    op.create_table(
        'class_memberships',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('class_id', sa.String(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('student_id', sa.String(), nullable=False),
        sa.Column('roll_number', sa.String(), nullable=True),
        sa.Column('joined_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('class_id', 'student_id', name='uq_membership_class_student'),
    )
    op.create_index('ix_class_memberships_class_id', 'class_memberships', ['class_id'])
    op.create_index('ix_class_memberships_student_id', 'class_memberships', ['student_id'])

    op.create_table(
        'join_requests',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('class_id', sa.String(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('student_id', sa.String(), nullable=False),
        sa.Column('roll_number', sa.String(), nullable=True),
        sa.Column('requested_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('class_id', 'student_id', name='uq_join_request_class_student'),
    )
    op.create_index('ix_join_requests_class_id', 'join_requests', ['class_id'])
    op.create_index('ix_join_requests_student_id', 'join_requests', ['student_id'])

    op.create_table(
        'matrix_columns',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('class_id', sa.String(), sa.ForeignKey('classes.id'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('kind', sa.String(), nullable=False),
        sa.Column('visibility', sa.String(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_matrix_columns_id', 'matrix_columns', ['id'])
    op.create_index('ix_matrix_columns_class_id', 'matrix_columns', ['class_id'])

    op.create_table(
        'class_records',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('class_id', sa.String(), nullable=False),
        sa.Column('student_id', sa.String(), nullable=False),
        sa.Column('column_id', sa.String(), nullable=False),
        sa.Column('value', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('class_id', 'student_id', 'column_id', name='uq_record_class_student_column'),
    )
    op.create_index('ix_class_records_id', 'class_records', ['id'])
    op.create_index('ix_class_records_class_id', 'class_records', ['class_id'])
    op.create_index('ix_class_records_student_id', 'class_records', ['student_id'])
    op.create_index('ix_class_records_column_id', 'class_records', ['column_id'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.String(), primary_key=True),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('message', sa.String(), nullable=False),
        sa.Column('type', sa.String(), nullable=False),
        sa.Column('status', sa.String(), nullable=True),
        sa.Column('link', sa.String(), nullable=True),
        sa.Column('read', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index('ix_notifications_id', 'notifications', ['id'])
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])


def downgrade() -> None:
    """Drop every table created by this revision."""
    op.drop_table('notifications')
    op.drop_table('class_records')
    op.drop_table('matrix_columns')
    op.drop_table('join_requests')
    op.drop_table('class_memberships')
    op.drop_table('classes')
