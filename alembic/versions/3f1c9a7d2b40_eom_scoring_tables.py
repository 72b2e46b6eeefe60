"""eom scoring tables

Revision ID: 3f1c9a7d2b40
Revises: 
Create Date: 2026-10-17 10:12:44.118305

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a7d2b40'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _flag_columns(verified: bool):
    columns = []
    for flag, note, link, amount in (
        ('has_disciplinary_action', 'disciplinary_action_note', 'disciplinary_evidence_link', 'disciplinary_penalty'),
        ('has_poor_attendance', 'attendance_note', 'attendance_evidence_link', 'attendance_penalty'),
        ('has_poor_performance', 'performance_note', 'performance_evidence_link', 'performance_penalty'),
        ('has_contribution', 'contribution_description', 'contribution_evidence_link', 'contribution_bonus'),
    ):
        columns += [
            sa.Column(flag, sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column(note, sa.Text(), nullable=True),
            sa.Column(link, sa.String(), nullable=True),
            sa.Column(amount, sa.Integer(), nullable=False, server_default='0'),
        ]
        if verified:
            prefix = amount.rsplit('_', 1)[0]
            columns += [
                sa.Column(f'{prefix}_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
                sa.Column(f'{prefix}_verified_at', sa.DateTime(timezone=True), nullable=True),
            ]
    return columns


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        'employees',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=False, unique=True),
        sa.Column('role', sa.String(), nullable=False, server_default='user_unit'),
        sa.Column('employee_category', sa.String(), nullable=False, server_default='ASN'),
        sa.Column('work_unit_id', sa.Integer(), nullable=True),
    )
    op.create_index('ix_employees_id', 'employees', ['id'])

    op.create_table(
        'employee_ratings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('rater_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('rated_employee_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('rating_period', sa.String(7), nullable=False),
        sa.Column('detailed_ratings', sa.JSON(), nullable=False),
        sa.Column('criteria_totals', sa.JSON(), nullable=False),
        sa.Column('total_points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('max_possible_points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('reason', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_employee_ratings_id', 'employee_ratings', ['id'])
    op.create_index('ix_employee_ratings_rated_employee_id', 'employee_ratings', ['rated_employee_id'])
    op.create_index('ix_employee_ratings_rating_period', 'employee_ratings', ['rating_period'])

    op.create_table(
        'unit_evaluations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('rated_employee_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('rating_period', sa.String(7), nullable=False),
        sa.Column('evaluator_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('work_unit_id', sa.Integer(), nullable=True),
        sa.Column('original_total_points', sa.Integer(), nullable=False),
        *_flag_columns(verified=False),
        sa.Column('final_total_points', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('rated_employee_id', 'rating_period', name='uq_unit_eval_employee_period'),
    )
    op.create_index('ix_unit_evaluations_id', 'unit_evaluations', ['id'])

    op.create_table(
        'final_evaluations',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('rated_employee_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('rating_period', sa.String(7), nullable=False),
        sa.Column('evaluator_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('peer_total_points', sa.Integer(), nullable=False),
        sa.Column('unit_evaluation_id', sa.Integer(), sa.ForeignKey('unit_evaluations.id', ondelete='SET NULL'), nullable=True),
        sa.Column('unit_final_points', sa.Integer(), nullable=True),
        *_flag_columns(verified=True),
        sa.Column('additional_adjustment', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('additional_adjustment_note', sa.Text(), nullable=True),
        sa.Column('final_total_points', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('rated_employee_id', 'rating_period', name='uq_final_eval_employee_period'),
    )
    op.create_index('ix_final_evaluations_id', 'final_evaluations', ['id'])

    op.create_table(
        'designated_winners',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('winner_type', sa.String(), nullable=False),
        sa.Column('employee_category', sa.String(), nullable=False),
        sa.Column('period', sa.String(7), nullable=False),
        sa.Column('employee_id', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('final_points', sa.Integer(), nullable=False),
        sa.Column('designated_by', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
        sa.Column('designated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('winner_type', 'employee_category', 'period', name='uq_winner_type_category_period'),
    )
    op.create_index('ix_designated_winners_id', 'designated_winners', ['id'])

    op.create_table(
        'eom_settings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('period', sa.String(7), nullable=False, unique=True),
        sa.Column('rating_start_date', sa.Date(), nullable=False),
        sa.Column('rating_end_date', sa.Date(), nullable=False),
        sa.Column('evaluation_start_date', sa.Date(), nullable=False),
        sa.Column('evaluation_end_date', sa.Date(), nullable=False),
        sa.Column('verification_start_date', sa.Date(), nullable=False),
        sa.Column('verification_end_date', sa.Date(), nullable=False),
        sa.Column('created_by', sa.Integer(), sa.ForeignKey('employees.id'), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_eom_settings_id', 'eom_settings', ['id'])


def downgrade() -> None:
    op.drop_table('eom_settings')
    op.drop_table('designated_winners')
    op.drop_table('final_evaluations')
    op.drop_table('unit_evaluations')
    op.drop_table('employee_ratings')
    op.drop_table('employees')
