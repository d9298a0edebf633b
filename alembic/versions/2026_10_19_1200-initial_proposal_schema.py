"""initial_proposal_schema

Revision ID: initial_proposal_schema
Revises:
Create Date: 2026-10-19 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'initial_proposal_schema'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('user_type', sa.String(length=20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table(
        'candidates',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=20), nullable=True),
        sa.Column('cpf', sa.String(length=11), nullable=True, unique=True),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index(op.f('ix_candidates_id'), 'candidates', ['id'], unique=False)

    op.create_table(
        'institutions',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('trade_name', sa.String(length=255), nullable=False),
        sa.Column('cnpj', sa.String(length=14), nullable=True, unique=True),
        sa.Column('corporate_mobile', sa.String(length=20), nullable=True),
        sa.Column('landline_phone', sa.String(length=20), nullable=True),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index(op.f('ix_institutions_id'), 'institutions', ['id'], unique=False)

    op.create_table(
        'vacancies',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('institution_id', sa.Integer(), sa.ForeignKey('institutions.id', ondelete='CASCADE'), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='ATIVA'),
        sa.Column('city', sa.String(length=120), nullable=True),
        sa.Column('state', sa.String(length=2), nullable=True),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )
    op.create_index(op.f('ix_vacancies_id'), 'vacancies', ['id'], unique=False)
    op.create_index(op.f('ix_vacancies_institution_id'), 'vacancies', ['institution_id'], unique=False)
    op.create_index(op.f('ix_vacancies_status'), 'vacancies', ['status'], unique=False)
    op.create_index('idx_vacancies_institution_status', 'vacancies', ['institution_id', 'status'])

    op.create_table(
        'proposals',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('vacancy_id', sa.Integer(), sa.ForeignKey('vacancies.id', ondelete='CASCADE'), nullable=False),
        sa.Column('candidate_id', sa.Integer(), sa.ForeignKey('candidates.id', ondelete='CASCADE'), nullable=False),
        sa.Column('initiator', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='ENVIADA'),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('response_message', sa.Text(), nullable=True),
        sa.Column('responded_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        # One live proposal per candidate and vacancy; cancelled rows are deleted
        sa.UniqueConstraint('candidate_id', 'vacancy_id', name='unique_candidate_vacancy_proposal'),
        sa.CheckConstraint("initiator IN ('CANDIDATO', 'INSTITUICAO')", name='ck_proposals_initiator'),
        sa.CheckConstraint("status IN ('ENVIADA', 'ACEITA', 'RECUSADA')", name='ck_proposals_status'),
    )
    op.create_index(op.f('ix_proposals_id'), 'proposals', ['id'], unique=False)
    op.create_index(op.f('ix_proposals_vacancy_id'), 'proposals', ['vacancy_id'], unique=False)
    op.create_index(op.f('ix_proposals_candidate_id'), 'proposals', ['candidate_id'], unique=False)
    op.create_index(op.f('ix_proposals_status'), 'proposals', ['status'], unique=False)
    op.create_index('idx_proposals_candidate_status', 'proposals', ['candidate_id', 'status'])
    op.create_index('idx_proposals_created_id', 'proposals', ['created_at', 'id'])


def downgrade() -> None:
    op.drop_table('proposals')
    op.drop_table('vacancies')
    op.drop_table('institutions')
    op.drop_table('candidates')
    op.drop_table('users')
