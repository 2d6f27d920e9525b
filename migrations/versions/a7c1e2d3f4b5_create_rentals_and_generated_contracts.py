"""Create rentals and generated_contracts tables

Revision ID: a7c1e2d3f4b5
Revises:
Create Date: 2026-10-19

Contratos gerados e reconciliados pelo webhook de assinatura
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = 'a7c1e2d3f4b5'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'rentals',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('contract_number', sa.String(50), nullable=False),
        sa.Column('client_name', sa.String(255), nullable=True),
        sa.Column('client_email', sa.String(255), nullable=True),
        sa.Column('franchisee_name', sa.String(255), nullable=True),
        sa.Column('franchisee_email', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'generated_contracts',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('rental_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('external_document_id', sa.String(255), nullable=True),
        sa.Column('status', sa.String(50), nullable=False, server_default='draft'),
        sa.Column('signers', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('signed_at', sa.DateTime(), nullable=True),
        sa.Column('document_url', sa.String(1000), nullable=True),
        sa.Column('last_webhook_payload', postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['rental_id'], ['rentals.id']),
        sa.PrimaryKeyConstraint('id')
    )

    # Índices
    with op.batch_alter_table('generated_contracts', schema=None) as batch_op:
        batch_op.create_index('ix_generated_contracts_external_document_id', ['external_document_id'], unique=False)
        batch_op.create_index('idx_generated_contracts_rental', ['rental_id'], unique=False)


def downgrade():
    op.drop_table('generated_contracts')
    op.drop_table('rentals')
