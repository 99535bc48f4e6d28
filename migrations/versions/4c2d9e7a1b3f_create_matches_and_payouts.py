"""create matches and payouts tables

Revision ID: 4c2d9e7a1b3f
Revises:
Create Date: 2026-10-16 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '4c2d9e7a1b3f'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'matches' not in existing_tables:
        op.create_table(
            'matches',
            sa.Column('id', sa.String(length=36), primary_key=True),
            sa.Column('party_a', sa.String(length=64), nullable=False),
            sa.Column('party_b', sa.String(length=64), nullable=True),
            sa.Column('stake', sa.BigInteger(), nullable=False, server_default='0'),
            sa.Column('turn', sa.String(length=1), nullable=False, server_default='X'),
            sa.Column('cells', sa.Text(), nullable=False),
            sa.Column('phase', sa.String(length=16), nullable=False, server_default='waiting'),
            sa.Column('outcome', sa.String(length=8), nullable=True),
            sa.Column('is_practice', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('difficulty', sa.String(length=16), nullable=True),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
            sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
            sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        )
        op.create_index('ix_matches_phase', 'matches', ['phase'])
        op.create_index('ix_matches_party_a', 'matches', ['party_a'])
        op.create_index('ix_matches_party_b', 'matches', ['party_b'])
        op.create_index('ix_matches_created_at', 'matches', ['created_at'])

    if 'payouts' not in existing_tables:
        op.create_table(
            'payouts',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('match_id', sa.String(length=36), sa.ForeignKey('matches.id'), nullable=False),
            sa.Column('kind', sa.String(length=16), nullable=False),
            sa.Column('recipient', sa.String(length=64), nullable=True),
            sa.Column('amount', sa.BigInteger(), nullable=False),
            sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
            sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        )
        op.create_index('ix_payouts_match_id', 'payouts', ['match_id'])


def downgrade():
    op.drop_index('ix_payouts_match_id', table_name='payouts')
    op.drop_table('payouts')
    op.drop_index('ix_matches_created_at', table_name='matches')
    op.drop_index('ix_matches_party_b', table_name='matches')
    op.drop_index('ix_matches_party_a', table_name='matches')
    op.drop_index('ix_matches_phase', table_name='matches')
    op.drop_table('matches')
