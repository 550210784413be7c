"""create usage_stats table

Revision ID: 5c2e7a91d0b4
Revises:
Create Date: 2026-10-19 10:20:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c2e7a91d0b4'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)

    # Tables may already exist when CREATE_TABLES_ON_START ran first
    if 'usage_stats' in set(insp.get_table_names()):
        return

    op.create_table(
        'usage_stats',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('daily_date', sa.String(length=10), nullable=False),
        sa.Column('daily_created', sa.Integer(), nullable=False),
        sa.Column('daily_completed', sa.Integer(), nullable=False),
        sa.Column('weekly_start', sa.String(length=10), nullable=False),
        sa.Column('weekly_created', sa.Integer(), nullable=False),
        sa.Column('weekly_completed', sa.Integer(), nullable=False),
        sa.Column('monthly_month', sa.Integer(), nullable=False),
        sa.Column('monthly_year', sa.Integer(), nullable=False),
        sa.Column('monthly_created', sa.Integer(), nullable=False),
        sa.Column('monthly_completed', sa.Integer(), nullable=False),
        sa.Column('total_games', sa.Integer(), nullable=False),
        sa.Column('server_start_time', sa.String(length=40), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )


def downgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    if 'usage_stats' in set(insp.get_table_names()):
        op.drop_table('usage_stats')
