"""Create users, creators, sales, payments and monthly_financials

Revision ID: 001_reporting_tables
Revises: None
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision = '001_reporting_tables'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('email', sa.String(), nullable=False, unique=True, index=True),
        sa.Column('full_name', sa.String(), nullable=True),
        sa.Column('role', sa.String(), nullable=False, server_default='chatter'),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true()),
        sa.Column('commission_percent', sa.Numeric(5, 2), nullable=True),
        sa.Column('fixed_salary', sa.Numeric(10, 2), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        'creators',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true()),
        sa.Column('compensation_type', sa.String(), nullable=False, server_default='revenue_share'),
        sa.Column('revenue_share_percent', sa.Numeric(5, 2), nullable=True),
        sa.Column('fixed_salary_cost', sa.Numeric(10, 2), nullable=True),
        sa.Column('platform_commission_percent', sa.Integer(), nullable=False, server_default='20'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        'sales',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('agent_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('creator_id', sa.Integer(), sa.ForeignKey('creators.id'), nullable=False, index=True),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('base_amount', sa.Numeric(10, 2), nullable=False, server_default='0'),
        sa.Column('sale_type', sa.String(), nullable=False, server_default='tip'),
        sa.Column('status', sa.String(), nullable=False, server_default='online'),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('sale_date', sa.DateTime(timezone=True), server_default=sa.func.now(), index=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )

    op.create_table(
        'payments',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('agent_id', sa.Integer(), sa.ForeignKey('users.id'), nullable=False, index=True),
        sa.Column('amount', sa.Numeric(10, 2), nullable=False),
        sa.Column('payment_date', sa.DateTime(timezone=True), nullable=False, index=True),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        'monthly_financials',
        sa.Column('id', sa.Integer(), primary_key=True, index=True),
        sa.Column('creator_id', sa.Integer(), sa.ForeignKey('creators.id'), nullable=False, index=True),
        sa.Column('year', sa.Integer(), nullable=False, index=True),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('gross_revenue', sa.Numeric(12, 2), server_default='0'),
        sa.Column('marketing_costs', sa.Numeric(12, 2), server_default='0'),
        sa.Column('tool_costs', sa.Numeric(12, 2), server_default='0'),
        sa.Column('other_costs', sa.Numeric(12, 2), server_default='0'),
        sa.Column('custom_costs', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint('creator_id', 'year', 'month', name='uq_monthly_financial_period'),
    )


def downgrade():
    op.drop_table('monthly_financials')
    op.drop_table('payments')
    op.drop_table('sales')
    op.drop_table('creators')
    op.drop_table('users')
