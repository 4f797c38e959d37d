"""Create base tables (companies, users, customers, equipment, jobs, invoices, service_history)

Revision ID: 000_create_base_tables
Revises:
Create Date: 2025-01-06

Note: Every tenant-owned table carries company_id, directly or through customers.
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy import text

# revision identifiers, used by Alembic.
revision = '000_create_base_tables'
down_revision = None
branch_labels = None
depends_on = None


def _table_exists(conn, table: str) -> bool:
    result = conn.execute(text(
        "SELECT EXISTS (SELECT FROM information_schema.tables WHERE table_name = :name)"
    ), {"name": table})
    return bool(result.scalar())


def upgrade():
    """Create base tables."""
    conn = op.get_bind()

    if not _table_exists(conn, 'companies'):
        op.create_table(
            'companies',
            sa.Column('id', sa.String(64), primary_key=True, index=True),
            sa.Column('name', sa.String(255), nullable=False),
            sa.Column('is_solo', sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column('address', sa.Text()),
            sa.Column('phone', sa.String(30)),
            sa.Column('email', sa.String(255)),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        )

    if not _table_exists(conn, 'users'):
        op.create_table(
            'users',
            sa.Column('id', sa.String(36), primary_key=True, index=True),
            sa.Column('email', sa.String(255), unique=True, index=True),
            sa.Column('first_name', sa.String(100)),
            sa.Column('last_name', sa.String(100)),
            sa.Column('profile_image_url', sa.String(500)),
            sa.Column('role', sa.String(20), nullable=False, server_default='admin'),
            sa.Column('is_owner', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('company_id', sa.String(64), sa.ForeignKey('companies.id'), index=True),
            sa.Column('has_completed_onboarding', sa.Boolean(), nullable=False, server_default=sa.false()),
            sa.Column('current_location', sa.String(255)),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
            sa.Column('updated_at', sa.DateTime(timezone=True)),
        )

    if not _table_exists(conn, 'customers'):
        op.create_table(
            'customers',
            sa.Column('id', sa.Integer(), primary_key=True, index=True),
            sa.Column('company_id', sa.String(64), sa.ForeignKey('companies.id'), nullable=False, index=True),
            sa.Column('name', sa.String(255), nullable=False),
            sa.Column('email', sa.String(255), index=True),
            sa.Column('phone', sa.String(30)),
            sa.Column('address', sa.Text()),
            sa.Column('notes', sa.Text()),
            sa.Column('preferred_contact_method', sa.String(20)),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
            sa.Column('updated_at', sa.DateTime(timezone=True)),
        )

    if not _table_exists(conn, 'equipment'):
        op.create_table(
            'equipment',
            sa.Column('id', sa.Integer(), primary_key=True, index=True),
            sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customers.id', ondelete='CASCADE'), nullable=False, index=True),
            sa.Column('make', sa.String(100)),
            sa.Column('model', sa.String(100)),
            sa.Column('serial_number', sa.String(100)),
            sa.Column('type', sa.String(100), nullable=False),
            sa.Column('install_date', sa.Date()),
            sa.Column('warranty_expires', sa.Date()),
            sa.Column('notes', sa.Text()),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        )

    if not _table_exists(conn, 'jobs'):
        op.create_table(
            'jobs',
            sa.Column('id', sa.Integer(), primary_key=True, index=True),
            sa.Column('company_id', sa.String(64), sa.ForeignKey('companies.id'), nullable=False, index=True),
            sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customers.id', ondelete='CASCADE'), nullable=False, index=True),
            sa.Column('technician_id', sa.String(36), sa.ForeignKey('users.id'), index=True),
            sa.Column('title', sa.String(255), nullable=False),
            sa.Column('description', sa.Text()),
            sa.Column('type', sa.String(20), nullable=False),
            sa.Column('priority', sa.String(20), nullable=False, server_default='medium'),
            sa.Column('status', sa.String(20), nullable=False, server_default='scheduled', index=True),
            sa.Column('scheduled_date', sa.DateTime(), index=True),
            sa.Column('scheduled_time', sa.String(20)),
            sa.Column('estimated_duration', sa.Integer()),
            sa.Column('estimated_cost', sa.Numeric(10, 2)),
            sa.Column('actual_cost', sa.Numeric(10, 2)),
            sa.Column('labor_time', sa.Integer()),
            sa.Column('notes', sa.Text()),
            sa.Column('equipment_ids', sa.JSON()),
            sa.Column('parts_used', sa.JSON()),
            sa.Column('completed_at', sa.DateTime()),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
            sa.Column('updated_at', sa.DateTime(timezone=True)),
        )

    if not _table_exists(conn, 'invoices'):
        op.create_table(
            'invoices',
            sa.Column('id', sa.Integer(), primary_key=True, index=True),
            sa.Column('company_id', sa.String(64), sa.ForeignKey('companies.id'), nullable=False, index=True),
            sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customers.id', ondelete='CASCADE'), nullable=False, index=True),
            sa.Column('job_id', sa.Integer(), sa.ForeignKey('jobs.id', ondelete='SET NULL'), index=True),
            sa.Column('invoice_number', sa.String(50), nullable=False, unique=True, index=True),
            sa.Column('amount', sa.Numeric(10, 2), nullable=False),
            sa.Column('labor_cost', sa.Numeric(10, 2)),
            sa.Column('material_cost', sa.Numeric(10, 2)),
            sa.Column('tax_amount', sa.Numeric(10, 2)),
            sa.Column('status', sa.String(20), nullable=False, server_default='pending', index=True),
            sa.Column('due_date', sa.Date(), index=True),
            sa.Column('paid_date', sa.Date()),
            sa.Column('notes', sa.Text()),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
            sa.Column('updated_at', sa.DateTime(timezone=True)),
        )

    if not _table_exists(conn, 'service_history'):
        op.create_table(
            'service_history',
            sa.Column('id', sa.Integer(), primary_key=True, index=True),
            sa.Column('customer_id', sa.Integer(), sa.ForeignKey('customers.id', ondelete='CASCADE'), nullable=False, index=True),
            sa.Column('job_id', sa.Integer(), sa.ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False, index=True),
            sa.Column('equipment_id', sa.Integer(), sa.ForeignKey('equipment.id', ondelete='SET NULL')),
            sa.Column('service_date', sa.Date(), nullable=False),
            sa.Column('service_type', sa.String(50), nullable=False),
            sa.Column('description', sa.Text()),
            sa.Column('technician_id', sa.String(36), sa.ForeignKey('users.id')),
            sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        )


def downgrade():
    """Drop base tables."""
    conn = op.get_bind()
    tables = ['service_history', 'invoices', 'jobs', 'equipment', 'customers', 'users', 'companies']
    for table in tables:
        if _table_exists(conn, table):
            op.drop_table(table)
