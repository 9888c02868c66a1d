"""Leads, inventory items and serial numbers

Revision ID: 0002_leads_inventory
Revises: 0001_baseline
Create Date: 2026-10-18

Item codes and serial numbers are unique per organization.
"""
from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = '0002_leads_inventory'
down_revision: Union[str, Sequence[str], None] = '0001_baseline'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create leads, items and serial_numbers."""

    op.execute('''
        CREATE TABLE leads (
            id UUID PRIMARY KEY,
            organization_id UUID NOT NULL REFERENCES organizations(id) ON DELETE CASCADE,
            name VARCHAR(255) NOT NULL,
            company VARCHAR(255),
            position VARCHAR(100),
            email VARCHAR(255),
            phone VARCHAR(50),
            source VARCHAR(50),
            status VARCHAR(20) NOT NULL DEFAULT 'NEW',
            value NUMERIC(12, 2),
            notes TEXT,
            assigned_to_user_id UUID REFERENCES users(id) ON DELETE SET NULL,
            created_by_user_id UUID REFERENCES users(id) ON DELETE SET NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    ''')
    op.execute('CREATE INDEX idx_leads_org_status ON leads(organization_id, status)')

    # ==========================================================================
    # Inventory
    # ==========================================================================
    op.execute('''
        CREATE TABLE items (
            id UUID PRIMARY KEY,
            organization_id UUID NOT NULL REFERENCES organizations(id) ON DELETE CASCADE,
            item_code VARCHAR(50) NOT NULL,
            name VARCHAR(255) NOT NULL,
            category VARCHAR(100),
            description TEXT,
            unit VARCHAR(20) NOT NULL DEFAULT 'Unit',
            selling_price NUMERIC(12, 2) NOT NULL,
            cost_price NUMERIC(12, 2),
            tax_rate NUMERIC(5, 2) NOT NULL DEFAULT 0,
            stock_on_hand INTEGER NOT NULL DEFAULT 0,
            reorder_level INTEGER,
            track_serial_number BOOLEAN NOT NULL DEFAULT false,
            is_active BOOLEAN NOT NULL DEFAULT true,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT uq_item_code UNIQUE (organization_id, item_code)
        )
    ''')
    op.execute('CREATE INDEX idx_items_org_category ON items(organization_id, category)')

    op.execute('''
        CREATE TABLE serial_numbers (
            id UUID PRIMARY KEY,
            organization_id UUID NOT NULL REFERENCES organizations(id) ON DELETE CASCADE,
            item_id UUID NOT NULL REFERENCES items(id) ON DELETE CASCADE,
            serial_number VARCHAR(100) NOT NULL,
            status VARCHAR(20) NOT NULL DEFAULT 'AVAILABLE',
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT uq_serial_number UNIQUE (organization_id, serial_number)
        )
    ''')
    op.execute('CREATE INDEX idx_serial_numbers_item ON serial_numbers(item_id)')


def downgrade() -> None:
    """Drop inventory and leads (dependents first)."""
    for table in ("serial_numbers", "items", "leads"):
        op.execute(f"DROP TABLE IF EXISTS {table}")
