"""Baseline migration - tenants, CRM records, numbered documents, activity log

Revision ID: 0001_baseline
Revises:
Create Date: 2026-10-18

Every numbered document table carries UNIQUE(organization_id, <code>) so
concurrent creators cannot both keep the same generated code.
"""
from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = '0001_baseline'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create all tables."""

    # ==========================================================================
    # Tenants and users
    # ==========================================================================
    op.execute('''
        CREATE TABLE organizations (
            id UUID PRIMARY KEY,
            name VARCHAR(255) NOT NULL,
            code VARCHAR(50) UNIQUE NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    ''')

    op.execute('''
        CREATE TABLE users (
            id UUID PRIMARY KEY,
            email VARCHAR(255) UNIQUE NOT NULL,
            display_name VARCHAR(255) NOT NULL,
            phone VARCHAR(50),
            token_version INTEGER NOT NULL DEFAULT 1,
            is_active BOOLEAN NOT NULL DEFAULT true,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    ''')

    op.execute('''
        CREATE TABLE memberships (
            id UUID PRIMARY KEY,
            user_id UUID UNIQUE NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            organization_id UUID NOT NULL REFERENCES organizations(id) ON DELETE CASCADE,
            role VARCHAR(50) NOT NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    ''')
    op.execute('CREATE INDEX idx_memberships_org_id ON memberships(organization_id)')

    # ==========================================================================
    # Accounts, contacts, deals
    # ==========================================================================
    op.execute('''
        CREATE TABLE accounts (
            id UUID PRIMARY KEY,
            organization_id UUID NOT NULL REFERENCES organizations(id) ON DELETE CASCADE,
            name VARCHAR(255) NOT NULL,
            account_type VARCHAR(20) NOT NULL DEFAULT 'PROSPECT',
            industry VARCHAR(100),
            phone VARCHAR(50),
            email VARCHAR(255),
            city VARCHAR(100),
            created_by_user_id UUID REFERENCES users(id) ON DELETE SET NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    ''')
    op.execute('CREATE INDEX idx_accounts_org_created ON accounts(organization_id, created_at)')

    op.execute('''
        CREATE TABLE contacts (
            id UUID PRIMARY KEY,
            organization_id UUID NOT NULL REFERENCES organizations(id) ON DELETE CASCADE,
            account_id UUID REFERENCES accounts(id) ON DELETE SET NULL,
            first_name VARCHAR(100) NOT NULL,
            last_name VARCHAR(100) NOT NULL,
            email VARCHAR(255),
            phone VARCHAR(50),
            created_by_user_id UUID REFERENCES users(id) ON DELETE SET NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    ''')
    op.execute('CREATE INDEX idx_contacts_org_created ON contacts(organization_id, created_at)')

    op.execute('''
        CREATE TABLE deals (
            id UUID PRIMARY KEY,
            organization_id UUID NOT NULL REFERENCES organizations(id) ON DELETE CASCADE,
            name VARCHAR(255) NOT NULL,
            stage VARCHAR(30) NOT NULL DEFAULT 'PROSPECTING',
            amount NUMERIC(12, 2),
            expected_close_date DATE,
            account_id UUID REFERENCES accounts(id) ON DELETE SET NULL,
            contact_id UUID REFERENCES contacts(id) ON DELETE SET NULL,
            created_by_user_id UUID REFERENCES users(id) ON DELETE SET NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    ''')
    op.execute('CREATE INDEX idx_deals_org_stage ON deals(organization_id, stage)')

    # ==========================================================================
    # Numbered documents
    # ==========================================================================
    op.execute('''
        CREATE TABLE service_requests (
            id UUID PRIMARY KEY,
            organization_id UUID NOT NULL REFERENCES organizations(id) ON DELETE CASCADE,
            ticket_number VARCHAR(30) NOT NULL,
            title VARCHAR(255) NOT NULL,
            description TEXT,
            priority VARCHAR(20) NOT NULL DEFAULT 'MEDIUM',
            status VARCHAR(30) NOT NULL DEFAULT 'OPEN',
            account_id UUID NOT NULL REFERENCES accounts(id) ON DELETE RESTRICT,
            contact_id UUID REFERENCES contacts(id) ON DELETE SET NULL,
            assigned_to_user_id UUID REFERENCES users(id) ON DELETE SET NULL,
            created_by_user_id UUID REFERENCES users(id) ON DELETE SET NULL,
            resolved_at TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT uq_service_request_number UNIQUE (organization_id, ticket_number)
        )
    ''')
    op.execute('CREATE INDEX idx_service_requests_org_status ON service_requests(organization_id, status)')

    op.execute('''
        CREATE TABLE contracts (
            id UUID PRIMARY KEY,
            organization_id UUID NOT NULL REFERENCES organizations(id) ON DELETE CASCADE,
            contract_number VARCHAR(30) NOT NULL,
            name VARCHAR(255) NOT NULL,
            contract_type VARCHAR(50),
            status VARCHAR(30) NOT NULL DEFAULT 'DRAFT',
            account_id UUID NOT NULL REFERENCES accounts(id) ON DELETE RESTRICT,
            contact_id UUID REFERENCES contacts(id) ON DELETE SET NULL,
            deal_id UUID REFERENCES deals(id) ON DELETE SET NULL,
            effective_date DATE,
            end_date DATE,
            value NUMERIC(12, 2),
            terms TEXT,
            renewal_reminder_sent_at TIMESTAMPTZ,
            created_by_user_id UUID REFERENCES users(id) ON DELETE SET NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT uq_contract_number UNIQUE (organization_id, contract_number)
        )
    ''')
    op.execute('CREATE INDEX idx_contracts_org_status ON contracts(organization_id, status)')
    op.execute('CREATE INDEX idx_contracts_org_end_date ON contracts(organization_id, end_date)')

    op.execute('''
        CREATE TABLE quotes (
            id UUID PRIMARY KEY,
            organization_id UUID NOT NULL REFERENCES organizations(id) ON DELETE CASCADE,
            quote_number VARCHAR(30) NOT NULL,
            status VARCHAR(30) NOT NULL DEFAULT 'DRAFT',
            account_id UUID NOT NULL REFERENCES accounts(id) ON DELETE RESTRICT,
            contact_id UUID REFERENCES contacts(id) ON DELETE SET NULL,
            deal_id UUID REFERENCES deals(id) ON DELETE SET NULL,
            valid_until DATE,
            subtotal NUMERIC(12, 2) NOT NULL DEFAULT 0,
            discount NUMERIC(12, 2) NOT NULL DEFAULT 0,
            total NUMERIC(12, 2) NOT NULL DEFAULT 0,
            notes TEXT,
            created_by_user_id UUID REFERENCES users(id) ON DELETE SET NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT uq_quote_number UNIQUE (organization_id, quote_number)
        )
    ''')
    op.execute('CREATE INDEX idx_quotes_org_status ON quotes(organization_id, status)')

    op.execute('''
        CREATE TABLE quote_items (
            id UUID PRIMARY KEY,
            quote_id UUID NOT NULL REFERENCES quotes(id) ON DELETE CASCADE,
            position INTEGER NOT NULL,
            description VARCHAR(500) NOT NULL,
            quantity NUMERIC(12, 2) NOT NULL,
            unit_price NUMERIC(12, 2) NOT NULL,
            discount NUMERIC(12, 2) NOT NULL DEFAULT 0,
            total NUMERIC(12, 2) NOT NULL
        )
    ''')

    op.execute('''
        CREATE TABLE sales_orders (
            id UUID PRIMARY KEY,
            organization_id UUID NOT NULL REFERENCES organizations(id) ON DELETE CASCADE,
            sales_order_number VARCHAR(30) NOT NULL,
            status VARCHAR(30) NOT NULL DEFAULT 'DRAFT',
            account_id UUID NOT NULL REFERENCES accounts(id) ON DELETE RESTRICT,
            contact_id UUID REFERENCES contacts(id) ON DELETE SET NULL,
            quote_id UUID REFERENCES quotes(id) ON DELETE SET NULL,
            subtotal NUMERIC(12, 2) NOT NULL DEFAULT 0,
            discount NUMERIC(12, 2) NOT NULL DEFAULT 0,
            tax NUMERIC(12, 2) NOT NULL DEFAULT 0,
            total NUMERIC(12, 2) NOT NULL DEFAULT 0,
            notes TEXT,
            created_by_user_id UUID REFERENCES users(id) ON DELETE SET NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT uq_sales_order_number UNIQUE (organization_id, sales_order_number)
        )
    ''')
    op.execute('CREATE INDEX idx_sales_orders_org_status ON sales_orders(organization_id, status)')

    op.execute('''
        CREATE TABLE sales_order_items (
            id UUID PRIMARY KEY,
            sales_order_id UUID NOT NULL REFERENCES sales_orders(id) ON DELETE CASCADE,
            position INTEGER NOT NULL,
            description VARCHAR(500) NOT NULL,
            quantity NUMERIC(12, 2) NOT NULL,
            unit_price NUMERIC(12, 2) NOT NULL,
            discount NUMERIC(12, 2) NOT NULL DEFAULT 0,
            total NUMERIC(12, 2) NOT NULL
        )
    ''')

    op.execute('''
        CREATE TABLE installations (
            id UUID PRIMARY KEY,
            organization_id UUID NOT NULL REFERENCES organizations(id) ON DELETE CASCADE,
            work_order_number VARCHAR(30) NOT NULL,
            status VARCHAR(30) NOT NULL DEFAULT 'PLANNING',
            account_id UUID NOT NULL REFERENCES accounts(id) ON DELETE RESTRICT,
            contact_id UUID REFERENCES contacts(id) ON DELETE SET NULL,
            sales_order_id UUID REFERENCES sales_orders(id) ON DELETE SET NULL,
            dispatch_date DATE,
            engineer_team JSON NOT NULL DEFAULT '[]',
            notes TEXT,
            created_by_user_id UUID REFERENCES users(id) ON DELETE SET NULL,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            updated_at TIMESTAMPTZ NOT NULL DEFAULT now(),
            CONSTRAINT uq_installation_number UNIQUE (organization_id, work_order_number)
        )
    ''')
    op.execute('CREATE INDEX idx_installations_org_status ON installations(organization_id, status)')

    # ==========================================================================
    # Activity log (no FK to the subject; entries outlive their record)
    # ==========================================================================
    op.execute('''
        CREATE TABLE activity_log (
            id UUID PRIMARY KEY,
            organization_id UUID NOT NULL REFERENCES organizations(id) ON DELETE CASCADE,
            activity_type VARCHAR(50) NOT NULL,
            subject_kind VARCHAR(50) NOT NULL,
            subject_id UUID NOT NULL,
            title VARCHAR(500) NOT NULL,
            description TEXT,
            actor_user_id UUID REFERENCES users(id) ON DELETE SET NULL,
            details JSON,
            created_at TIMESTAMPTZ NOT NULL DEFAULT now()
        )
    ''')
    op.execute('''
        CREATE INDEX idx_activity_log_subject
        ON activity_log(organization_id, subject_kind, subject_id, created_at)
    ''')


def downgrade() -> None:
    """Drop all tables (dependents first)."""
    for table in (
        "activity_log",
        "installations",
        "sales_order_items",
        "sales_orders",
        "quote_items",
        "quotes",
        "contracts",
        "service_requests",
        "deals",
        "contacts",
        "accounts",
        "memberships",
        "users",
        "organizations",
    ):
        op.execute(f"DROP TABLE IF EXISTS {table}")
