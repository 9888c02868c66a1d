"""Account service - customer companies that numbered documents belong to."""

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from fieldcrm.core.exceptions import NotFoundError, RecordInUseError
from fieldcrm.core.structured_logging import build_log_context
from fieldcrm.db.models import Account, Contract, Installation, Quote, SalesOrder, ServiceRequest
from fieldcrm.schemas.account import AccountCreate, AccountUpdate
from fieldcrm.schemas.auth import UserSession
from fieldcrm.services.document_service import apply_changes
from fieldcrm.utils.pagination import PaginationParams, paginate_query

logger = logging.getLogger(__name__)

# Numbered documents hold a required account reference
_DEPENDENT_MODELS = (ServiceRequest, Contract, Installation, Quote, SalesOrder)


def create_account(db: Session, session: UserSession, data: AccountCreate) -> Account:
    values = data.model_dump()
    account = Account(organization_id=session.org_id, created_by_user_id=session.user_id)
    apply_changes(account, values)
    db.add(account)
    db.commit()
    db.refresh(account)
    return account


def get_account(db: Session, org_id: UUID, account_id: UUID) -> Account:
    account = db.query(Account).filter(
        Account.id == account_id,
        Account.organization_id == org_id,
    ).first()
    if account is None:
        raise NotFoundError(resource="Account", resource_id=account_id)
    return account


def list_accounts(
    db: Session,
    org_id: UUID,
    pagination: PaginationParams,
    q: str | None = None,
    account_type: str | None = None,
) -> tuple[list[Account], int]:
    query = db.query(Account).filter(Account.organization_id == org_id)
    if q:
        query = query.filter(Account.name.ilike(f"%{q.strip()}%"))
    if account_type:
        query = query.filter(Account.account_type == account_type)
    query = query.order_by(Account.created_at.desc(), Account.name)
    return paginate_query(query, pagination)


def update_account(db: Session, session: UserSession, account_id: UUID, data: AccountUpdate) -> Account:
    account = get_account(db, session.org_id, account_id)
    values = data.model_dump(exclude_unset=True)
    apply_changes(account, values)
    db.commit()
    db.refresh(account)
    return account


def delete_account(db: Session, session: UserSession, account_id: UUID) -> None:
    """Delete an account; refused while any numbered document references it."""
    account = get_account(db, session.org_id, account_id)
    for model in _DEPENDENT_MODELS:
        in_use = db.query(model.id).filter(
            model.organization_id == session.org_id,
            model.account_id == account.id,
        ).first()
        if in_use is not None:
            raise RecordInUseError(resource="Account", resource_id=account_id)
    db.delete(account)
    db.commit()
    logger.info(
        "Deleted account",
        extra=build_log_context(
            user_id=str(session.user_id), org_id=str(session.org_id), entity_id=str(account_id)
        ),
    )
