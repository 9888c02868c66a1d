"""
Internal endpoints for scheduled/cron operations.

Protected by X-Internal-Secret header.
Call from an external scheduler (cron, CI job, platform scheduler).
"""
from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session

from fieldcrm.core.config import settings
from fieldcrm.core.deps import get_db
from fieldcrm.schemas.contract import RenewalReminderResponse
from fieldcrm.services import contract_service


router = APIRouter(prefix="/internal", tags=["internal"])


def verify_internal_secret(x_internal_secret: str = Header(...)):
    """Verify the internal secret header."""
    expected = settings.INTERNAL_SECRET
    if not expected:
        raise HTTPException(status_code=501, detail="INTERNAL_SECRET not configured")
    if x_internal_secret != expected:
        raise HTTPException(status_code=403, detail="Invalid internal secret")


@router.post(
    "/contracts/renewal-reminders",
    response_model=RenewalReminderResponse,
    dependencies=[Depends(verify_internal_secret)],
)
def send_renewal_reminders(db: Session = Depends(get_db)):
    """
    Daily sweep for contracts nearing their end date.

    Sends one WhatsApp reminder per ACTIVE contract ending within
    CONTRACT_RENEWAL_REMINDER_DAYS; reminded contracts are skipped on
    later runs.
    """
    result = contract_service.send_contract_renewal_reminders(db)
    return RenewalReminderResponse(**result)
