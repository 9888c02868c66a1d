"""Status workflow declarations per record type.

The suggested path is a UI hint (the order of "next step" buttons);
the data layer accepts any member of the enum unless strict mode is on.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from fieldcrm.db.enums import (
    ContractStatus,
    DealStage,
    InstallationStatus,
    LeadStatus,
    QuoteStatus,
    SalesOrderStatus,
    ServiceRequestStatus,
)


@dataclass(frozen=True)
class DocumentWorkflow:
    status_enum: type[Enum]
    initial: Enum
    suggested_path: tuple[Enum, ...]
    terminal: frozenset[Enum]
    field: str = "status"

    @property
    def values(self) -> list[str]:
        return [member.value for member in self.status_enum]

    def is_terminal(self, value: str) -> bool:
        return any(member.value == value for member in self.terminal)

    def next_suggested(self, value: str) -> str | None:
        """Next status on the suggested path, or None at the end / off-path."""
        path = [member.value for member in self.suggested_path]
        if value not in path:
            return None
        index = path.index(value)
        return path[index + 1] if index + 1 < len(path) else None


SERVICE_REQUEST_WORKFLOW = DocumentWorkflow(
    status_enum=ServiceRequestStatus,
    initial=ServiceRequestStatus.OPEN,
    suggested_path=(
        ServiceRequestStatus.OPEN,
        ServiceRequestStatus.IN_PROGRESS,
        ServiceRequestStatus.RESOLVED,
        ServiceRequestStatus.CLOSED,
    ),
    terminal=frozenset({ServiceRequestStatus.CLOSED}),
)

CONTRACT_WORKFLOW = DocumentWorkflow(
    status_enum=ContractStatus,
    initial=ContractStatus.DRAFT,
    suggested_path=(
        ContractStatus.DRAFT,
        ContractStatus.PENDING_APPROVAL,
        ContractStatus.ACTIVE,
        ContractStatus.EXPIRED,
    ),
    terminal=frozenset({ContractStatus.EXPIRED, ContractStatus.TERMINATED}),
)

INSTALLATION_WORKFLOW = DocumentWorkflow(
    status_enum=InstallationStatus,
    initial=InstallationStatus.PLANNING,
    suggested_path=(
        InstallationStatus.PLANNING,
        InstallationStatus.SCHEDULED,
        InstallationStatus.IN_PROGRESS,
        InstallationStatus.COMPLETED,
    ),
    terminal=frozenset({InstallationStatus.COMPLETED, InstallationStatus.CANCELLED}),
)

QUOTE_WORKFLOW = DocumentWorkflow(
    status_enum=QuoteStatus,
    initial=QuoteStatus.DRAFT,
    suggested_path=(QuoteStatus.DRAFT, QuoteStatus.SENT, QuoteStatus.ACCEPTED),
    terminal=frozenset({QuoteStatus.ACCEPTED, QuoteStatus.REJECTED, QuoteStatus.EXPIRED}),
)

SALES_ORDER_WORKFLOW = DocumentWorkflow(
    status_enum=SalesOrderStatus,
    initial=SalesOrderStatus.DRAFT,
    suggested_path=(
        SalesOrderStatus.DRAFT,
        SalesOrderStatus.PENDING,
        SalesOrderStatus.CONFIRMED,
        SalesOrderStatus.IN_PRODUCTION,
        SalesOrderStatus.READY_TO_SHIP,
        SalesOrderStatus.SHIPPED,
        SalesOrderStatus.DELIVERED,
    ),
    terminal=frozenset({SalesOrderStatus.DELIVERED, SalesOrderStatus.CANCELLED}),
)

LEAD_WORKFLOW = DocumentWorkflow(
    status_enum=LeadStatus,
    initial=LeadStatus.NEW,
    suggested_path=(
        LeadStatus.NEW,
        LeadStatus.CONTACTED,
        LeadStatus.QUALIFIED,
        LeadStatus.CONVERTED,
    ),
    terminal=frozenset({LeadStatus.CONVERTED, LeadStatus.LOST}),
)

DEAL_WORKFLOW = DocumentWorkflow(
    status_enum=DealStage,
    initial=DealStage.PROSPECTING,
    suggested_path=(
        DealStage.PROSPECTING,
        DealStage.QUALIFICATION,
        DealStage.PROPOSAL,
        DealStage.NEGOTIATION,
        DealStage.CLOSED_WON,
    ),
    terminal=frozenset({DealStage.CLOSED_WON, DealStage.CLOSED_LOST}),
    field="stage",
)
