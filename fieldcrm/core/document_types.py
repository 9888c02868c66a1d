"""Numbered document type registry: prefix, code column and workflow per type."""

from __future__ import annotations

from dataclasses import dataclass

from fieldcrm.core.workflows import (
    CONTRACT_WORKFLOW,
    INSTALLATION_WORKFLOW,
    QUOTE_WORKFLOW,
    SALES_ORDER_WORKFLOW,
    SERVICE_REQUEST_WORKFLOW,
    DocumentWorkflow,
)
from fieldcrm.db.enums import SubjectKind
from fieldcrm.db.models import Contract, Installation, Quote, SalesOrder, ServiceRequest


@dataclass(frozen=True)
class DocumentType:
    kind: SubjectKind
    label: str
    prefix: str
    model: type
    code_field: str
    constraint_name: str
    workflow: DocumentWorkflow
    search_fields: tuple[str, ...]

    @property
    def code_column(self):
        return getattr(self.model, self.code_field)


SERVICE_REQUEST = DocumentType(
    kind=SubjectKind.SERVICE_REQUEST,
    label="Service request",
    prefix="SR",
    model=ServiceRequest,
    code_field="ticket_number",
    constraint_name="uq_service_request_number",
    workflow=SERVICE_REQUEST_WORKFLOW,
    search_fields=("ticket_number", "title"),
)

CONTRACT = DocumentType(
    kind=SubjectKind.CONTRACT,
    label="Contract",
    prefix="CON",
    model=Contract,
    code_field="contract_number",
    constraint_name="uq_contract_number",
    workflow=CONTRACT_WORKFLOW,
    search_fields=("contract_number", "name"),
)

INSTALLATION = DocumentType(
    kind=SubjectKind.INSTALLATION,
    label="Installation",
    prefix="WO",
    model=Installation,
    code_field="work_order_number",
    constraint_name="uq_installation_number",
    workflow=INSTALLATION_WORKFLOW,
    search_fields=("work_order_number", "notes"),
)

QUOTE = DocumentType(
    kind=SubjectKind.QUOTE,
    label="Quote",
    prefix="QT",
    model=Quote,
    code_field="quote_number",
    constraint_name="uq_quote_number",
    workflow=QUOTE_WORKFLOW,
    search_fields=("quote_number", "notes"),
)

SALES_ORDER = DocumentType(
    kind=SubjectKind.SALES_ORDER,
    label="Sales order",
    prefix="SO",
    model=SalesOrder,
    code_field="sales_order_number",
    constraint_name="uq_sales_order_number",
    workflow=SALES_ORDER_WORKFLOW,
    search_fields=("sales_order_number", "notes"),
)
