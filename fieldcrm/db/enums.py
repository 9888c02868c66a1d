"""Enum definitions for application constants.

Status enums use the uppercase values stored in the database and shown in
activity titles (``DRAFT → ACTIVE``). Each one lists its suggested forward
path in the docstring; the persistence layer accepts any member.
"""

from enum import Enum


# =============================================================================
# Auth
# =============================================================================

class Role(str, Enum):
    """Organization member role."""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    SALES = "sales"
    SERVICE_ENGINEER = "service_engineer"

    @classmethod
    def has_value(cls, value: str) -> bool:
        return value in cls._value2member_map_


# =============================================================================
# Accounts / Leads / Deals
# =============================================================================

class AccountType(str, Enum):
    PROSPECT = "PROSPECT"
    CUSTOMER = "CUSTOMER"
    PARTNER = "PARTNER"
    VENDOR = "VENDOR"
    OTHER = "OTHER"


class LeadStatus(str, Enum):
    """NEW → CONTACTED → QUALIFIED → CONVERTED | LOST"""

    NEW = "NEW"
    CONTACTED = "CONTACTED"
    QUALIFIED = "QUALIFIED"
    CONVERTED = "CONVERTED"
    LOST = "LOST"


class DealStage(str, Enum):
    """
    Sales pipeline stage.

    PROSPECTING → QUALIFICATION → PROPOSAL → NEGOTIATION → CLOSED_WON | CLOSED_LOST
    """

    PROSPECTING = "PROSPECTING"
    QUALIFICATION = "QUALIFICATION"
    PROPOSAL = "PROPOSAL"
    NEGOTIATION = "NEGOTIATION"
    CLOSED_WON = "CLOSED_WON"
    CLOSED_LOST = "CLOSED_LOST"


# =============================================================================
# Inventory
# =============================================================================

class SerialNumberStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    RESERVED = "RESERVED"
    SOLD = "SOLD"
    INSTALLED = "INSTALLED"
    DEFECTIVE = "DEFECTIVE"


class StockStatus(str, Enum):
    IN_STOCK = "IN_STOCK"
    LOW_STOCK = "LOW_STOCK"
    OUT_OF_STOCK = "OUT_OF_STOCK"


# =============================================================================
# Numbered documents
# =============================================================================

class ServiceRequestStatus(str, Enum):
    """OPEN → IN_PROGRESS → ON_HOLD → RESOLVED → CLOSED"""

    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    RESOLVED = "RESOLVED"
    CLOSED = "CLOSED"


class ServiceRequestPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class ContractStatus(str, Enum):
    """DRAFT → PENDING_APPROVAL → ACTIVE → (EXPIRED | TERMINATED)"""

    DRAFT = "DRAFT"
    PENDING_APPROVAL = "PENDING_APPROVAL"
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"
    TERMINATED = "TERMINATED"


class InstallationStatus(str, Enum):
    """PLANNING → SCHEDULED → IN_PROGRESS → ON_HOLD → COMPLETED, CANCELLED from any."""

    PLANNING = "PLANNING"
    SCHEDULED = "SCHEDULED"
    IN_PROGRESS = "IN_PROGRESS"
    ON_HOLD = "ON_HOLD"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class QuoteStatus(str, Enum):
    """DRAFT → SENT → ACCEPTED | REJECTED | EXPIRED"""

    DRAFT = "DRAFT"
    SENT = "SENT"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"


class SalesOrderStatus(str, Enum):
    """
    DRAFT → PENDING → CONFIRMED → IN_PRODUCTION → READY_TO_SHIP → SHIPPED → DELIVERED

    CANCELLED is reachable from any state before DELIVERED.
    """

    DRAFT = "DRAFT"
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    IN_PRODUCTION = "IN_PRODUCTION"
    READY_TO_SHIP = "READY_TO_SHIP"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


# =============================================================================
# Activity log
# =============================================================================

class ActivityType(str, Enum):
    """Activity log entry category."""

    RECORD_CREATED = "record_created"
    STATUS_CHANGED = "status_changed"
    COMMENT = "comment"
    NOTIFICATION_SENT = "notification_sent"


class SubjectKind(str, Enum):
    """Record kinds an activity entry can describe."""

    ACCOUNT = "account"
    CONTACT = "contact"
    LEAD = "lead"
    DEAL = "deal"
    SERVICE_REQUEST = "service_request"
    CONTRACT = "contract"
    INSTALLATION = "installation"
    QUOTE = "quote"
    SALES_ORDER = "sales_order"
