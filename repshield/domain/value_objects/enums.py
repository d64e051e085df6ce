"""Domain enums: pure Python, no external dependencies."""

from enum import Enum


class TicketStatus(str, Enum):
    PENDING = "pending"
    QUOTED = "quoted"
    APPROVED = "approved"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class TicketType(str, Enum):
    BRAND_SCAN = "brand_scan"
    SCAN_LEAD = "scan_lead"
    REMOVAL = "removal"
    MONITORING = "monitoring"
    GENERAL = "general"


class TicketPriority(str, Enum):
    STANDARD = "standard"
    NORMAL = "normal"
    PREMIUM = "premium"
    URGENT = "urgent"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class ScanPriority(str, Enum):
    QUICK = "quick"
    COMPREHENSIVE = "comprehensive"


class MentionType(str, Enum):
    POST = "post"
    COMMENT = "comment"


class NotificationType(str, Enum):
    CHATBOT = "chatbot"
    LEAD = "lead"
    SCAN = "scan"


class ErrorCategory(str, Enum):
    AUTH_FAILURE = "auth_failure"
    RATE_LIMIT = "rate_limit"
    NETWORK = "network"
    SCRAPING_SERVICE = "scraping_service"
    UNKNOWN = "unknown"


class TransactionKind(str, Enum):
    PAYMENT = "payment"
    REFUND = "refund"


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class FunnelEvent(str, Enum):
    SCAN_STARTED = "scan_started"
    SCAN_COMPLETED = "scan_completed"
    LEAD_FORM_SUBMITTED = "lead_form_submitted"
    TICKET_CREATED = "ticket_created"
    QUOTE_SENT = "quote_sent"
    QUOTE_ACCEPTED = "quote_accepted"
    PAYMENT_COMPLETED = "payment_completed"
    REMOVAL_COMPLETED = "removal_completed"
