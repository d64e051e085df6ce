"""Ticket request data: a tagged union keyed by ``kind``.

Stored as a JSON object on the ticket row. ``request_data_to_dict`` and
``request_data_from_dict`` are the only places that know the wire shape.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

logger = logging.getLogger(__name__)


@dataclass
class BrandScanRequestData:
    """Lead captured from the brand scanner form."""

    kind: ClassVar[str] = "brand_scan"

    name: str
    email: str
    company: str
    brand_name: str
    lead_type: str = "standard"
    phone: str | None = None
    scan_results: dict | None = None
    submission_time: str | None = None
    source: str = "brand_scanner"

    @property
    def contact_email(self) -> str | None:
        return self.email or None


@dataclass
class ScanLeadRequestData:
    """Context of a scan that spawned a specialist ticket."""

    kind: ClassVar[str] = "scan_lead"

    brand_name: str
    scan_id: str
    scan_priority: str
    risk_level: str
    risk_score: int
    total_mentions: int
    user_email: str | None = None
    scan_results: dict = field(default_factory=dict)

    @property
    def contact_email(self) -> str | None:
        return self.user_email or None


@dataclass
class RemovalRequestData:
    kind: ClassVar[str] = "removal"

    reddit_url: str
    email: str | None = None

    @property
    def contact_email(self) -> str | None:
        return self.email or None


@dataclass
class GeneralRequestData:
    kind: ClassVar[str] = "general"

    user_email: str | None = None
    user_name: str | None = None

    @property
    def contact_email(self) -> str | None:
        return self.user_email or None


RequestData = Union[
    BrandScanRequestData,
    ScanLeadRequestData,
    RemovalRequestData,
    GeneralRequestData,
]

# (attribute, JSON key) pairs per variant
_FIELDS: dict[str, list[tuple[str, str]]] = {
    BrandScanRequestData.kind: [
        ("name", "name"),
        ("email", "email"),
        ("company", "company"),
        ("brand_name", "brandName"),
        ("lead_type", "leadType"),
        ("phone", "phone"),
        ("scan_results", "scanResults"),
        ("submission_time", "submissionTime"),
        ("source", "source"),
    ],
    ScanLeadRequestData.kind: [
        ("brand_name", "brandName"),
        ("scan_id", "scanId"),
        ("scan_priority", "scanPriority"),
        ("risk_level", "riskLevel"),
        ("risk_score", "riskScore"),
        ("total_mentions", "totalMentions"),
        ("user_email", "userEmail"),
        ("scan_results", "scanResults"),
    ],
    RemovalRequestData.kind: [
        ("reddit_url", "redditUrl"),
        ("email", "email"),
    ],
    GeneralRequestData.kind: [
        ("user_email", "userEmail"),
        ("user_name", "userName"),
    ],
}

_TYPES: dict[str, type] = {
    BrandScanRequestData.kind: BrandScanRequestData,
    ScanLeadRequestData.kind: ScanLeadRequestData,
    RemovalRequestData.kind: RemovalRequestData,
    GeneralRequestData.kind: GeneralRequestData,
}


def request_data_to_dict(data: RequestData) -> dict[str, Any]:
    payload: dict[str, Any] = {"kind": data.kind}
    for attr, key in _FIELDS[data.kind]:
        payload[key] = getattr(data, attr)
    return payload


def request_data_from_dict(payload: dict[str, Any] | None) -> RequestData:
    """Decode a stored JSON bag.

    Rows written before the ``kind`` tag existed, and tagged rows missing a
    required key, decode as ``GeneralRequestData`` carrying whatever email
    they hold.
    """
    payload = payload or {}
    kind = payload.get("kind")
    if kind not in _TYPES:
        return _general_from(payload)

    kwargs = {attr: payload[key] for attr, key in _FIELDS[kind] if key in payload}
    try:
        return _TYPES[kind](**kwargs)
    except TypeError as e:
        logger.warning("Malformed %s request data, reading it as general: %s", kind, e)
        return _general_from(payload)


def _general_from(payload: dict[str, Any]) -> GeneralRequestData:
    return GeneralRequestData(
        user_email=payload.get("email") or payload.get("userEmail"),
        user_name=payload.get("name") or payload.get("userName"),
    )
