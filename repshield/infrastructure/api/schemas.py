"""Request bodies. JSON uses camelCase; Python attributes stay snake_case."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from repshield.domain.value_objects.enums import TicketStatus, TransactionKind


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ScanBody(CamelModel):
    brand_name: str = Field(min_length=1, max_length=200)
    user_email: EmailStr | None = None
    platforms: list[str] = Field(default_factory=lambda: ["reddit"])
    recaptcha_token: str | None = None

    @field_validator("brand_name")
    @classmethod
    def _strip_brand(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Brand name is required")
        return v

    @field_validator("user_email", mode="before")
    @classmethod
    def _blank_email(cls, v):
        return v or None


class BrandScanLeadBody(CamelModel):
    name: str = Field(min_length=1, max_length=200)
    email: EmailStr
    company: str = Field(min_length=1, max_length=200)
    brand_name: str = Field(min_length=1, max_length=200)
    lead_type: str = "standard"
    phone: str | None = None
    scan_results: dict | None = None
    recaptcha_token: str | None = None


class TicketFormBody(CamelModel):
    title: str | None = Field(default=None, max_length=500)
    description: str | None = None
    reddit_url: str | None = None
    email: EmailStr | None = None
    name: str | None = None

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email(cls, v):
        return v or None


class TicketUpdateBody(CamelModel):
    status: TicketStatus | None = None
    assigned_to: str | None = None
    notes: str | None = None
    progress: int | None = Field(default=None, ge=0, le=100)
    amount: str | None = None


class TransactionBody(CamelModel):
    amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    kind: TransactionKind = TransactionKind.PAYMENT
    note: str | None = None


class ChatbotBody(CamelModel):
    message: str = Field(min_length=1, max_length=2000)
    conversation_history: list[dict | str] = Field(default_factory=list)

    def history(self) -> list[dict]:
        turns = []
        for turn in self.conversation_history:
            if isinstance(turn, str):
                turns.append({"role": "user", "content": turn})
            else:
                turns.append(turn)
        return turns
