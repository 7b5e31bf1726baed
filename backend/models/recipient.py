"""Pydantic models for notification recipients."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.types import RecipientID


class Recipient(BaseModel):
    """Person who can receive reminders and digests."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: RecipientID
    display_name: str = ""
    email: str | None = Field(None, pattern=r"^[^@]+@[^@]+\.[^@]+$")
    phone: str | None = None
    is_digest_recipient: bool = False

    @field_validator("email", "phone", mode="before")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        # Admin UI stores cleared fields as empty strings
        if isinstance(value, str):
            return value.strip() or None
        return value

    @property
    def name(self) -> str:
        return self.display_name or self.id
