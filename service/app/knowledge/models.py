"""Knowledge base records: FAQs and solar packages.

Both are owned by the admin side of the site; the chat pipeline only
reads them. Validation runs when the knowledge base loads, so a bad
record fails at startup rather than mid-conversation.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

PackageType = Literal["ongrid", "hybrid", "hybrid-small", "hybrid-large"]


class FAQ(BaseModel):
    """A question/answer pair with the keywords used for matching."""

    model_config = ConfigDict(frozen=True)

    id: str
    question: str
    answer: str  # markdown
    keywords: tuple[str, ...]

    @field_validator("id", "question")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("keywords")
    @classmethod
    def _at_least_one_keyword(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        keywords = tuple(k.strip() for k in value if k.strip())
        if not keywords:
            raise ValueError("at least one keyword is required")
        return keywords


class Package(BaseModel):
    """A priced solar package, e.g. ``ONG-2K-P1``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    code: str
    name: str
    description: str
    type: PackageType
    wattage: int
    suitable_for: str = Field(alias="suitableFor")
    financing_price: int = Field(alias="financingPrice")
    srp_price: int = Field(alias="srpPrice")
    cash_price: int = Field(alias="cashPrice")

    @field_validator("code")
    @classmethod
    def _strip_code(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value
