"""Pydantic schemas for certificate endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from ophelia_market.catalog.schemas import ProductResponse


class VerificationCriteria(BaseModel):
    originality_check: bool = False
    copyright_check: bool = False
    artisan_verified: bool = False


class CertificateResponse(BaseModel):
    id: str
    product_id: str
    certificate_hash: str
    issue_date: datetime
    issuer_id: str
    is_active: bool
    verification_criteria: VerificationCriteria

    model_config = {"from_attributes": True}


class CertificateDetails(CertificateResponse):
    product_title: str
    product_category: str
    artisan_name: str = ""


class CertificateVerification(BaseModel):
    valid: bool
    code: str
    message: str
    certificate: Optional[CertificateResponse] = None


class ProductSubmission(BaseModel):
    """Upload form body; field checks run in the issuance workflow."""

    title: str = ""
    description: str = ""
    price: float = 0
    stock_quantity: int = 0
    category: str = ""
    materials: list[str] | str = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    story: str = ""
    dimensions: str = ""
    weight: str = ""
    tags: list[str] = Field(default_factory=list)
    confirm_non_original: bool = False


class IssuanceResponse(BaseModel):
    state: str
    message: str
    originality_check: Optional[bool] = None
    product: Optional[ProductResponse] = None
    certificate: Optional[CertificateResponse] = None
