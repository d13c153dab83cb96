"""SQLAlchemy models for certificates of authenticity."""

from datetime import datetime

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from ophelia_market.common.models import Base, TimestampMixin, generate_uuid


class CertificateModel(Base, TimestampMixin):
    __tablename__ = "product_certificates"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    product_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("products.id"), nullable=False, index=True
    )
    certificate_hash: Mapped[str] = mapped_column(
        String(128), unique=True, nullable=False, index=True
    )
    issue_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    issuer_id: Mapped[str] = mapped_column(String(36), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    verification_criteria: Mapped[dict] = mapped_column(JSON, default=dict)
