"""Certificate service — persistence, display, deactivation, verification."""

from datetime import datetime
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ophelia_market.common.exceptions import (
    CertificateNotFoundError,
    NotProductOwnerError,
)
from ophelia_market.catalog.models import ProductModel
from ophelia_market.certificates.models import CertificateModel
from ophelia_market.certify.hasher import HmacHashIssuer
from ophelia_market.profiles.models import ArtisanProfileModel, ProfileModel


def certificate_to_dict(cert: CertificateModel) -> dict[str, Any]:
    return {
        "id": cert.id,
        "product_id": cert.product_id,
        "certificate_hash": cert.certificate_hash,
        "issue_date": cert.issue_date,
        "issuer_id": cert.issuer_id,
        "is_active": cert.is_active,
        "verification_criteria": cert.verification_criteria or {},
    }


class CertificateService:
    """Reads and writes of product certificates.

    A product is meant to have at most one active certificate. Nothing here
    locks; when several active rows exist the most recently issued wins.
    """

    def __init__(self, verifier: HmacHashIssuer | None = None):
        self.verifier = verifier

    # ── Write ──

    async def create_certificate(
        self,
        session: AsyncSession,
        product_id: str,
        certificate_hash: str,
        issuer_id: str,
        issue_date: datetime,
        verification_criteria: dict[str, bool],
    ) -> CertificateModel:
        cert = CertificateModel(
            product_id=product_id,
            certificate_hash=certificate_hash,
            issuer_id=issuer_id,
            issue_date=issue_date,
            verification_criteria=verification_criteria,
            is_active=True,
        )
        session.add(cert)
        await session.flush()
        return cert

    async def deactivate_certificate(
        self, session: AsyncSession, certificate_id: str, artisan_id: str,
    ) -> CertificateModel:
        cert = await session.get(CertificateModel, certificate_id)
        if cert is None:
            raise CertificateNotFoundError()
        product = await session.get(ProductModel, cert.product_id)
        if product is None or product.artisan_id != artisan_id:
            raise NotProductOwnerError("Certificate belongs to another artisan's product")
        cert.is_active = False
        await session.flush()
        return cert

    # ── Read ──

    async def get_active_certificate(
        self, session: AsyncSession, product_id: str,
    ) -> CertificateModel | None:
        result = await session.execute(
            select(CertificateModel)
            .where(
                CertificateModel.product_id == product_id,
                CertificateModel.is_active == True,  # noqa: E712
            )
            .order_by(CertificateModel.issue_date.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def list_certificates(
        self, session: AsyncSession, product_id: str,
    ) -> list[CertificateModel]:
        result = await session.execute(
            select(CertificateModel)
            .where(CertificateModel.product_id == product_id)
            .order_by(CertificateModel.issue_date.desc())
        )
        return list(result.scalars().all())

    async def get_certificate_details(
        self, session: AsyncSession, product_id: str,
    ) -> dict[str, Any]:
        """Active certificate joined with product title/category and artisan name."""
        cert = await self.get_active_certificate(session, product_id)
        if cert is None:
            raise CertificateNotFoundError("Could not load certificate details")

        row = (await session.execute(
            select(ProductModel.title, ProductModel.category, ProfileModel.full_name)
            .select_from(ProductModel)
            .outerjoin(ArtisanProfileModel, ArtisanProfileModel.id == ProductModel.artisan_id)
            .outerjoin(ProfileModel, ProfileModel.id == ArtisanProfileModel.user_id)
            .where(ProductModel.id == product_id)
        )).one_or_none()

        details = certificate_to_dict(cert)
        details["product_title"] = row.title if row else ""
        details["product_category"] = row.category if row else ""
        details["artisan_name"] = (row.full_name or "") if row else ""
        return details

    async def verify_certificate(
        self, session: AsyncSession, certificate_hash: str,
    ) -> dict[str, Any]:
        """Look a hash up and recompute it against the signing keyring."""
        result = await session.execute(
            select(CertificateModel).where(
                CertificateModel.certificate_hash == certificate_hash
            )
        )
        cert = result.scalar_one_or_none()
        if cert is None:
            return {
                "valid": False,
                "code": "NOT_FOUND",
                "message": "No certificate with this hash",
                "certificate": None,
            }

        if self.verifier is not None and not self.verifier.verify(
            cert.certificate_hash, cert.product_id, cert.issuer_id, cert.issue_date,
        ):
            return {
                "valid": False,
                "code": "INVALID_SIGNATURE",
                "message": "Certificate hash does not match its record; it may be tampered",
                "certificate": certificate_to_dict(cert),
            }

        if not cert.is_active:
            return {
                "valid": False,
                "code": "INACTIVE",
                "message": "Certificate has been deactivated",
                "certificate": certificate_to_dict(cert),
            }

        return {
            "valid": True,
            "code": "VALID",
            "message": "Certificate is authentic and active",
            "certificate": certificate_to_dict(cert),
        }
