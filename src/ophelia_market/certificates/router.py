"""Certificate API router — product upload with certification, display, verify."""

from fastapi import APIRouter, Depends, HTTPException

from ophelia_market.common.exceptions import (
    ArtisanProfileNotFoundError,
    CertificateNotFoundError,
    NotProductOwnerError,
    ProductPersistenceError,
    ValidationFailedError,
)
from ophelia_market.common.security import require_user
from ophelia_market.catalog.schemas import ProductResponse
from ophelia_market.certificates.schemas import (
    CertificateDetails,
    CertificateResponse,
    CertificateVerification,
    IssuanceResponse,
    ProductSubmission,
)
from ophelia_market.certificates.workflow import IssuanceState
from ophelia_market.deps import ServiceContainer, get_services

router = APIRouter()


@router.post("/products", response_model=IssuanceResponse, status_code=201)
async def upload_product(
    body: ProductSubmission,
    user_id: str = Depends(require_user),
    services: ServiceContainer = Depends(get_services),
):
    """Publish a product and try to certify it.

    A product that was stored but could not be certified still answers 201
    with state ``uncertified``.
    """
    try:
        async with services.db.get_session() as session:
            artisan = await services.profiles.get_artisan_by_user(session, user_id)
    except ArtisanProfileNotFoundError as e:
        raise HTTPException(status_code=403, detail=e.message)

    draft = body.model_dump(exclude={"confirm_non_original"})
    try:
        outcome = await services.issuance.issue(
            draft,
            artisan_id=artisan.id,
            issuer_id=user_id,
            confirm_non_original=body.confirm_non_original,
        )
    except ValidationFailedError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except ProductPersistenceError as e:
        raise HTTPException(status_code=500, detail=e.message)

    if outcome.state == IssuanceState.ABORTED:
        raise HTTPException(
            status_code=409,
            detail={"code": "ORIGINALITY_UNCONFIRMED", "message": outcome.message},
        )

    return IssuanceResponse(
        state=outcome.state.value,
        message=outcome.message,
        originality_check=outcome.originality,
        product=ProductResponse.model_validate(outcome.product),
        certificate=(
            CertificateResponse.model_validate(outcome.certificate)
            if outcome.certificate is not None else None
        ),
    )


@router.get("/products/{product_id}/certificate", response_model=CertificateResponse)
async def get_active_certificate(
    product_id: str, services: ServiceContainer = Depends(get_services),
):
    async with services.db.get_session() as session:
        cert = await services.certificates.get_active_certificate(session, product_id)
        if cert is None:
            raise HTTPException(status_code=404, detail="No active certificate")
        return CertificateResponse.model_validate(cert)


@router.get("/products/{product_id}/certificate/details", response_model=CertificateDetails)
async def get_certificate_details(
    product_id: str, services: ServiceContainer = Depends(get_services),
):
    try:
        async with services.db.get_session() as session:
            details = await services.certificates.get_certificate_details(session, product_id)
            return CertificateDetails(**details)
    except CertificateNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.get("/products/{product_id}/certificates", response_model=list[CertificateResponse])
async def list_certificates(
    product_id: str, services: ServiceContainer = Depends(get_services),
):
    async with services.db.get_session() as session:
        certs = await services.certificates.list_certificates(session, product_id)
        return [CertificateResponse.model_validate(c) for c in certs]


@router.post("/certificates/{certificate_id}/deactivate", response_model=CertificateResponse)
async def deactivate_certificate(
    certificate_id: str,
    user_id: str = Depends(require_user),
    services: ServiceContainer = Depends(get_services),
):
    try:
        async with services.db.get_session() as session:
            artisan = await services.profiles.get_artisan_by_user(session, user_id)
            cert = await services.certificates.deactivate_certificate(
                session, certificate_id, artisan.id,
            )
            return CertificateResponse.model_validate(cert)
    except ArtisanProfileNotFoundError as e:
        raise HTTPException(status_code=403, detail=e.message)
    except CertificateNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except NotProductOwnerError as e:
        raise HTTPException(status_code=403, detail=e.message)


@router.get("/certificates/verify/{certificate_hash}", response_model=CertificateVerification)
async def verify_certificate(
    certificate_hash: str, services: ServiceContainer = Depends(get_services),
):
    async with services.db.get_session() as session:
        result = await services.certificates.verify_certificate(session, certificate_hash)
        return CertificateVerification(**result)
