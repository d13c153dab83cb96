"""Service wiring for Ophelia Market.

Everything with a lifecycle (database engine, outbound HTTP client) and
every strategy is built once by ``build_services`` and handed to the
components that need it. The container lives on ``app.state.services``.
"""

from dataclasses import dataclass

from fastapi import Request

from ophelia_market.common.config import OpheliaSettings
from ophelia_market.common.database import DatabaseManager
from ophelia_market.catalog.service import CatalogService
from ophelia_market.certificates.service import CertificateService
from ophelia_market.certificates.workflow import CertificateIssuanceWorkflow
from ophelia_market.certify.hasher import HashIssuer, HmacHashIssuer
from ophelia_market.certify.similarity import SimilarityChecker, TrigramSimilarityChecker
from ophelia_market.content.generator import GenerativeClient
from ophelia_market.content.prompts import PromptConfig
from ophelia_market.content.service import ContentService
from ophelia_market.orders.service import OrderService
from ophelia_market.profiles.service import ProfileService


@dataclass
class ServiceContainer:
    settings: OpheliaSettings
    db: DatabaseManager
    catalog: CatalogService
    profiles: ProfileService
    certificates: CertificateService
    issuance: CertificateIssuanceWorkflow
    orders: OrderService
    content: ContentService

    async def startup(self) -> None:
        await self.db.init()
        await self.db.create_all()

    async def shutdown(self) -> None:
        await self.content.client.close()
        await self.db.close()


def build_services(
    settings: OpheliaSettings,
    similarity_checker: SimilarityChecker | None = None,
    hash_issuer: HashIssuer | None = None,
    generative_client: GenerativeClient | None = None,
    prompts: PromptConfig | None = None,
) -> ServiceContainer:
    """Construct every service once; strategies may be swapped in."""
    db = DatabaseManager(settings)
    signer = HmacHashIssuer(settings.hmac_keyring)

    catalog = CatalogService(settings)
    certificates = CertificateService(verifier=signer)
    issuance = CertificateIssuanceWorkflow(
        db,
        catalog,
        certificates,
        similarity_checker or TrigramSimilarityChecker(
            threshold=settings.similarity_threshold,
            scan_limit=settings.similarity_scan_limit,
        ),
        hash_issuer or signer,
    )
    content = ContentService(
        generative_client or GenerativeClient(
            api_key=settings.content_api_key,
            base_url=settings.content_api_base_url,
            model=settings.content_model,
            timeout=settings.content_timeout,
        ),
        prompts or PromptConfig(),
    )

    return ServiceContainer(
        settings=settings,
        db=db,
        catalog=catalog,
        profiles=ProfileService(catalog),
        certificates=certificates,
        issuance=issuance,
        orders=OrderService(catalog),
        content=content,
    )


def get_services(request: Request) -> ServiceContainer:
    """FastAPI dependency returning the app's service container."""
    return request.app.state.services
