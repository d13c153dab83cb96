"""
Certificate issuance workflow.

Publishing a product runs four sequential steps, each in its own unit of
work so that a later failure never rolls back an earlier write:

1. originality check (advisory; failures are logged, never fatal)
2. product insert (fatal on failure)
3. certificate hash issuance (failure leaves the product uncertified)
4. certificate insert (failure leaves the product uncertified)

State machine::

    DRAFT ──(declined non-original)──────────────────────▶ ABORTED
    DRAFT ──▶ PRODUCT_PERSISTED ──(hash + insert ok)──────▶ CERTIFIED
                               └─(hash or insert failed)─▶ UNCERTIFIED

The run is not idempotent: submitting the same draft twice creates two
products and two certificates.
"""

import inspect
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Awaitable, Callable, Union

from sqlalchemy.exc import SQLAlchemyError

from ophelia_market.common.database import DatabaseManager
from ophelia_market.common.exceptions import (
    CertificateIssuanceError,
    OriginalityCheckError,
    ProductPersistenceError,
)
from ophelia_market.catalog.models import ProductModel
from ophelia_market.catalog.schemas import ProductDraft, parse_draft
from ophelia_market.catalog.service import CatalogService
from ophelia_market.certificates.models import CertificateModel
from ophelia_market.certificates.service import CertificateService
from ophelia_market.certify.hasher import HashIssuer
from ophelia_market.certify.similarity import SimilarityChecker

logger = logging.getLogger(__name__)

ConfirmPolicy = Union[bool, Callable[[ProductDraft], Union[bool, Awaitable[bool]]]]


class IssuanceState(str, Enum):
    DRAFT = "draft"
    ABORTED = "aborted"
    PRODUCT_PERSISTED = "product_persisted"
    CERTIFIED = "certified"
    UNCERTIFIED = "uncertified"


_TRANSITIONS: dict[IssuanceState, frozenset[IssuanceState]] = {
    IssuanceState.DRAFT: frozenset({IssuanceState.ABORTED, IssuanceState.PRODUCT_PERSISTED}),
    IssuanceState.PRODUCT_PERSISTED: frozenset({IssuanceState.CERTIFIED, IssuanceState.UNCERTIFIED}),
    IssuanceState.ABORTED: frozenset(),
    IssuanceState.CERTIFIED: frozenset(),
    IssuanceState.UNCERTIFIED: frozenset(),
}

MSG_ABORTED = "Similar product detected. Upload cancelled."
MSG_CERTIFIED = "Product uploaded & certified"
MSG_HASH_FAILED = "Product uploaded successfully, but it could not be certified"
MSG_CERT_FAILED = "Product uploaded but certificate generation failed"


@dataclass
class IssuanceOutcome:
    """Terminal result of one workflow run."""

    state: IssuanceState = IssuanceState.DRAFT
    originality: bool | None = None
    product: ProductModel | None = None
    certificate: CertificateModel | None = None
    message: str = ""
    history: list[IssuanceState] = field(default_factory=lambda: [IssuanceState.DRAFT])

    def advance(self, new_state: IssuanceState, message: str = "") -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"Illegal issuance transition {self.state.value} -> {new_state.value}")
        self.state = new_state
        self.history.append(new_state)
        if message:
            self.message = message

    @property
    def is_certified(self) -> bool:
        return self.state is IssuanceState.CERTIFIED

    @property
    def product_created(self) -> bool:
        return self.product is not None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CertificateIssuanceWorkflow:
    """Publishes a product and, best-effort, mints its certificate."""

    def __init__(
        self,
        db: DatabaseManager,
        catalog: CatalogService,
        certificates: CertificateService,
        similarity_checker: SimilarityChecker,
        hash_issuer: HashIssuer,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.db = db
        self.catalog = catalog
        self.certificates = certificates
        self.similarity_checker = similarity_checker
        self.hash_issuer = hash_issuer
        self.clock = clock

    async def issue(
        self,
        draft: ProductDraft | dict[str, Any],
        artisan_id: str,
        issuer_id: str,
        confirm_non_original: ConfirmPolicy = False,
    ) -> IssuanceOutcome:
        """Run the workflow for one submission.

        Raises ValidationFailedError before touching the store when the
        draft is invalid, and ProductPersistenceError when the product
        insert fails. Every other failure ends in a terminal state.
        """
        if not isinstance(draft, ProductDraft):
            draft = parse_draft(draft)

        outcome = IssuanceOutcome()
        log_ctx = {"artisan_id": artisan_id, "issuer_id": issuer_id}

        # Step 1: originality (advisory)
        outcome.originality = await self._check_originality(draft, artisan_id, log_ctx)

        # Step 2: soft gate
        if outcome.originality is False and not await self._confirm(confirm_non_original, draft):
            logger.info("Non-original submission declined", extra={"context": log_ctx})
            outcome.advance(IssuanceState.ABORTED, MSG_ABORTED)
            return outcome

        # Step 3: product (fatal)
        try:
            async with self.db.get_session() as session:
                outcome.product = await self.catalog.create_product(session, artisan_id, draft)
        except SQLAlchemyError as exc:
            logger.error("Product insert failed", exc_info=True, extra={"context": log_ctx})
            raise ProductPersistenceError() from exc
        outcome.advance(IssuanceState.PRODUCT_PERSISTED)
        log_ctx["product_id"] = outcome.product.id

        # Step 4: certificate hash
        # Stored timestamps lose their offset on some backends; keep them UTC.
        issued_at = self.clock().astimezone(timezone.utc)
        try:
            certificate_hash = await self._issue_hash(outcome.product.id, issuer_id, issued_at)
        except CertificateIssuanceError as e:
            logger.error(e.message, exc_info=True, extra={"context": log_ctx})
            outcome.advance(IssuanceState.UNCERTIFIED, MSG_HASH_FAILED)
            return outcome

        # Step 5: certificate row
        criteria = {
            "originality_check": outcome.originality is True,
            # TODO: replace with real copyright and identity checks once their
            # requirements exist; both are asserted, not verified.
            "copyright_check": True,
            "artisan_verified": True,
        }
        try:
            outcome.certificate = await self._persist_certificate(
                outcome.product.id, certificate_hash, issuer_id, issued_at, criteria,
            )
        except CertificateIssuanceError as e:
            logger.warning(e.message, exc_info=True, extra={"context": log_ctx})
            outcome.advance(IssuanceState.UNCERTIFIED, MSG_CERT_FAILED)
            return outcome

        logger.info("Product certified", extra={"context": log_ctx})
        outcome.advance(IssuanceState.CERTIFIED, MSG_CERTIFIED)
        return outcome

    async def _issue_hash(self, product_id: str, issuer_id: str, issued_at: datetime) -> str:
        try:
            certificate_hash = await self.hash_issuer.issue(product_id, issuer_id, issued_at)
        except Exception as exc:
            raise CertificateIssuanceError("Certificate hash generation failed") from exc
        if not certificate_hash:
            raise CertificateIssuanceError("Hash issuer returned an empty token")
        return certificate_hash

    async def _persist_certificate(
        self,
        product_id: str,
        certificate_hash: str,
        issuer_id: str,
        issued_at: datetime,
        criteria: dict[str, bool],
    ) -> CertificateModel:
        try:
            async with self.db.get_session() as session:
                return await self.certificates.create_certificate(
                    session,
                    product_id=product_id,
                    certificate_hash=certificate_hash,
                    issuer_id=issuer_id,
                    issue_date=issued_at,
                    verification_criteria=criteria,
                )
        except Exception as exc:
            raise CertificateIssuanceError("Certificate insert failed") from exc

    async def _check_originality(
        self, draft: ProductDraft, artisan_id: str, log_ctx: dict[str, Any],
    ) -> bool | None:
        try:
            async with self.db.get_session() as session:
                verdict = await self.similarity_checker.check_originality(
                    session, artisan_id, draft.title, draft.description,
                )
        except OriginalityCheckError as e:
            logger.warning(e.message, extra={"context": {**log_ctx, "cause": repr(e.__cause__)}})
            return None
        except Exception:
            logger.warning("Originality check error", exc_info=True, extra={"context": log_ctx})
            return None
        return verdict if isinstance(verdict, bool) else None

    @staticmethod
    async def _confirm(policy: ConfirmPolicy, draft: ProductDraft) -> bool:
        if isinstance(policy, bool):
            return policy
        answer = policy(draft)
        if inspect.isawaitable(answer):
            answer = await answer
        return bool(answer)
