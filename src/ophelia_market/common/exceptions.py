"""Ophelia Market exception hierarchy."""


class OpheliaError(Exception):
    """Base exception for all Ophelia errors."""

    def __init__(self, message: str = "", code: str = "OPHELIA_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class ValidationFailedError(OpheliaError):
    """Raised when submitted data is malformed or out of range."""

    def __init__(self, message: str = "Invalid submission"):
        super().__init__(message, code="VALIDATION_FAILED")


class ProfileNotFoundError(OpheliaError):
    def __init__(self, message: str = "Profile not found"):
        super().__init__(message, code="NOT_FOUND")


class ArtisanProfileNotFoundError(OpheliaError):
    def __init__(self, message: str = "Artisan profile not found"):
        super().__init__(message, code="ARTISAN_NOT_FOUND")


class ArtisanProfileExistsError(OpheliaError):
    """Raised on a second artisan setup for the same user."""

    def __init__(self, message: str = "Artisan profile already exists"):
        super().__init__(message, code="ARTISAN_EXISTS")


class ProductNotFoundError(OpheliaError):
    def __init__(self, message: str = "Product not found"):
        super().__init__(message, code="NOT_FOUND")


class NotProductOwnerError(OpheliaError):
    def __init__(self, message: str = "Product belongs to another artisan"):
        super().__init__(message, code="FORBIDDEN")


# ── Certificate issuance ──

class OriginalityCheckError(OpheliaError):
    """Raised by a similarity checker that could not reach a verdict."""

    def __init__(self, message: str = "Originality check unavailable"):
        super().__init__(message, code="ORIGINALITY_UNAVAILABLE")


class ProductPersistenceError(OpheliaError):
    """Raised when the product row could not be written. Fatal to issuance."""

    def __init__(self, message: str = "Failed to upload product"):
        super().__init__(message, code="PRODUCT_WRITE_FAILED")


class CertificateIssuanceError(OpheliaError):
    """Raised when hash generation or certificate persistence fails."""

    def __init__(self, message: str = "Certificate generation failed"):
        super().__init__(message, code="CERTIFICATE_FAILED")


class CertificateNotFoundError(OpheliaError):
    def __init__(self, message: str = "Certificate not found"):
        super().__init__(message, code="NOT_FOUND")


# ── Orders & reviews ──

class OrderError(OpheliaError):
    def __init__(self, message: str = "Order could not be placed", code: str = "ORDER_REJECTED"):
        super().__init__(message, code=code)


class OrderNotFoundError(OpheliaError):
    def __init__(self, message: str = "Order not found"):
        super().__init__(message, code="NOT_FOUND")


class ReviewError(OpheliaError):
    def __init__(self, message: str = "Review rejected"):
        super().__init__(message, code="REVIEW_REJECTED")


# ── Generative content upstream ──

class ContentServiceError(OpheliaError):
    """Base for failures talking to the generative content API."""

    status_code = 500

    def __init__(self, message: str = "AI service request failed", code: str = "UPSTREAM_ERROR"):
        super().__init__(message, code=code)


class ContentNotConfiguredError(ContentServiceError):
    def __init__(self, message: str = "AI service is not configured"):
        super().__init__(message, code="NOT_CONFIGURED")


class UpstreamRateLimitError(ContentServiceError):
    status_code = 429

    def __init__(self, message: str = "Rate limit exceeded. Please try again later."):
        super().__init__(message, code="RATE_LIMITED")


class UpstreamBillingError(ContentServiceError):
    status_code = 402

    def __init__(self, message: str = "Payment required. Please add credits to continue."):
        super().__init__(message, code="PAYMENT_REQUIRED")


class UpstreamServiceError(ContentServiceError):
    def __init__(self, message: str = "AI service request failed"):
        super().__init__(message, code="UPSTREAM_ERROR")
