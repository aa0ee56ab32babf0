"""
Custom exception hierarchy for Fitment Hub.

Exceptions are categorized as:
- RetryableError: Transient errors that should trigger Celery retry
- NonRetryableError: Permanent errors that should fail immediately

This categorization allows Celery tasks to use:
- autoretry_for=(RetryableError,)
- dont_autoretry_for=(NonRetryableError,)
"""


class FitmentHubException(Exception):
    """Base exception for Fitment Hub."""
    pass


# ============================================
# RETRYABLE ERRORS - Will trigger Celery retry
# ============================================
class RetryableError(FitmentHubException):
    """
    Base class for errors that should trigger retry.

    Use this for transient errors where retrying might succeed:
    - Network timeouts
    - Rate limits (with backoff)
    - Temporary service unavailability
    """
    pass


class ExternalAPIError(RetryableError):
    """Error from an external API (Shopify, Supabase)."""
    def __init__(self, service: str, message: str, status_code: int = None):
        self.service = service
        self.status_code = status_code
        super().__init__(f"{service} API error: {message}")


class RateLimitError(RetryableError):
    """
    Rate limit exceeded.

    Should retry after the specified delay.
    """
    def __init__(self, service: str, retry_after: int = 60):
        self.service = service
        self.retry_after = retry_after
        super().__init__(f"{service} rate limited. Retry after {retry_after}s")


class ConnectionTimeoutError(RetryableError):
    """Connection or timeout error - typically transient."""
    pass


# ============================================
# NON-RETRYABLE ERRORS - No automatic retry
# ============================================
class NonRetryableError(FitmentHubException):
    """
    Base class for errors that should NOT trigger retry.

    Use this for permanent errors where retrying won't help:
    - Validation failures
    - Missing data
    - Authentication errors (need config fix)
    """
    pass


class ValidationError(NonRetryableError):
    """Invalid input data - retrying won't help."""
    pass


class StoreNotFoundError(NonRetryableError):
    """No store row for the requesting shop domain."""
    pass


class FitmentSetNotFoundError(NonRetryableError):
    """Fitment set not found for this store."""
    pass


class PersistenceError(NonRetryableError):
    """
    The fitment bundle upsert was rejected by the database.

    The message is already phrased for the merchant.
    """
    pass


class AuthenticationError(NonRetryableError):
    """
    Session token or API credentials rejected.

    Needs configuration fix, not retry.
    """
    pass
