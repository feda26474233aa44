"""Domain-level exceptions.

Services and adapters raise these errors; route handlers catch them and map
them onto the response envelope (400 for input errors, 404 for missing
entities, 500 for downstream failures).
"""


class DomainError(Exception):
    """Base class for all domain errors."""


class NotFoundError(DomainError):
    """Requested entity does not exist."""


class ValidationError(DomainError):
    """Input violates a validation rule. Raised before any network call."""


class DownstreamError(DomainError):
    """An external service answered with a non-success response.

    Carries the HTTP status code (None for transport failures or malformed
    payloads) and the raw response body.
    """

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class ContentStoreError(DownstreamError):
    """The content store rejected a query, mutation or upload."""


class CodeHostError(DownstreamError):
    """The source-hosting platform rejected a REST or GraphQL call."""
