class SocialError(Exception):
    """Base class for failures that end a request with a plain-text status."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SocialError):
    """Malformed payload or a request that can never succeed (self friend-add)."""

    status_code = 400


class AuthError(SocialError):
    status_code = 401


class NotFoundError(SocialError):
    status_code = 404


class ConflictError(SocialError):
    """Raised only from a store-level uniqueness violation."""

    status_code = 409


class StoreError(SocialError):
    """Connectivity or query failure in the durable store.

    The message carries the driver's text, which is fine for an internal
    service but leaks schema details if exposed publicly.
    """

    status_code = 500
