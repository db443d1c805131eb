"""Error taxonomy shared by the HTTP handlers, the store layer and the relay."""


class SyncVisionError(Exception):
    status_code = 500
    public_message = "Internal Server Error"

    def __init__(self, message=None):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class ValidationError(SyncVisionError):
    """Task input rejected at the boundary. The message is shown to the client."""

    status_code = 400
    public_message = "Invalid request"


class StoreError(SyncVisionError):
    """A database operation failed.

    ``message`` is the generic text returned to the client; the underlying
    driver exception is chained as ``__cause__`` and logged server-side.
    """

    status_code = 500
    public_message = "Store operation failed"


class StoreConnectError(SyncVisionError):
    """The initial store connection could not be established."""


class TransportError(SyncVisionError):
    """Delivery of a broadcast to a single connection failed."""
