"""Error taxonomy shared by the gateway, mode controller and mutation router."""


class KudosError(Exception):
    """Base class for every failure raised by the kudos core."""


class NetworkError(KudosError):
    """The transport layer could not complete the request."""


class ApiError(KudosError):
    """The Backend API answered with a non-2xx status."""

    def __init__(self, status, message=None):
        self.status = status
        self.message = message or f"HTTP error! status: {status}"
        super().__init__(self.message)


class MalformedPayloadError(KudosError):
    """A 2xx response whose body is not the expected JSON shape."""


class ValidationError(KudosError):
    """Required fields were missing before submission.

    :param errors: Plain-language messages, one per problem.
    :type errors: list[str]
    """

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class ActionRejected(KudosError):
    """The action is disabled for the targeted entity."""


class UnknownEntityError(KudosError, LookupError):
    """The action targets an id that is not part of the loaded scope."""


class MutationFailed(KudosError):
    """A live-mode mutation failed; the message is safe to show to users."""

    def __init__(self, message, cause=None):
        self.message = message
        self.cause = cause
        super().__init__(message)

    @property
    def retryable(self):
        """True when reloading may succeed: the network or the server failed."""
        if isinstance(self.cause, ApiError):
            return self.cause.status >= 500
        return isinstance(self.cause, NetworkError)
