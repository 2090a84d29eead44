from enum import Enum


class OidcInteractionError(Exception):
    pass


class ConfigurationError(OidcInteractionError):
    pass


class UnexpectedPrompt(OidcInteractionError):
    """Raised when a route is reached while the engine waits for another prompt."""

    def __init__(self, expected, actual):
        OidcInteractionError.__init__(
            self, "expected prompt '{}', got '{}'".format(expected, actual)
        )
        self.expected = expected
        self.actual = actual


class EngineErrorKind(Enum):
    SESSION_NOT_FOUND = "session_not_found"
    INTERACTION_NOT_FOUND = "interaction_not_found"
    INVALID_REQUEST = "invalid_request"
    SERVER_ERROR = "server_error"


# Kinds that are rendered as an error page instead of being propagated.
RENDERED_KINDS = frozenset(
    [EngineErrorKind.SESSION_NOT_FOUND, EngineErrorKind.INTERACTION_NOT_FOUND]
)


class EngineError(OidcInteractionError):
    """
    Error reported by the OIDC engine.

    :param kind: An EngineErrorKind
    :param message: The OAuth2 error code, e.g. 'invalid_request'
    :param description: Human readable description
    :param status: HTTP status the engine associates with the error
    """

    def __init__(self, kind, message="invalid_request", description="", status=400):
        OidcInteractionError.__init__(self, message)
        self.kind = kind
        self.message = message
        self.error_description = description
        self.status = status

    def to_dict(self):
        return {"error": self.message, "error_description": self.error_description}


class FederatedLoginError(OidcInteractionError):
    pass


class StateMismatch(FederatedLoginError):
    pass


class NonceMismatch(FederatedLoginError):
    pass


class MissingIdToken(FederatedLoginError):
    pass


class CallbackError(FederatedLoginError):
    """The federated provider answered with an error response."""

    def __init__(self, error, error_description=""):
        FederatedLoginError.__init__(self, error, error_description)
        self.error = error
        self.error_description = error_description
