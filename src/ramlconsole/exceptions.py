"""Exception hierarchy for ramlconsole.

All exceptions inherit from :class:`RamlConsoleError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`ramlconsole.exit_codes`.
The top-level error handler in :func:`ramlconsole.app.main` catches
``RamlConsoleError`` and exits with the appropriate code.

Validation failures are deliberately absent: the validator returns failed
rule names as data and never raises.

Subclass hierarchy::

    RamlConsoleError (exit 1)
    +-- InvalidUsageError              (exit 2)
    |   +-- MissingURIParameterError   (exit 2)
    +-- DefinitionError                (exit 2)
    +-- AuthError                      (exit 3)
    |   +-- UnknownAuthStrategyError   (exit 3)
    |   +-- AuthorizationTimeoutError  (exit 3)
    +-- ConnectionError_               (exit 6)
    +-- DocumentError                  (exit 7)
    +-- ConfigError                    (exit 1)
"""

from ramlconsole.exit_codes import (
    EXIT_AUTH_FAILURE,
    EXIT_CONNECTION_ERROR,
    EXIT_DOCUMENT_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
)


class RamlConsoleError(Exception):
    """Root of every error ramlconsole raises on purpose.

    *exit_code* replaces the class default for this one instance.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(RamlConsoleError):
    """Raised for invalid arguments or malformed request input."""

    exit_code = EXIT_INVALID_USAGE


class MissingURIParameterError(InvalidUsageError):
    """Raised when a URI template is rendered without a required parameter.

    The check happens for every required parameter before any substitution,
    so a render either fully succeeds or raises this error.

    Args:
        parameter: Name of the first missing required parameter.
    """

    def __init__(self, parameter: str):
        super().__init__(f"Missing required uri parameter: {parameter}")
        self.parameter = parameter


class DefinitionError(RamlConsoleError):
    """Raised when a validator is built without a parameter definition."""

    exit_code = EXIT_INVALID_USAGE


class AuthError(RamlConsoleError):
    """Raised when authentication fails (bad credentials, token exchange errors)."""

    exit_code = EXIT_AUTH_FAILURE


class UnknownAuthStrategyError(AuthError):
    """Raised when a security scheme declares a type with no strategy.

    Custom schemes are unsupported. The try-it executor catches exactly this
    error and falls back to an anonymous request.

    Args:
        scheme_type: The unsupported ``type`` string from the scheme.
    """

    def __init__(self, scheme_type: str | None):
        super().__init__(f"Unknown authentication strategy: {scheme_type}")
        self.scheme_type = scheme_type


class AuthorizationTimeoutError(AuthError):
    """Raised when an OAuth2 authorization code does not arrive in time."""


class ConnectionError_(RamlConsoleError):
    """Raised when a request never got an HTTP response.

    The trailing underscore keeps the builtin ``ConnectionError`` usable.
    """

    exit_code = EXIT_CONNECTION_ERROR


class DocumentError(RamlConsoleError):
    """Raised when the parsed API document cannot be loaded or inspected."""

    exit_code = EXIT_DOCUMENT_ERROR


class ConfigError(RamlConsoleError):
    """Raised for an unreadable settings file or credential source."""

    exit_code = EXIT_GENERIC_FAILURE
