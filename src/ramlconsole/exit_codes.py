"""Numeric process exit codes following `clig.dev <https://clig.dev/>`_ conventions.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~ramlconsole.exceptions.RamlConsoleError` subclass.
Shell wrappers can inspect the exit code to tell a missing URI parameter
apart from a rejected credential without parsing stderr.

Example::

    $ ramlconsole try api.json GET /users/{id}
    $ echo $?
    2   # EXIT_INVALID_USAGE -- a required URI parameter was not supplied
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or missing required parameters."""

EXIT_AUTH_FAILURE = 3
"""Authentication failed or the security scheme is not supported."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_DOCUMENT_ERROR = 7
"""The parsed API document could not be loaded or has an invalid shape."""
