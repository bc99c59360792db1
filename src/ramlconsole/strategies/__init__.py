"""Built-in authentication strategies.

Each strategy lives in its own sub-package (``anonymous``, ``basic``,
``oauth2``) and is registered by
:func:`~ramlconsole.auth.resolver.create_default_resolver` under the
:class:`~ramlconsole.models.SchemeKind` it handles.
"""
