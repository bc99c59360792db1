"""Client-side building blocks for calling a RAML-described API.

Contents:

- :mod:`~ramlconsole.client.uri_template` -- :class:`URITemplate`.
- :mod:`~ramlconsole.client.path_builder` -- :class:`PathBuilder`.
- :mod:`~ramlconsole.client.request` -- :class:`RequestBuilder` and
  :class:`RequestOptions`.
- :mod:`~ramlconsole.client.validator` -- per-field validation.
- :mod:`~ramlconsole.client.factory` -- base URI rendering.
- :mod:`~ramlconsole.client.transport` -- the async HTTP call.

Only the modules that do not depend on :mod:`ramlconsole.models` are
re-exported here; import the others by their module path.
"""

from ramlconsole.client.path_builder import PathBuilder
from ramlconsole.client.request import MultipartForm, RequestBuilder, RequestOptions
from ramlconsole.client.uri_template import URITemplate

__all__ = [
    "MultipartForm",
    "PathBuilder",
    "RequestBuilder",
    "RequestOptions",
    "URITemplate",
]
