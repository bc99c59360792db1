"""ramlconsole -- an executable client-side model of a RAML-described HTTP API.

This package takes the output of a RAML parser and turns it into something
a console can drive: a flattened, ordered resource tree whose methods know
their security requirements, URI templates that render concrete paths,
authentication strategies (anonymous, HTTP Basic, OAuth2 authorization
code), a request builder that reconciles form, query, header and raw body
data, and a small field validator.

Typical workflow::

    from ramlconsole.inspector import create
    from ramlconsole.loader import load_document

    api = create(load_document("api.json"))
    for group in api.resource_groups:
        for resource in group:
            print(resource.path, [m.method for m in resource.methods])

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for the inspected API.
    inspector: Resource extraction, method ordering and grouping.
    client: URI templates, path builder, request builder, validator, transport.
    auth: Strategy interfaces, resolver, keychain and OAuth2 callbacks.
    console: The "try it" executor.
    config: Settings and credential-source resolution.
    output: stdout/stderr formatting with Rich support.
"""

__version__ = "0.3.0"
