"""Built-in CLI sub-commands for ramlconsole.

* :mod:`~ramlconsole.commands.inspect` -- resources, methods, parameters,
  security schemes and API info of a parsed RAML document.
* :mod:`~ramlconsole.commands.tryit` -- send a real request (``try``).
* :mod:`~ramlconsole.commands.validate` -- check values against parameter
  definitions.
* :mod:`~ramlconsole.commands.config` -- view and modify settings.

Multi-command groups export a :class:`typer.Typer` sub-application; single
commands export a plain callback registered on the root app.
"""
