"""Compose a resource's URI templates into a single path renderer."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ramlconsole.client.uri_template import URITemplate


class PathBuilder:
    """Renders an ordered chain of :class:`URITemplate` segments.

    Contexts are positional: the n-th context renders the n-th segment, and
    a missing context counts as empty (which still fails for a segment with
    required parameters).

    The builder also carries the user's input between edits:
    ``base_uri_context`` for the API base URI and ``segment_contexts`` with
    one dict per segment.
    """

    def __init__(self, path_segments: Sequence[URITemplate]) -> None:
        self.path_segments = list(path_segments)
        self.base_uri_context: dict[str, Any] = {}
        self.segment_contexts: list[dict[str, Any]] = [{} for _ in self.path_segments]

    def __call__(self, contexts: Optional[Sequence[Optional[Mapping[str, Any]]]] = None) -> str:
        contexts = contexts or []
        rendered = []
        for index, segment in enumerate(self.path_segments):
            context = contexts[index] if index < len(contexts) else None
            rendered.append(segment.render(context))
        return "".join(rendered)

    def set_parameter(self, name: str, value: Any) -> bool:
        """Store *value* in every segment context that declares *name*.

        Returns:
            ``True`` if at least one segment has a ``{name}`` placeholder.
        """
        found = False
        for index, segment in enumerate(self.path_segments):
            if name in segment.placeholders:
                self.segment_contexts[index][name] = value
                found = True
        return found

    def render(self) -> str:
        """Render with the stored ``segment_contexts``."""
        return self(self.segment_contexts)


def create(path_segments: Sequence[URITemplate]) -> PathBuilder:
    """Return a :class:`PathBuilder` over *path_segments*."""
    return PathBuilder(path_segments)
