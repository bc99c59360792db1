"""Tests for URI templates and the path builder."""

from __future__ import annotations

import pytest

from ramlconsole.client.path_builder import PathBuilder
from ramlconsole.client.path_builder import create as create_path_builder
from ramlconsole.client.uri_template import URITemplate, tokenize
from ramlconsole.exceptions import MissingURIParameterError
from ramlconsole.models import NamedParameter


# ---------------------------------------------------------------------------
# Tokenizing
# ---------------------------------------------------------------------------


class TestTokenize:
    def test_literal_and_placeholders(self) -> None:
        assert tokenize("/users/{id}") == ["/users/", "id"]

    def test_adjacent_placeholders(self) -> None:
        assert tokenize("/{a}{b}") == ["/", "a", "b"]

    def test_plain_text(self) -> None:
        assert tokenize("/status") == ["/status"]

    def test_template_exposes_tokens(self) -> None:
        assert URITemplate("https://{host}/api").tokens == ["https://", "host", "/api"]


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


class TestRender:
    def test_substitutes_values(self) -> None:
        template = URITemplate("/users/{id}", {"id": {"required": True}})
        assert template.render({"id": 42}) == "/users/42"

    def test_optional_placeholder_renders_empty(self) -> None:
        assert URITemplate("/files/{name}").render({}) == "/files/"

    def test_missing_required_raises(self) -> None:
        template = URITemplate("/users/{id}", {"id": {"required": True}})
        with pytest.raises(MissingURIParameterError) as exc_info:
            template.render({})
        assert exc_info.value.parameter == "id"

    def test_empty_value_counts_as_missing(self) -> None:
        template = URITemplate("/users/{id}", {"id": {"required": True}})
        with pytest.raises(MissingURIParameterError):
            template.render({"id": ""})

    def test_all_required_checked_before_substitution(self) -> None:
        template = URITemplate(
            "/{a}/{b}", {"a": {"required": True}, "b": {"required": True}}
        )
        with pytest.raises(MissingURIParameterError) as exc_info:
            template.render({"a": "x"})
        assert exc_info.value.parameter == "b"

    def test_none_context(self) -> None:
        assert URITemplate("/status").render(None) == "/status"

    def test_named_parameter_definitions(self) -> None:
        template = URITemplate("/{id}", {"id": NamedParameter(required=True)})
        assert template.required_parameters == ["id"]

    def test_parameter_values_pre_resolve(self) -> None:
        template = URITemplate("https://api.example.com/{version}", parameter_values={"version": "v2"})
        assert str(template) == "https://api.example.com/v2"
        assert template.placeholders == []

    def test_falsy_parameter_value_keeps_placeholder(self) -> None:
        template = URITemplate("https://api.example.com/{version}", parameter_values={"version": None})
        assert template.placeholders == ["version"]

    def test_equality(self) -> None:
        assert URITemplate("/a/{b}") == URITemplate("/a/{b}")
        assert URITemplate("/a/{b}") != URITemplate("/a/{b}", {"b": {"required": True}})
        assert len({URITemplate("/a"), URITemplate("/a")}) == 1


# ---------------------------------------------------------------------------
# Path builder
# ---------------------------------------------------------------------------


def _segments() -> list[URITemplate]:
    return [
        URITemplate("/users"),
        URITemplate("/{userId}", {"userId": {"required": True}}),
        URITemplate("/posts/{postId}"),
    ]


class TestPathBuilder:
    def test_positional_contexts(self) -> None:
        builder = PathBuilder(_segments())
        assert builder([None, {"userId": 7}, {"postId": 3}]) == "/users/7/posts/3"

    def test_missing_contexts_count_as_empty(self) -> None:
        builder = PathBuilder(_segments()[:1])
        assert builder() == "/users"

    def test_required_parameter_missing(self) -> None:
        builder = create_path_builder(_segments())
        with pytest.raises(MissingURIParameterError):
            builder([{}, {}])

    def test_set_parameter_stores_per_segment(self) -> None:
        builder = PathBuilder(_segments())
        assert builder.set_parameter("userId", "7")
        assert builder.segment_contexts == [{}, {"userId": "7"}, {}]
        assert builder.render() == "/users/7/posts/"

    def test_set_unknown_parameter(self) -> None:
        builder = PathBuilder(_segments())
        assert not builder.set_parameter("nope", "1")
        assert builder.segment_contexts == [{}, {}, {}]
