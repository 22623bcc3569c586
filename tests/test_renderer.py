from pathlib import Path

import httpx
import pytest

from rede.errors import CatalogMismatchError, RenderError
from rede.placeholders import (
    BodyFormLocation,
    BodyLocation,
    HeaderLocation,
    Placeholders,
    QueryParamLocation,
    Renderer,
    UrlLocation,
    render,
)
from rede.placeholders.renderer import _render_form_data, _render_form_urlencoded
from rede.request import BinaryBody, FormDataBody, FormFile, FormText, FormUrlEncodedBody, NoBody, RawBody, Request
from rede.schema import Schema

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture()
def placeholders() -> Placeholders:
    placeholders = Placeholders()
    placeholders.add_all(UrlLocation(), ["id", "name"])
    placeholders.add_all(HeaderLocation(name="Authorization"), ["token"])
    placeholders.add_all(QueryParamLocation(key="page"), ["page"])
    placeholders.add_all(QueryParamLocation(key="size"), ["size"])
    placeholders.add_all(BodyLocation(), ["id", "name"])
    return placeholders


@pytest.fixture()
def request_() -> Request:
    return Request(
        method="GET",
        url="https://example.com/{{id}}/{{name}}/{{id}}",
        http_version="HTTP/1.1",
        metadata={"name": "example"},
        headers=httpx.Headers({"Content-Type": "application/json", "Authorization": "Bearer {{token}}"}),
        query_params=[("page", "{{page}}"), ("size", "{{size}}")],
        variables={"id": 1},
        body=NoBody(),
    )


VALUES = [
    ("id", "1"),
    ("name", "test"),
    ("token", "abc"),
    ("page", "1"),
    ("size", "10"),
]


class TestRender:
    def test_render(self, placeholders, request_):
        rendered = Renderer(placeholders, VALUES).render(request_)

        assert rendered.url == "https://example.com/1/test/1"
        assert rendered.headers["Authorization"] == "Bearer abc"
        assert rendered.headers["Content-Type"] == "application/json"
        assert rendered.query_params == [("page", "1"), ("size", "10")]

    def test_untouched_fields_pass_through(self, placeholders, request_):
        rendered = Renderer(placeholders, VALUES).render(request_)

        assert rendered.method == "GET"
        assert rendered.http_version == "HTTP/1.1"
        assert rendered.metadata == {"name": "example"}
        assert rendered.variables == {"id": 1}
        assert rendered.body == NoBody()

    def test_empty_values_is_identity(self, placeholders, request_):
        assert Renderer(placeholders, []).render(request_) == request_

    def test_missing_value_leaves_placeholder(self, placeholders, request_):
        rendered = Renderer(placeholders, {"name": "test"}).render(request_)

        assert rendered.url == "https://example.com/{{id}}/test/{{id}}"
        assert rendered.headers["Authorization"] == "Bearer {{token}}"
        assert rendered.query_params == [("page", "{{page}}"), ("size", "{{size}}")]

    def test_input_is_not_modified(self, placeholders, request_):
        Renderer(placeholders, VALUES).render(request_)

        assert request_.url == "https://example.com/{{id}}/{{name}}/{{id}}"
        assert request_.headers["Authorization"] == "Bearer {{token}}"
        assert request_.query_params == [("page", "{{page}}"), ("size", "{{size}}")]

    def test_module_level_render(self, placeholders, request_):
        assert render(request_, placeholders, dict(VALUES)).url == "https://example.com/1/test/1"

    def test_duplicate_values_last_wins(self, request_):
        placeholders = Placeholders()
        placeholders.add(UrlLocation(), "id")
        rendered = Renderer(placeholders, [("id", "1"), ("id", "2")]).render(request_)
        assert rendered.url == "https://example.com/2/{{name}}/2"

    def test_empty_string_value(self, request_):
        placeholders = Placeholders()
        placeholders.add(UrlLocation(), "name")
        assert Renderer(placeholders, {"name": ""}).render(request_).url == "https://example.com/{{id}}//{{id}}"

    def test_chained_substitution_follows_catalog_order(self):
        request = Request(method="GET", url="https://example.com/{{a}}")

        forward = Placeholders()
        forward.add(UrlLocation(), "a")
        forward.add(UrlLocation(), "b")
        backward = Placeholders()
        backward.add(UrlLocation(), "b")
        backward.add(UrlLocation(), "a")

        values = {"a": "{{b}}", "b": "x"}
        assert Renderer(forward, values).render(request).url == "https://example.com/x"
        assert Renderer(backward, values).render(request).url == "https://example.com/{{b}}"


class TestRenderHeaders:
    def test_missing_header_is_noop(self, request_):
        placeholders = Placeholders()
        placeholders.add(HeaderLocation(name="X-Missing"), "token")
        rendered = Renderer(placeholders, {"token": "abc"}).render(request_)
        assert rendered.headers == request_.headers

    def test_lookup_is_case_insensitive(self, request_):
        placeholders = Placeholders()
        placeholders.add(HeaderLocation(name="authorization"), "token")
        rendered = Renderer(placeholders, {"token": "abc"}).render(request_)
        assert rendered.headers["Authorization"] == "Bearer abc"

    def test_only_first_header_is_rendered(self):
        request = Request(method="GET", url="u", headers=[("X-Id", "{{id}}"), ("Accept", "*/*"), ("X-Id", "{{id}}")])
        placeholders = Placeholders()
        placeholders.add(HeaderLocation(name="X-Id"), "id")
        rendered = Renderer(placeholders, {"id": "7"}).render(request)
        assert rendered.headers.raw == [(b"X-Id", b"7"), (b"Accept", b"*/*"), (b"X-Id", b"{{id}}")]

    def test_undecodable_header(self):
        request = Request(method="GET", url="u", headers=[(b"X-Bin", b"\xff{{token}}")])
        placeholders = Placeholders()
        placeholders.add(HeaderLocation(name="X-Bin"), "token")
        with pytest.raises(RenderError, match="failed to convert header to string: X-Bin") as exc_info:
            Renderer(placeholders, {"token": "abc"}).render(request)
        assert exc_info.value.header == "X-Bin"

    def test_invalid_rendered_value(self, request_):
        placeholders = Placeholders()
        placeholders.add(HeaderLocation(name="Authorization"), "token")
        with pytest.raises(RenderError, match="rendered header value is invalid: Authorization"):
            Renderer(placeholders, {"token": "abc\r\nX-Injected: 1"}).render(request_)

    def test_non_ascii_rendered_value(self, request_):
        placeholders = Placeholders()
        placeholders.add(HeaderLocation(name="Authorization"), "token")
        with pytest.raises(RenderError):
            Renderer(placeholders, {"token": "café"}).render(request_)


class TestRenderQueryParams:
    def test_first_matching_key_only(self):
        request = Request(method="GET", url="u", query_params=[("tag", "{{tag}}"), ("tag", "{{tag}}")])
        placeholders = Placeholders()
        placeholders.add(QueryParamLocation(key="tag"), "tag")
        rendered = Renderer(placeholders, {"tag": "a"}).render(request)
        assert rendered.query_params == [("tag", "a"), ("tag", "{{tag}}")]

    def test_missing_key_is_noop(self, request_):
        placeholders = Placeholders()
        placeholders.add(QueryParamLocation(key="offset"), "page")
        rendered = Renderer(placeholders, {"page": "1"}).render(request_)
        assert rendered.query_params == request_.query_params


class TestRenderBody:
    def test_form_data(self):
        request = Request(
            method="POST",
            url="u",
            body=FormDataBody(fields={"name": FormText(value="{{name}}"), "file": FormFile(path="{{path}}/file")}),
        )
        placeholders = Placeholders()
        placeholders.add(BodyFormLocation(key="name"), "name")
        placeholders.add(BodyFormLocation(key="file"), "path")

        rendered = Renderer(placeholders, {"name": "temp_file", "path": "/tmp"}).render(request)

        assert rendered.body.fields["name"] == FormText(value="temp_file")
        assert rendered.body.fields["file"] == FormFile(path="/tmp/file")
        assert request.body.fields["name"] == FormText(value="{{name}}")

    def test_form_urlencoded(self):
        request = Request(
            method="POST",
            url="u",
            body=FormUrlEncodedBody(fields={"page": "{{page}}", "order": "{{field}}:asc"}),
        )
        placeholders = Placeholders()
        placeholders.add(BodyFormLocation(key="page"), "page")
        placeholders.add(BodyFormLocation(key="order"), "field")

        rendered = Renderer(placeholders, {"page": "10", "field": "id"}).render(request)

        assert rendered.body == FormUrlEncodedBody(fields={"page": "10", "order": "id:asc"})

    def test_whole_body_is_noop(self):
        request = Request(method="POST", url="u", body=RawBody(content="{{id}}"))
        placeholders = Placeholders()
        placeholders.add(BodyLocation(), "id")
        assert Renderer(placeholders, {"id": "1"}).render(request).body == RawBody(content="{{id}}")

    @pytest.mark.parametrize("body", [NoBody(), RawBody(content="x"), BinaryBody(path="p")])
    def test_form_location_on_other_body(self, body):
        request = Request(method="POST", url="u", body=body)
        placeholders = Placeholders()
        placeholders.add(BodyFormLocation(key="name"), "name")
        with pytest.raises(CatalogMismatchError):
            Renderer(placeholders, {"name": "x"}).render(request)


class TestFormHelpers:
    def test_render_form_data(self):
        fields = {"name": FormText(value="{{name}}"), "file": FormFile(path="{{path}}/file")}

        fields = _render_form_data(fields, "name", "{{name}}", "temp_file")
        fields = _render_form_data(fields, "file", "{{path}}", "/tmp")

        assert fields["name"] == FormText(value="temp_file")
        assert fields["file"] == FormFile(path="/tmp/file")

    def test_render_form_data_missing_key(self):
        fields = {"name": FormText(value="{{name}}")}
        assert _render_form_data(fields, "other", "{{name}}", "x") is fields

    def test_render_form_urlencoded(self):
        fields = {"page": "{{page}}", "order": "{{field}}:asc"}

        fields = _render_form_urlencoded(fields, "page", "{{page}}", "10")
        fields = _render_form_urlencoded(fields, "order", "{{field}}", "id")

        assert fields == {"page": "10", "order": "id:asc"}


class TestRenderFromFile:
    def test_get_users_fully_rendered(self):
        request = Schema.from_path(FIXTURES / "get_users.toml").to_request()
        placeholders = Placeholders.from_request(request)
        values = {"version": "v2", "token": "abc", "page": "3", "tag": "staff"}

        rendered = Renderer(placeholders, values).render(request)

        assert rendered.url == "https://example.org/api/v2/users"
        assert rendered.headers["Authorization"] == "Bearer abc"
        assert rendered.query_params == [
            ("page", "3"),
            ("size", "20"),
            ("active", "true"),
            ("ratio", "0.5"),
            ("tags", "admin,staff"),
        ]
        for name in values:
            assert "{{" + name + "}}" not in rendered.model_dump_json()

    def test_upload_fully_rendered(self):
        request = Schema.from_path(FIXTURES / "upload.toml").to_request()
        placeholders = Placeholders.from_request(request)

        rendered = Renderer(placeholders, {"id": "7", "name": "temp_file", "path": "/tmp"}).render(request)

        assert rendered.url == "https://example.org/upload/7"
        assert rendered.body == FormDataBody(
            fields={"name": FormText(value="temp_file"), "attachment": FormFile(path="/tmp/file")}
        )

    def test_result_does_not_share_mutable_fields(self, placeholders, request_):
        rendered = Renderer(placeholders, VALUES).render(request_)

        assert rendered.metadata == request_.metadata
        assert rendered.metadata is not request_.metadata
        assert rendered.variables is not request_.variables
        assert rendered.query_params is not request_.query_params
        assert rendered.headers is not request_.headers
