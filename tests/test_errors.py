"""Tests for wren.errors and the server's error-to-response mapping."""

from pathlib import Path

from wren.errors import (
    ConfigurationError,
    DiscoveryError,
    HTTPError,
    InvalidPath,
    NotFound,
    RenderFailure,
    WrenError,
)
from wren.handlers.not_found import NotFoundResponder
from wren.http.request import Request
from wren.server.errors import handle_http_error, handle_internal_error


def _request(path: str = "/x") -> Request:
    return Request(method="GET", path=path, raw_path=path)


class TestHierarchy:
    def test_all_are_wren_errors(self) -> None:
        for exc in (
            ConfigurationError("bad"),
            DiscoveryError("bad"),
            NotFound(),
            InvalidPath(),
            RenderFailure("x.html"),
        ):
            assert isinstance(exc, WrenError)

    def test_http_statuses(self) -> None:
        assert NotFound().status == 404
        assert InvalidPath().status == 500
        assert RenderFailure("x.html").status == 500

    def test_http_error_str(self) -> None:
        assert str(HTTPError(status=418, detail="teapot")) == "418: teapot"
        assert str(HTTPError(status=418)) == "418"

    def test_render_failure_detail(self) -> None:
        exc = RenderFailure("page.html", "boom")
        assert exc.detail == "Failed to render template 'page.html': boom"

    def test_discovery_error_path(self) -> None:
        exc = DiscoveryError("Template directory not found", "/srv/templates")
        assert exc.path == Path("/srv/templates")
        assert exc.detail == "Template directory not found"
        assert str(exc) == "Template directory not found: /srv/templates"

    def test_discovery_error_without_path(self) -> None:
        exc = DiscoveryError("conflict")
        assert exc.path is None
        assert str(exc) == "conflict"


class TestHttpErrorMapping:
    def test_not_found_uses_responder(self) -> None:
        responder = NotFoundResponder(None, None)
        response = handle_http_error(NotFound(), _request(), responder, debug=False)
        assert response.status == 404
        assert response.text == "Not Found"

    def test_server_error_hides_detail(self) -> None:
        responder = NotFoundResponder(None, None)
        response = handle_http_error(
            InvalidPath("Segment '%ff' is not valid UTF-8"), _request(), responder, debug=False
        )
        assert response.status == 500
        assert response.text == "Internal Server Error"

    def test_server_error_detail_in_debug(self) -> None:
        responder = NotFoundResponder(None, None)
        response = handle_http_error(
            InvalidPath("Segment '%ff' is not valid UTF-8"), _request(), responder, debug=True
        )
        assert "not valid UTF-8" in response.text

    def test_client_error_shows_detail(self) -> None:
        responder = NotFoundResponder(None, None)
        exc = HTTPError(status=403, detail="Forbidden", headers=(("X-Reason", "policy"),))
        response = handle_http_error(exc, _request(), responder, debug=False)
        assert response.status == 403
        assert response.text == "Forbidden"
        assert response.header("X-Reason") == "policy"


class TestInternalErrorMapping:
    def test_generic_body(self) -> None:
        response = handle_internal_error(ValueError("secret"), _request(), debug=False)
        assert response.status == 500
        assert "secret" not in response.text

    def test_debug_traceback(self) -> None:
        try:
            raise ValueError("<secret>")
        except ValueError as exc:
            response = handle_internal_error(exc, _request(), debug=True)
        assert response.status == 500
        assert "ValueError" in response.text
        assert "&lt;secret&gt;" in response.text
