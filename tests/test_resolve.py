"""Tests for wren.routing.resolve — request path to template."""

import logging

import pytest

from wren.errors import InvalidPath
from wren.routing.resolve import candidate_identifier, parse_segments, resolve
from wren.routing.router import RouterConfig
from wren.templating.registry import TemplateRegistry


class TestParseSegments:
    def test_simple(self) -> None:
        assert parse_segments("/blog/post") == ("blog", "post")

    def test_root(self) -> None:
        assert parse_segments("/") == ()

    def test_empty_segments_dropped(self) -> None:
        assert parse_segments("//blog///post/") == ("blog", "post")

    def test_dot_dropped(self) -> None:
        assert parse_segments("/./blog/./post") == ("blog", "post")

    def test_dotdot_pops(self) -> None:
        assert parse_segments("/blog/../about") == ("about",)

    def test_dotdot_never_climbs_above_root(self) -> None:
        assert parse_segments("/../../etc/passwd") == ("etc", "passwd")

    def test_percent_decoding(self) -> None:
        assert parse_segments("/caf%C3%A9/hello%20world") == ("café", "hello world")

    @pytest.mark.parametrize(
        "raw",
        [
            "/%ff",
            "/ok/%C3",
            "/a%2Fb",
            "/a%5Cb",
            "/a%00b",
            "/.hidden",
            "/%2Ehidden",
            "/*star",
            "/colon:",
            "/angle%3C",
            "/angle%3E",
        ],
    )
    def test_invalid(self, raw: str) -> None:
        with pytest.raises(InvalidPath):
            parse_segments(raw)

    def test_invalid_path_is_500(self) -> None:
        with pytest.raises(InvalidPath) as exc_info:
            parse_segments("/%ff")
        assert exc_info.value.status == 500


class TestCandidateIdentifier:
    def test_plain(self) -> None:
        assert candidate_identifier("/blog/post", RouterConfig()) == "blog/post"

    def test_root_without_index_files(self) -> None:
        assert candidate_identifier("/", RouterConfig()) is None

    def test_root_with_index_files(self) -> None:
        config = RouterConfig(use_index_files=True)
        assert candidate_identifier("/", config) == "index"

    def test_trailing_slash_ignored_with_index_files(self) -> None:
        config = RouterConfig(use_index_files=True)
        assert candidate_identifier("/blog/", config) == "blog"

    def test_trailing_slash_without_index_files(self) -> None:
        assert candidate_identifier("/blog/", RouterConfig()) == "blog"

    def test_custom_index_name(self) -> None:
        config = RouterConfig(use_index_files=True, index_name="home")
        assert candidate_identifier("/", config) == "home"

    def test_sub_root_prefix(self) -> None:
        config = RouterConfig(sub_root="pages")
        assert candidate_identifier("/about", config) == "pages/about"

    def test_sub_root_with_index(self) -> None:
        config = RouterConfig(sub_root="pages", use_index_files=True)
        assert candidate_identifier("/", config) == "pages/index"

    def test_sub_root_without_index_declines_root(self) -> None:
        assert candidate_identifier("/", RouterConfig(sub_root="pages")) is None


class TestResolve:
    def test_hit(self, registry: TemplateRegistry) -> None:
        handle = resolve("/blog/first-post", RouterConfig(), registry)
        assert handle is not None
        assert handle.template_name == "blog/first-post.html"

    def test_miss_returns_none(self, registry: TemplateRegistry) -> None:
        assert resolve("/nope", RouterConfig(), registry) is None

    def test_index_fallback_on(self, registry: TemplateRegistry) -> None:
        handle = resolve("/", RouterConfig(use_index_files=True), registry)
        assert handle is not None
        assert handle.identifier == "index"

    def test_index_fallback_off(self, registry: TemplateRegistry) -> None:
        assert resolve("/", RouterConfig(use_index_files=False), registry) is None

    def test_trailing_slash_hits_page(self, registry: TemplateRegistry) -> None:
        handle = resolve("/about/", RouterConfig(use_index_files=True), registry)
        assert handle is not None
        assert handle.identifier == "about"

    def test_trailing_slash_never_means_index(self, registry: TemplateRegistry) -> None:
        assert resolve("/blog/", RouterConfig(use_index_files=True), registry) is None

    def test_sub_root_remap(self, registry: TemplateRegistry) -> None:
        config = RouterConfig(sub_root="pages")
        hit = resolve("/about", config, registry)
        assert hit is not None
        assert hit.template_name == "pages/about.html"
        assert resolve("/pages/about", config, registry) is None

    def test_pure(self, registry: TemplateRegistry) -> None:
        config = RouterConfig(use_index_files=True)
        first = resolve("/", config, registry)
        second = resolve("/", config, registry)
        assert first is second

    def test_miss_logs_warning(
        self, registry: TemplateRegistry, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="wren.router"):
            resolve("/nope", RouterConfig(), registry)
        assert "Template not found: 'nope'" in caplog.text

    def test_invalid_logs_error(
        self, registry: TemplateRegistry, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.ERROR, logger="wren.router"), pytest.raises(InvalidPath):
            resolve("/%ff", RouterConfig(), registry)
        assert "Invalid path" in caplog.text
