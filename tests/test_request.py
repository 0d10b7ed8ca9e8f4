"""Tests for jlroutes.request — URL decomposition."""

from __future__ import annotations

import pytest

from jlroutes.errors import InvalidURLError
from jlroutes.request import parse_query, parse_url


class TestParseURL:
    def test_basic(self) -> None:
        parsed = parse_url("http://host/open/42")
        assert parsed.scheme == "http"
        assert parsed.host == "host"
        assert parsed.path_segments == ("open", "42")
        assert parsed.query == {}
        assert parsed.url == "http://host/open/42"

    def test_scheme_lowercased(self) -> None:
        assert parse_url("MyApp://x/y").scheme == "myapp"

    def test_empty_segments_dropped(self) -> None:
        assert parse_url("http://host//a///b/").path_segments == ("a", "b")

    def test_root_path(self) -> None:
        assert parse_url("http://host").path_segments == ()
        assert parse_url("http://host/").path_segments == ()

    def test_segments_percent_decoded(self) -> None:
        assert parse_url("http://host/a%20b/c").path_segments == ("a b", "c")

    def test_encoded_slash_stays_in_segment(self) -> None:
        assert parse_url("http://host/a%2Fb/c").path_segments == ("a/b", "c")

    def test_query(self) -> None:
        parsed = parse_url("http://host/a?x=1&y=two&flag")
        assert parsed.query == {"x": "1", "y": "two", "flag": ""}

    def test_query_last_value_wins(self) -> None:
        assert parse_url("http://host/a?x=1&x=2").query == {"x": "2"}

    def test_plus_decoding(self) -> None:
        parsed = parse_url("http://host/a+b?q=hello+world")
        assert parsed.path_segments == ("a b",)
        assert parsed.query == {"q": "hello world"}

    def test_plus_decoding_disabled(self) -> None:
        parsed = parse_url("http://host/a+b?q=hello+world%21", decode_plus_symbols=False)
        assert parsed.path_segments == ("a+b",)
        assert parsed.query == {"q": "hello+world!"}

    def test_host_as_path_component(self) -> None:
        parsed = parse_url("myapp://user/view/42", treat_host_as_path_component=True)
        assert parsed.path_segments == ("user", "view", "42")

    def test_host_path_component_keeps_case(self) -> None:
        parsed = parse_url("myapp://User/42", treat_host_as_path_component=True)
        assert parsed.path_segments == ("User", "42")

    def test_host_path_component_decoded(self) -> None:
        parsed = parse_url("myapp://a%20b/42", treat_host_as_path_component=True)
        assert parsed.path_segments == ("a b", "42")

    def test_host_path_component_without_userinfo_or_port(self) -> None:
        parsed = parse_url("myapp://me:pw@Inbox:8080/42", treat_host_as_path_component=True)
        assert parsed.path_segments == ("Inbox", "42")

    def test_host_not_path_component_by_default(self) -> None:
        assert parse_url("myapp://user/view/42").path_segments == ("view", "42")

    def test_no_host(self) -> None:
        parsed = parse_url("myapp:/user/42")
        assert parsed.host == ""
        assert parsed.path_segments == ("user", "42")


class TestInvalidURL:
    @pytest.mark.parametrize("url", ["", "   ", "/no/scheme", "http://[::1/x"])
    def test_rejected(self, url: str) -> None:
        with pytest.raises(InvalidURLError):
            parse_url(url)

    def test_not_a_string(self) -> None:
        with pytest.raises(InvalidURLError, match="must be a string"):
            parse_url(b"http://host/")  # type: ignore[arg-type]

    def test_error_carries_url(self) -> None:
        with pytest.raises(InvalidURLError) as exc_info:
            parse_url("relative/path")
        assert exc_info.value.url == "relative/path"


def test_parse_query_skips_empty_keys() -> None:
    assert parse_query("=1&&a=2") == {"a": "2"}
