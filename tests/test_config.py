"""Tests for sncustomws.config — WsConfig and Properties."""

import logging
from pathlib import Path

import pytest

from sncustomws.config import Properties, WsConfig, parse_properties


class TestWsConfig:
    def test_defaults(self) -> None:
        cfg = WsConfig()

        assert cfg.host == "127.0.0.1"
        assert cfg.port == 8000
        assert cfg.debug is False
        assert cfg.api_version == "v2"
        assert cfg.default_override_priority == 0
        assert cfg.max_availability_products == 50

    def test_override(self) -> None:
        cfg = WsConfig(port=9002, api_version="v3", default_override_priority=10)

        assert cfg.port == 9002
        assert cfg.api_version == "v3"
        assert cfg.default_override_priority == 10

    def test_frozen(self) -> None:
        cfg = WsConfig()
        with pytest.raises(AttributeError):
            cfg.port = 1  # type: ignore[misc]


class TestParseProperties:
    def test_pairs(self) -> None:
        text = "a.priority=5\n b = two words \n"
        assert parse_properties(text) == {"a.priority": "5", "b": "two words"}

    def test_comments_and_blanks(self) -> None:
        text = "# comment\n! also a comment\n\nkey=value\n"
        assert parse_properties(text) == {"key": "value"}

    def test_value_may_contain_equals(self) -> None:
        assert parse_properties("url=http://x?a=b") == {"url": "http://x?a=b"}

    def test_key_without_value(self) -> None:
        assert parse_properties("flag") == {"flag": ""}

    def test_last_assignment_wins(self) -> None:
        assert parse_properties("k=1\nk=2") == {"k": "2"}


class TestProperties:
    def test_mapping(self) -> None:
        props = Properties({"a": "1", "b": "2"})
        assert props["a"] == "1"
        assert len(props) == 2
        assert sorted(props) == ["a", "b"]
        assert props.get("missing") is None

    def test_later_sources_win(self) -> None:
        props = Properties({"a": "1", "b": "1"}, {"b": "2"})
        assert dict(props) == {"a": "1", "b": "2"}

    def test_with_overrides(self) -> None:
        props = Properties({"a": "1"})
        updated = props.with_overrides({"a": "9", "c": "3"})
        assert props["a"] == "1"
        assert dict(updated) == {"a": "9", "c": "3"}

    def test_get_int(self) -> None:
        props = Properties({"p": " 7 ", "neg": "-2"})
        assert props.get_int("p", 0) == 7
        assert props.get_int("neg", 0) == -2

    def test_get_int_missing(self) -> None:
        assert Properties().get_int("p", 4) == 4

    def test_get_int_not_numeric(self, caplog: pytest.LogCaptureFixture) -> None:
        props = Properties({"p": "high"})
        with caplog.at_level(logging.DEBUG, logger="sncustomws.config"):
            assert props.get_int("p", 1) == 1
        assert "not an integer" in caplog.text

    def test_immutable(self) -> None:
        props = Properties({"a": "1"})
        with pytest.raises(TypeError):
            props["a"] = "2"  # type: ignore[index]

    def test_repr(self) -> None:
        assert repr(Properties({"a": "1"})) == "Properties(1 entries)"

    def test_load(self, tmp_path: Path) -> None:
        project = tmp_path / "project.properties"
        local = tmp_path / "local.properties"
        project.write_text("carts.priority=1\nsite=electronics\n", encoding="utf-8")
        local.write_text("carts.priority=5\n", encoding="utf-8")

        props = Properties.load(project, str(local))

        assert props.get_int("carts.priority", 0) == 5
        assert props["site"] == "electronics"
