"""Tests for flag encoding."""

from __future__ import annotations

from prism_mcp.core.process import join_args
from prism_mcp.tools.flags import build_args, build_flags


class TestBuildFlags:
    def test_mixed_options(self) -> None:
        options = {"a": True, "b": "x", "c": 5, "d": None, "e": False}
        assert build_flags(options) == ["--a", "--b", "x", "--c", "5"]

    def test_stable_and_repeatable(self) -> None:
        options = {"z": "1", "a": True, "m": 2}
        assert build_flags(options) == build_flags(options)
        assert build_flags(options) == ["--z", "1", "--a", "--m", "2"]

    def test_empty(self) -> None:
        assert build_flags({}) == []

    def test_float(self) -> None:
        assert build_flags({"timeout": 2.5}) == ["--timeout", "2.5"]

    def test_zero_is_kept(self) -> None:
        assert build_flags({"timeout": 0}) == ["--timeout", "0"]

    def test_empty_string_is_kept(self) -> None:
        assert build_flags({"comment": ""}) == ["--comment", ""]

    def test_values_are_separate_tokens(self) -> None:
        tokens = build_flags({"payload": '{"a": "b c"}'})
        assert tokens == ["--payload", '{"a": "b c"}']

    def test_unsupported_types_dropped(self) -> None:
        assert build_flags({"items": ["a"], "ok": True}) == ["--ok"]

    def test_renders_for_shell(self) -> None:
        flags = build_flags({"a": True, "b": "x y", "c": 5})
        assert join_args(flags) == "--a --b 'x y' --c 5"


class TestBuildArgs:
    def test_base_then_flags(self) -> None:
        args = build_args(["integrations:init", "my-int"], {"directory": "src"})
        assert args == ["integrations:init", "my-int", "--directory", "src"]

    def test_base_not_mutated(self) -> None:
        base = ["components:list"]
        build_args(base, {"output": "json"})
        assert base == ["components:list"]
