"""Tests for ContextVar-based highlight configuration.

Validates defaults, thread isolation, the context manager and from_dict().
"""

from threading import Thread

import pytest

from resaltar import (
    Annotator,
    HighlightConfig,
    get_highlight_config,
    highlight_config_context,
    match_all,
    reset_highlight_config,
    set_highlight_config,
)
from resaltar.config import DEFAULT_BOUNDARY_CHARS


class TestHighlightConfigDataclass:
    """Test HighlightConfig frozen dataclass behavior."""

    def test_default_values(self) -> None:
        config = HighlightConfig()
        assert config.max_depth == 16
        assert config.boundary_chars == DEFAULT_BOUNDARY_CHARS
        assert config.normalize_input is False
        assert config.default_until == (" ",)

    def test_default_boundaries(self) -> None:
        for char in " \t\n,();\"[]{}.":
            assert char in DEFAULT_BOUNDARY_CHARS
        assert "_" not in DEFAULT_BOUNDARY_CHARS
        assert "=" not in DEFAULT_BOUNDARY_CHARS

    def test_immutability(self) -> None:
        config = HighlightConfig()
        with pytest.raises(AttributeError):
            config.max_depth = 3  # type: ignore[misc]


class TestContextVarFunctions:
    """Test get/set/reset functions."""

    def teardown_method(self) -> None:
        reset_highlight_config()

    def test_set_and_get(self) -> None:
        set_highlight_config(HighlightConfig(max_depth=2))
        assert get_highlight_config().max_depth == 2

    def test_reset(self) -> None:
        set_highlight_config(HighlightConfig(max_depth=2))
        reset_highlight_config()
        assert get_highlight_config() == HighlightConfig()

    def test_context_manager_restores(self) -> None:
        set_highlight_config(HighlightConfig(max_depth=5))
        with highlight_config_context(HighlightConfig(max_depth=1)):
            assert get_highlight_config().max_depth == 1
        assert get_highlight_config().max_depth == 5

    def test_context_manager_restores_on_error(self) -> None:
        with pytest.raises(RuntimeError):
            with highlight_config_context(HighlightConfig(max_depth=1)):
                raise RuntimeError("boom")
        assert get_highlight_config().max_depth == 16

    def test_config_changes_matching(self) -> None:
        a = Annotator("a=end=b")
        assert match_all(a, "end", "end") == 0
        with highlight_config_context(HighlightConfig(boundary_chars=frozenset("="))):
            assert match_all(a, "end", "end") == 1


class TestThreadIsolation:
    def test_threads_have_independent_config(self) -> None:
        results: dict[str, int] = {}

        def worker(name: str, depth: int) -> None:
            set_highlight_config(HighlightConfig(max_depth=depth))
            results[name] = get_highlight_config().max_depth

        threads = [Thread(target=worker, args=(f"t{i}", i)) for i in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results == {"t0": 0, "t1": 1, "t2": 2, "t3": 3}
        assert get_highlight_config().max_depth == 16


class TestHighlightConfigFromDict:
    def test_from_dict_basic(self) -> None:
        config = HighlightConfig.from_dict({"max_depth": 4, "normalize_input": True})
        assert config.max_depth == 4
        assert config.normalize_input is True
        assert config.default_until == (" ",)

    def test_from_dict_ignores_unknown_keys(self) -> None:
        config = HighlightConfig.from_dict({"max_depth": 4, "theme": "dark"})
        assert config.max_depth == 4

    def test_from_dict_converts_sequences(self) -> None:
        config = HighlightConfig.from_dict(
            {"boundary_chars": [" ", "="], "default_until": [" ", "\n"]}
        )
        assert config.boundary_chars == frozenset({" ", "="})
        assert config.default_until == (" ", "\n")

    def test_from_dict_empty(self) -> None:
        assert HighlightConfig.from_dict({}) == HighlightConfig()
