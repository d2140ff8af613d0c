from __future__ import annotations

import pytest

from negachess.config import Settings
from negachess.eval import PERSPECTIVE_MOVER


def test_defaults_from_empty_environment() -> None:
    s = Settings.from_env({})
    assert s == Settings()
    assert s.search_depth == 3
    assert s.eval_perspective == PERSPECTIVE_MOVER == "mover"


def test_values_from_environment() -> None:
    s = Settings.from_env(
        {
            "NEGACHESS_HOST": "127.0.0.1",
            "NEGACHESS_PORT": "9000",
            "NEGACHESS_LOG_LEVEL": "debug",
            "NEGACHESS_SEARCH_DEPTH": "2",
            "NEGACHESS_MAX_DEPTH": "8",
            "NEGACHESS_EVAL_PERSPECTIVE": "ABSOLUTE",
        }
    )
    assert s.host == "127.0.0.1"
    assert s.port == 9000
    assert s.log_level == "DEBUG"
    assert s.search_depth == 2
    assert s.max_depth == 8
    assert s.eval_perspective == "absolute"


@pytest.mark.parametrize(
    "env",
    [
        {"NEGACHESS_PORT": "eighty"},
        {"NEGACHESS_SEARCH_DEPTH": "0"},
        {"NEGACHESS_SEARCH_DEPTH": "7"},
        {"NEGACHESS_EVAL_PERSPECTIVE": "black"},
        {"NEGACHESS_LOG_LEVEL": "chatty"},
        {"NEGACHESS_PORT": "0"},
        {"NEGACHESS_PORT": "-5"},
        {"NEGACHESS_PORT": "70000"},
    ],
)
def test_invalid_environment_raises(env: dict[str, str]) -> None:
    with pytest.raises(ValueError, match="NEGACHESS_"):
        Settings.from_env(env)


def test_log_level_error_names_the_variable() -> None:
    with pytest.raises(ValueError, match="NEGACHESS_LOG_LEVEL"):
        Settings.from_env({"NEGACHESS_LOG_LEVEL": "verbose"})


def test_port_bounds() -> None:
    assert Settings(port=1).port == 1
    assert Settings(port=65535).port == 65535
    with pytest.raises(ValueError, match="NEGACHESS_PORT"):
        Settings(port=65536)
