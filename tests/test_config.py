import pytest
from pydantic import ValidationError

from pokehttp.config import Settings


def test_defaults():
    settings = Settings.from_env({})

    assert settings.timeout_s == 30.0
    assert settings.follow_redirects is False
    assert settings.log_file is None
    assert settings.log_level == "INFO"
    assert settings.page_step == 10


def test_from_env():
    settings = Settings.from_env(
        {
            "POKE_TIMEOUT": "2.5",
            "POKE_FOLLOW_REDIRECTS": "yes",
            "POKE_LOG_FILE": "/tmp/poke.log",
            "POKE_LOG_LEVEL": "debug",
            "POKE_PAGE_STEP": "20",
            "UNRELATED": "x",
        }
    )

    assert settings.timeout_s == 2.5
    assert settings.follow_redirects is True
    assert settings.log_file == "/tmp/poke.log"
    assert settings.log_level == "DEBUG"
    assert settings.page_step == 20


def test_blank_values_fall_back_to_defaults():
    settings = Settings.from_env({"POKE_TIMEOUT": "  ", "POKE_LOG_FILE": ""})

    assert settings.timeout_s == 30.0
    assert settings.log_file is None


@pytest.mark.parametrize(
    "environ",
    [
        {"POKE_TIMEOUT": "0"},
        {"POKE_TIMEOUT": "soon"},
        {"POKE_PAGE_STEP": "0"},
        {"POKE_LOG_LEVEL": "loud"},
        {"POKE_FOLLOW_REDIRECTS": "maybe"},
    ],
)
def test_invalid_values_rejected(environ):
    with pytest.raises(ValidationError):
        Settings.from_env(environ)
