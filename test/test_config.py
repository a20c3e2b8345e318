import pytest
from pydantic import ValidationError

from chat_functions.app.config import Settings


def test_defaults_to_production(monkeypatch):
    monkeypatch.delenv("ENVIRONMENT", raising=False)

    settings = Settings(_env_file=None)

    assert settings.environment == "prod"
    assert settings.is_dev_environment is False


def test_dev_environment_is_opt_in(monkeypatch):
    monkeypatch.setenv("ENVIRONMENT", "Dev")

    assert Settings(_env_file=None).is_dev_environment is True


@pytest.mark.parametrize("field", ["purge_batch_size", "fcm_batch_size"])
@pytest.mark.parametrize("size", [0, -5])
def test_batch_sizes_must_be_positive(field, size):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, **{field: size})


def test_batch_size_from_environment(monkeypatch):
    monkeypatch.setenv("PURGE_BATCH_SIZE", "25")

    assert Settings(_env_file=None).purge_batch_size == 25
