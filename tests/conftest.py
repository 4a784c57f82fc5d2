from collections.abc import Iterator

import pytest

from extradist import config as config_module


@pytest.fixture(autouse=True)
def _reset_engine_config(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate every test from the ambient EXTRADIST_CONFIG and prior set_config calls."""
    monkeypatch.delenv(config_module.CONFIG_ENV_VAR, raising=False)
    config_module.set_config(None)
    yield
    config_module.set_config(None)
