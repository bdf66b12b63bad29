import sys
from pathlib import Path

import pytest

# Ensure the project root is on sys.path so `import depositor` works in tests.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

_CONFIG_ENV_VARS = (
    "LOG_LEVEL",
    "LOG_FILE",
    "ALLOC_MAX_PLANS",
    "ALLOC_PLAN_KINDS",
    "ALLOC_BALANCE_KEYS",
)


@pytest.fixture(autouse=True)
def _isolate_config_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer shells and .env files from leaking into settings."""

    for name in _CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("depositor.config.load_dotenv", lambda *a, **k: False)
