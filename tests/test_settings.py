# tests/test_settings.py
import pytest
from pydantic import ValidationError

from post_scoring.core.settings import ScoringLimits, Settings


def test_defaults_match_scoring_policy(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CRON_SECRET", raising=False)
    limits = Settings(_env_file=None).scoring_limits

    assert limits == ScoringLimits()
    assert limits.scoring_batch_size == 50
    assert limits.write_batch_size == 100
    assert limits.recent_post_limit == 300
    assert limits.total_post_limit == 500
    assert limits.viewer_sample_limit == 200


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CRON_SECRET", "from-env")
    monkeypatch.setenv("SCORING_BATCH_SIZE", "10")
    monkeypatch.setenv("SIGNAL_READ_TIMEOUT_SECONDS", "2.5")

    configured = Settings(_env_file=None)

    assert configured.cron_secret == "from-env"
    assert configured.scoring_limits.scoring_batch_size == 10
    assert configured.scoring_limits.read_timeout_seconds == 2.5


def test_invalid_batch_size_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SCORING_BATCH_SIZE", "0")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)
