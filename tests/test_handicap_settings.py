"""Handicap YAML 설정 로더 테스트."""

import pytest
from src.engine.handicap_settings import HandicapConfig


class TestHandicapConfig:
    @pytest.fixture
    def config(self):
        return HandicapConfig()

    def test_version(self, config):
        assert config.version == "1.0"

    def test_fetch_and_history_limits(self, config):
        assert config.lookback_rounds == 50
        assert config.history_limit == 50

    def test_window_size_fixed(self, config):
        assert config.window_size == 20

    def test_eligibility_bounds(self, config):
        assert config.default_par == 72
        assert config.score_under_par_limit == 10
        assert config.score_over_par_limit == 50
        assert config.slope_range == (55, 155)
        assert config.course_rating_range == (60.0, 80.0)

    def test_eligibility_kwargs(self, config):
        kwargs = config.eligibility_kwargs()
        assert set(kwargs) == {"under_par_limit", "over_par_limit", "slope_range", "course_rating_range"}


def test_missing_keys_fall_back_to_constants(tmp_path):
    path = tmp_path / "partial.yaml"
    path.write_text('version: "test"\neligibility:\n  slope_rating:\n    max: 160\n', encoding="utf-8")
    config = HandicapConfig(path)
    assert config.version == "test"
    assert config.slope_range == (55, 160)
    assert config.course_rating_range == (60.0, 80.0)
    assert config.lookback_rounds == 50


def test_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    config = HandicapConfig(str(path))
    assert config.default_par == 72


def test_window_size_not_overridable(tmp_path):
    """window_size 키가 있어도 WHS window는 20 고정."""
    path = tmp_path / "window.yaml"
    path.write_text("selection:\n  window_size: 10\nfetch:\n  lookback_rounds: 5\n", encoding="utf-8")
    config = HandicapConfig(path)
    assert config.window_size == 20
    assert config.lookback_rounds == 5
