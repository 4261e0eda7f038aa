"""Handicap Config Loader (YAML)."""
from pathlib import Path
from typing import Any
import yaml

from src.engine.handicap_config import (
    DEFAULT_PAR,
    HISTORY_LIMIT,
    MAX_COURSE_RATING,
    MAX_SLOPE_RATING,
    MIN_COURSE_RATING,
    MIN_SLOPE_RATING,
    SCORE_OVER_PAR_LIMIT,
    SCORE_UNDER_PAR_LIMIT,
    WINDOW_SIZE,
)


class HandicapConfig:
    """YAML-based handicap configuration.

    Only eligibility bounds and fetch/history limits are tunable; the WHS
    multiplier and the zero floor live in handicap_config and are fixed.
    """

    DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "handicap_config.yaml"

    def __init__(self, config_path: Path | str | None = None):
        path = Path(config_path) if config_path else self.DEFAULT_CONFIG_PATH
        with open(path, encoding="utf-8") as f:
            self._config: dict[str, Any] = yaml.safe_load(f) or {}

    def _section(self, name: str) -> dict[str, Any]:
        return self._config.get(name) or {}

    @property
    def version(self) -> str:
        return str(self._config.get("version", ""))

    @property
    def window_size(self) -> int:
        """WHS window (최근 20). YAML로 변경 불가."""
        return WINDOW_SIZE

    @property
    def lookback_rounds(self) -> int:
        return int(self._section("fetch").get("lookback_rounds", HISTORY_LIMIT))

    @property
    def history_limit(self) -> int:
        return int(self._section("history").get("limit", HISTORY_LIMIT))

    @property
    def default_par(self) -> int:
        return int(self._section("eligibility").get("default_par", DEFAULT_PAR))

    @property
    def score_under_par_limit(self) -> int:
        return int(self._section("eligibility").get("score_under_par_limit", SCORE_UNDER_PAR_LIMIT))

    @property
    def score_over_par_limit(self) -> int:
        return int(self._section("eligibility").get("score_over_par_limit", SCORE_OVER_PAR_LIMIT))

    @property
    def slope_range(self) -> tuple[int, int]:
        s = self._section("eligibility").get("slope_rating") or {}
        return int(s.get("min", MIN_SLOPE_RATING)), int(s.get("max", MAX_SLOPE_RATING))

    @property
    def course_rating_range(self) -> tuple[float, float]:
        r = self._section("eligibility").get("course_rating") or {}
        return float(r.get("min", MIN_COURSE_RATING)), float(r.get("max", MAX_COURSE_RATING))

    def eligibility_kwargs(self) -> dict[str, Any]:
        """is_eligible()에 그대로 넘길 bound 인자."""
        return {
            "under_par_limit": self.score_under_par_limit,
            "over_par_limit": self.score_over_par_limit,
            "slope_range": self.slope_range,
            "course_rating_range": self.course_rating_range,
        }
