"""Global probe settings and the notification interval strategy."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from .common import (
    DEFAULT_MAX_NOTIFICATION_TIMES,
    DEFAULT_NOTIFICATION_FACTOR,
    DEFAULT_PROBE_INTERVAL,
    DEFAULT_STATUS_CHANGE_THRESHOLD_SETTING,
    DEFAULT_TIMEOUT,
    enum_from_json,
    enum_from_yaml,
    enum_to_json,
    enum_to_yaml,
    normalize,
    reverse_map,
)


class IntervalStrategy(IntEnum):
    """How the gap between repeated notifications grows."""

    UNKNOWN = 0
    REGULAR = 1
    INCREMENT = 2
    EXPONENTIAL = 3

    def __str__(self) -> str:
        return _TO_STRING[self]


_TO_STRING = {
    IntervalStrategy.UNKNOWN: "unknown",
    IntervalStrategy.REGULAR: "regular",
    IntervalStrategy.INCREMENT: "increment",
    IntervalStrategy.EXPONENTIAL: "exponent",
}
_FROM_STRING = reverse_map(_TO_STRING)
_TYPENAME = "IntervalStrategy"

DEFAULT_NOTIFICATION_STRATEGY = IntervalStrategy.REGULAR


def parse_interval_strategy(text: str) -> IntervalStrategy:
    """Look up a strategy by name, case-insensitively; unknown names give UNKNOWN."""
    return _FROM_STRING.get(text.lower(), IntervalStrategy.UNKNOWN)


def strategy_to_yaml(strategy: IntervalStrategy) -> str:
    return enum_to_yaml(_TO_STRING, strategy, _TYPENAME)


def strategy_from_yaml(text: str | bytes) -> IntervalStrategy:
    return enum_from_yaml(text, _FROM_STRING, _TYPENAME)


def strategy_to_json(strategy: IntervalStrategy) -> str:
    return enum_to_json(_TO_STRING, strategy, _TYPENAME)


def strategy_from_json(data: str | bytes) -> IntervalStrategy:
    return enum_from_json(data, _FROM_STRING, _TYPENAME)


@dataclass
class StatusChangeThresholdSettings:
    """Consecutive results needed before the status flips."""

    failure: int = 0
    success: int = 0


@dataclass
class NotificationStrategySettings:
    """How often, and how many times, to notify."""

    strategy: IntervalStrategy = IntervalStrategy.UNKNOWN
    factor: int = 0
    max_times: int = 0


@dataclass
class ProbeSettings:
    """Defaults applied to every probe; durations in seconds."""

    interval: float = 0.0
    timeout: float = 0.0
    threshold: StatusChangeThresholdSettings = field(default_factory=StatusChangeThresholdSettings)
    notification: NotificationStrategySettings = field(default_factory=NotificationStrategySettings)

    def normalize_timeout(self, timeout: float) -> float:
        return normalize(self.timeout, timeout, 0, DEFAULT_TIMEOUT)

    def normalize_interval(self, interval: float) -> float:
        return normalize(self.interval, interval, 0, DEFAULT_PROBE_INTERVAL)

    def normalize_threshold(self, threshold: StatusChangeThresholdSettings) -> StatusChangeThresholdSettings:
        default = DEFAULT_STATUS_CHANGE_THRESHOLD_SETTING
        return StatusChangeThresholdSettings(
            failure=normalize(self.threshold.failure, threshold.failure, 0, default),
            success=normalize(self.threshold.success, threshold.success, 0, default),
        )

    def normalize_notification_strategy(
        self, settings: NotificationStrategySettings
    ) -> NotificationStrategySettings:
        mine = self.notification
        return NotificationStrategySettings(
            strategy=normalize(mine.strategy, settings.strategy, IntervalStrategy.UNKNOWN,
                               IntervalStrategy.REGULAR),
            factor=normalize(mine.factor, settings.factor, 0, DEFAULT_NOTIFICATION_FACTOR),
            max_times=normalize(mine.max_times, settings.max_times, 0, DEFAULT_MAX_NOTIFICATION_TIMES),
        )