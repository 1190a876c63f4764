"""Global notification settings."""

from __future__ import annotations

from dataclasses import dataclass, field

from .common import DEFAULT_RETRY_INTERVAL, DEFAULT_RETRY_TIMES, DEFAULT_TIMEOUT, Retry, normalize


@dataclass
class NotifySettings:
    """Defaults applied to every notifier."""

    time_format: str = ""
    timeout: float = 0.0
    retry: Retry = field(default_factory=Retry)

    def normalize_timeout(self, timeout: float) -> float:
        return normalize(self.timeout, timeout, 0, DEFAULT_TIMEOUT)

    def normalize_retry(self, retry: Retry) -> Retry:
        return Retry(
            times=normalize(self.retry.times, retry.times, 0, DEFAULT_RETRY_TIMES),
            interval=normalize(self.retry.interval, retry.interval, 0, DEFAULT_RETRY_INTERVAL),
        )