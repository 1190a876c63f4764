"""Named counter and gauge metrics with Prometheus-style naming rules."""

from __future__ import annotations

import logging
import re
import threading
from typing import Iterable, Mapping, MutableMapping

log = logging.getLogger(__name__)

_MODULE = "Metric"

_VALID_METRIC = re.compile(r"[a-zA-Z_:][a-zA-Z0-9_:]*")
_VALID_LABEL = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")


class _MetricVec:
    """A family of values keyed by a fixed set of label names."""

    kind = "metric"

    def __init__(self, name: str, help_text: str, label_names: Iterable[str]) -> None:
        self.name = name
        self.help_text = help_text
        self.label_names: tuple[str, ...] = tuple(label_names)
        self._values: dict[tuple[str, ...], float] = {}
        self._lock = threading.Lock()

    def _key(self, labels: Mapping[str, str]) -> tuple[str, ...]:
        if set(labels) != set(self.label_names) or len(labels) != len(self.label_names):
            raise ValueError(
                f"{self.kind} {self.name!r} expects labels {list(self.label_names)}, "
                f"got {sorted(labels)}"
            )
        return tuple(str(labels[n]) for n in self.label_names)

    def value(self, labels: Mapping[str, str]) -> float:
        """Return the current value for the given label values (0 if never set)."""
        key = self._key(labels)
        with self._lock:
            return self._values.get(key, 0.0)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, labels={list(self.label_names)})"


class CounterVec(_MetricVec):
    """A monotonically increasing counter per label combination."""

    kind = "counter"

    def inc(self, labels: Mapping[str, str], amount: float = 1.0) -> None:
        """Add amount (which must not be negative) to the counter."""
        if amount < 0:
            raise ValueError("counter cannot decrease in value")
        key = self._key(labels)
        with self._lock:
            self._values[key] = self._values.get(key, 0.0) + amount

    def value(self, labels: Mapping[str, str]) -> float:
        return super().value(labels)


class GaugeVec(_MetricVec):
    """A value that can go up and down per label combination."""

    kind = "gauge"

    def set(self, labels: Mapping[str, str], value: float) -> None:
        """Set the gauge to value."""
        key = self._key(labels)
        with self._lock:
            self._values[key] = float(value)

    def value(self, labels: Mapping[str, str]) -> float:
        return super().value(labels)


_counters: dict[str, CounterVec] = {}
_gauges: dict[str, GaugeVec] = {}
_registry_lock = threading.Lock()


def counter(key: str) -> CounterVec | None:
    """Return the counter registered under key, if any."""
    return _counters.get(key)


def gauge(key: str) -> GaugeVec | None:
    """Return the gauge registered under key, if any."""
    return _gauges.get(key)


def _merge_labels(labels: Iterable[str], const_labels: Mapping[str, str]) -> list[str]:
    return [*labels, *const_labels]


def validate_metric(
    namespace: str,
    subsystem: str,
    name: str,
    metric: str,
    labels: Iterable[str],
    const_labels: Mapping[str, str],
) -> str:
    """Build the metric name and check it and its labels; raise ValueError if invalid."""
    labels = list(labels)
    metric_name = get_name(namespace, subsystem, name, metric)
    if not valid_metric_name(metric_name):
        raise ValueError(f"invalid metric name: {metric_name}")
    for label in labels:
        if not valid_label_name(label):
            raise ValueError(f"invalid label name: {label}")
    for label in const_labels:
        if not valid_label_name(label):
            raise ValueError(f"invalid const label name: {label}")
    for label in labels:
        if label in const_labels:
            raise ValueError(f"label '{label}' is duplicated")
    return metric_name


def _create(
    registry: dict,
    other: dict,
    cls: type,
    namespace: str,
    subsystem: str,
    name: str,
    metric: str,
    help_text: str,
    labels: Iterable[str],
    const_labels: Mapping[str, str] | None,
):
    const_labels = const_labels or {}
    labels = list(labels)
    try:
        metric_name = validate_metric(namespace, subsystem, name, metric, labels, const_labels)
    except ValueError as exc:
        log.error(
            "[namespace: %s, subsystem: %s, name: %s, metric: %s] %s",
            namespace, subsystem, name, metric, exc,
        )
        raise
    with _registry_lock:
        existing = registry.get(metric_name)
        if existing is not None:
            log.debug("[%s] %s <%s> already created!", _MODULE, cls.kind.capitalize(), metric_name)
            return existing
        if metric_name in other:
            raise ValueError(f"metric <{metric_name}> is already registered as another kind")
        created = cls(metric_name, help_text, _merge_labels(labels, const_labels))
        registry[metric_name] = created
    log.info("[%s] %s <%s> is created!", _MODULE, cls.kind.capitalize(), metric_name)
    return created


def new_counter(
    namespace: str,
    subsystem: str,
    name: str,
    metric: str,
    help_text: str,
    labels: Iterable[str],
    const_labels: Mapping[str, str] | None,
) -> CounterVec:
    """Create a counter, or return the existing one with the same name."""
    return _create(_counters, _gauges, CounterVec, namespace, subsystem, name, metric,
                   help_text, labels, const_labels)


def new_gauge(
    namespace: str,
    subsystem: str,
    name: str,
    metric: str,
    help_text: str,
    labels: Iterable[str],
    const_labels: Mapping[str, str] | None,
) -> GaugeVec:
    """Create a gauge, or return the existing one with the same name."""
    return _create(_gauges, _counters, GaugeVec, namespace, subsystem, name, metric,
                   help_text, labels, const_labels)


def get_name(*args: str) -> str:
    """Join the cleaned, non-empty fields with underscores."""
    cleaned = (remove_invalid_chars(field) for field in args)
    result = "_".join(part for part in cleaned if part)
    log.debug("[%s] get the name: %s", _MODULE, result)
    return result


def valid_metric_name(name: str) -> bool:
    """Whether name is a valid metric name."""
    return _VALID_METRIC.fullmatch(name) is not None


def valid_label_name(label: str) -> bool:
    """Whether label is a valid label name."""
    return _VALID_LABEL.fullmatch(label) is not None


def _ascii_letter(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z")


def valid_metric_char(ch: str) -> bool:
    """Whether the single character ch may appear in a metric name."""
    return _ascii_letter(ch) or ("0" <= ch <= "9") or ch in "_:"


def remove_invalid_chars(name: str) -> str:
    """Drop everything before the first ASCII letter, then every invalid character."""
    start = next((i for i, ch in enumerate(name) if _ascii_letter(ch)), len(name))
    return "".join(ch for ch in name[start:] if valid_metric_char(ch))


def add_const_labels(
    labels: MutableMapping[str, str], const_labels: Mapping[str, str] | None
) -> MutableMapping[str, str]:
    """Add the user-defined constant labels to labels, in place, and return it."""
    labels.update(const_labels or {})
    return labels