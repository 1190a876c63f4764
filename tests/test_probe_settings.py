import pytest

from easeprobe.common import (
    DEFAULT_MAX_NOTIFICATION_TIMES,
    DEFAULT_NOTIFICATION_FACTOR,
    DEFAULT_PROBE_INTERVAL,
    DEFAULT_STATUS_CHANGE_THRESHOLD_SETTING,
    DEFAULT_TIMEOUT,
)
from easeprobe.probe_settings import (
    IntervalStrategy,
    NotificationStrategySettings as NS,
    ProbeSettings,
    StatusChangeThresholdSettings as TS,
    parse_interval_strategy,
    strategy_from_json,
    strategy_from_yaml,
    strategy_to_json,
    strategy_to_yaml,
)


def test_probe():
    p = ProbeSettings()
    assert p.normalize_timeout(0) == DEFAULT_TIMEOUT
    assert p.normalize_timeout(10) == 10
    p.timeout = 20
    assert p.normalize_timeout(0) == 20
    assert p.normalize_interval(0) == DEFAULT_PROBE_INTERVAL
    assert p.normalize_interval(10) == 10
    p.interval = 20
    assert p.normalize_interval(0) == 20


def test_threshold():
    p = ProbeSettings()
    d = DEFAULT_STATUS_CHANGE_THRESHOLD_SETTING
    assert p.normalize_threshold(TS()) == TS(d, d)
    p.threshold = TS(failure=2, success=3)
    assert p.normalize_threshold(TS(failure=1)) == TS(1, 3)
    assert p.normalize_threshold(TS(success=2)) == TS(2, 2)
    assert p.normalize_threshold(TS(5, 6)) == TS(5, 6)
    assert p.normalize_threshold(TS(failure=0)) == TS(2, 3)
    assert p.normalize_threshold(TS(success=-1)) == TS(2, 3)
    p.threshold.failure = -1
    assert p.normalize_threshold(TS(failure=0)) == TS(1, 3)


def test_notification_strategy():
    p = ProbeSettings()
    assert p.normalize_notification_strategy(NS()) == NS(
        IntervalStrategy.REGULAR, DEFAULT_NOTIFICATION_FACTOR, DEFAULT_MAX_NOTIFICATION_TIMES
    )
    p.notification.strategy = IntervalStrategy.INCREMENT
    p.notification.max_times = 10
    assert p.normalize_notification_strategy(NS(strategy=IntervalStrategy.EXPONENTIAL)) == NS(
        IntervalStrategy.EXPONENTIAL, DEFAULT_NOTIFICATION_FACTOR, 10
    )
    p.notification.factor = -1
    assert p.normalize_notification_strategy(NS(max_times=20)) == NS(
        IntervalStrategy.INCREMENT, DEFAULT_NOTIFICATION_FACTOR, 20
    )
    p.notification.factor = 2
    assert p.normalize_notification_strategy(NS(factor=3, max_times=20)) == NS(
        IntervalStrategy.INCREMENT, 3, 20
    )
    assert p.normalize_notification_strategy(NS(IntervalStrategy.REGULAR, 1, 5)) == NS(
        IntervalStrategy.REGULAR, 1, 5
    )


def test_strategy_names():
    assert str(IntervalStrategy.REGULAR) == "regular"
    assert str(IntervalStrategy.INCREMENT) == "increment"
    assert str(IntervalStrategy.EXPONENTIAL) == "exponent"
    for text in ("regular", "Regular", "REGULAR"):
        assert parse_interval_strategy(text) is IntervalStrategy.REGULAR
    assert parse_interval_strategy("increment") is IntervalStrategy.INCREMENT
    assert parse_interval_strategy("exponent") is IntervalStrategy.EXPONENTIAL
    assert parse_interval_strategy("unknown") is IntervalStrategy.UNKNOWN
    assert parse_interval_strategy("bad") is IntervalStrategy.UNKNOWN


@pytest.mark.parametrize(
    "text,value",
    [("regular", IntervalStrategy.REGULAR), ("increment", IntervalStrategy.INCREMENT),
     ("exponent", IntervalStrategy.EXPONENTIAL)],
)
def test_strategy_serialisation(text, value):
    assert strategy_from_yaml(text + "\n") is value
    assert strategy_from_json(f'"{text}"') is value
    assert strategy_to_yaml(value) == text
    assert strategy_to_json(value) == f'"{text}"'


def test_strategy_bad():
    with pytest.raises(ValueError):
        strategy_from_json('"bad"')
    with pytest.raises(ValueError):
        strategy_from_yaml("bad")