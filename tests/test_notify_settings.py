from easeprobe.common import DEFAULT_RETRY_INTERVAL, DEFAULT_RETRY_TIMES, DEFAULT_TIMEOUT, Retry
from easeprobe.notify_settings import NotifySettings


def test_notify():
    n = NotifySettings(timeout=0, retry=Retry(times=0, interval=0))
    assert n.normalize_timeout(0) == DEFAULT_TIMEOUT
    assert n.normalize_timeout(10) == 10
    n.timeout = 20
    assert n.normalize_timeout(0) == 20

    assert n.normalize_retry(Retry(10, 0)) == Retry(10, DEFAULT_RETRY_INTERVAL)
    assert n.normalize_retry(Retry(0, 10)) == Retry(DEFAULT_RETRY_TIMES, 10)
    assert n.normalize_retry(Retry(10, 10)) == Retry(10, 10)

    n.retry.times = 20
    assert n.normalize_retry(Retry(0, 0)) == Retry(20, DEFAULT_RETRY_INTERVAL)
    n.retry.interval = 20
    assert n.normalize_retry(Retry(0, 0)) == Retry(20, 20)