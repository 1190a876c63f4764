# easeprobe

Shared building blocks for a service health-probing tool:

- `easeprobe.common`: defaults, the `Retry` and `TLS` settings, the rule for picking a local, global or default value (`normalize`), enum conversion to and from YAML and JSON, `do_retry`, and small path and string helpers.
- `easeprobe.timefmt`: `format_go_layout`, which formats a `datetime` with a reference-time layout such as `2006-01-02 15:04:05 Z07:00`.
- `easeprobe.identity`: the process-wide program identity (name, icon, version, host, time format and time zone).
- `easeprobe.notify_settings`: `NotifySettings`, the global notification defaults.
- `easeprobe.probe_settings`: `ProbeSettings`, the status-change thresholds and the `IntervalStrategy` enum for notifications.
- `easeprobe.metric`: a registry of labelled `CounterVec` and `GaugeVec` metrics that use Prometheus naming rules.

All durations are plain numbers of seconds (`float`).

## Install

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Identity and time formatting

```python
from datetime import datetime, timezone
from easeprobe.identity import init_easeprobe_with_time, get_easeprobe, footer_string

init_easeprobe_with_time("EaseProbe", "icon.png", "2006-01-02 15:04:05 Z07:00", "Asia/Shanghai")
probe = get_easeprobe()
print(probe.format_time(datetime(2022, 1, 2, 15, 4, 5, tzinfo=timezone.utc)))
# 2022-01-02 23:04:05 +08:00
print(footer_string())   # "EaseProbe v1.7.0 @ <hostname>"
```

`get_easeprobe()` sets up the default identity the first time it is called, and `reset_easeprobe()` clears it. An unknown time zone name falls back to UTC. A blank time format falls back to `2006-01-02 15:04:05 Z0700`. A naive `datetime` is read as UTC.

`format_go_layout(moment, layout)` can also be used on its own.

## Normalising settings

If a local value is not valid (zero or less), the global value is used. If the global value is not valid either, the built-in default is used.

```python
from easeprobe.common import Retry
from easeprobe.notify_settings import NotifySettings
from easeprobe.probe_settings import (
    ProbeSettings, StatusChangeThresholdSettings, parse_interval_strategy,
)

n = NotifySettings()
n.normalize_timeout(0)                 # 30.0, the default timeout
n.normalize_retry(Retry(times=10))     # Retry(times=10, interval=5.0)

p = ProbeSettings()
p.normalize_interval(0)                # 60.0, the default interval
p.normalize_threshold(StatusChangeThresholdSettings())   # failure=1, success=1
parse_interval_strategy("Exponent")    # IntervalStrategy.EXPONENTIAL
```

`strategy_to_yaml`, `strategy_from_yaml`, `strategy_to_json` and `strategy_from_json` convert an `IntervalStrategy` to and from its name (`regular`, `increment`, `exponent`). They raise `ValueError` for a value or name they do not know.

## Retrying

```python
from easeprobe.common import Retry, NoRetryError, do_retry

result = do_retry("notify", "slack", "tag", Retry(times=3, interval=1.0), send)
```

`do_retry` calls `send` up to `times` times and waits `interval` seconds between tries. It returns what `send` returns as soon as a call succeeds. If `send` raises `NoRetryError`, that error is raised again at once. If every try fails, it raises `RuntimeError`, and the message gives the number of retries and the last error.

## TLS

`TLS(ca=..., cert=..., key=..., insecure=...).config()` returns an `ssl.SSLContext`. It returns `None` when no CA and no `insecure` flag is set. If only `insecure` is set, it returns a context that does not verify. With a CA file alone, it returns a context that trusts that CA. With a CA, certificate and key, the context also loads the client certificate. Files that are missing or not valid make it raise.

## Metrics

```python
from easeprobe.metric import new_counter, counter, new_gauge

c = new_counter("easeprobe", "http", "probe", "total", "probe count", ["status"], {})
c.inc({"status": "up"})
counter("easeprobe_http_probe_total").value({"status": "up"})   # 1.0

g = new_gauge("easeprobe", "http", "probe", "latency", "latency", ["name"], {"env": "dev"})
g.set({"name": "web", "env": "dev"}, 0.25)
```

`get_name` joins the cleaned, non-empty parts of a name with underscores. `new_counter` and `new_gauge` raise `ValueError` when the metric name or a label name is not valid, or when a label is also given as a constant label. Asking again for a name that is already registered returns the metric that exists. A name that is already registered as the other kind raises `ValueError`.

## What this package does not do

It holds no probes, notifiers or scheduler. It does not run an HTTP server, and it does not expose metrics in the Prometheus text format: metric values are kept in memory and read back with `value()`. It has no command-line program.