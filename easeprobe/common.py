"""Shared settings, defaults and small helpers used across the prober."""

from __future__ import annotations

import json
import logging
import os
import ssl
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Hashable, Iterable, Mapping, TypeVar

import yaml

log = logging.getLogger(__name__)

ORG = "MegaEase"
DEFAULT_PROG = "EaseProbe"
DEFAULT_ICON_URL = "https://megaease.com/favicon.png"

VER = "v1.7.0"
ORG_PROG = ORG + " " + DEFAULT_PROG
ORG_PROG_VER = ORG + " " + DEFAULT_PROG + "/" + VER

# Durations are expressed in seconds.
DEFAULT_RETRY_TIMES = 3
DEFAULT_RETRY_INTERVAL = 5.0
DEFAULT_TIME_FORMAT = "2006-01-02 15:04:05 Z0700"
DEFAULT_TIME_ZONE = "UTC"
DEFAULT_PROBE_INTERVAL = 60.0
DEFAULT_TIMEOUT = 30.0
DEFAULT_CHANNEL_NAME = "__EaseProbe_Channel__"
DEFAULT_STATUS_CHANGE_THRESHOLD_SETTING = 1
DEFAULT_MAX_NOTIFICATION_TIMES = 1
DEFAULT_NOTIFICATION_FACTOR = 1
DEFAULT_CONFIG_FILE_CHECK_INTERVAL = 5.0

DEFAULT_HTTP_SERVER_IP = "0.0.0.0"
DEFAULT_HTTP_SERVER_PORT = "8181"
DEFAULT_PAGE_SIZE = 100
DEFAULT_ACCESS_LOG_FILE = "access.log"
DEFAULT_DATA_FILE = "data/data.yaml"
DEFAULT_PID_FILE = "easeprobe.pid"

DEFAULT_MAX_LOG_SIZE = 10
DEFAULT_MAX_LOG_AGE = 7
DEFAULT_MAX_BACKUPS = 5
DEFAULT_LOG_COMPRESS = True

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)
V = TypeVar("V", bound=Hashable)


@dataclass
class Retry:
    """How many times to retry and how long to wait between tries (seconds)."""

    times: int = 0
    interval: float = 0.0


@dataclass
class TLS:
    """Paths of the TLS files and whether verification is skipped."""

    ca: str = ""
    cert: str = ""
    key: str = ""
    insecure: bool = False

    def config(self) -> ssl.SSLContext | None:
        """Build an SSL context, or return None when TLS is not configured."""
        if not self.ca:
            if self.insecure:
                log.debug("[TLS] Insecure is true but the CA is empty, return a tls config")
                return _insecure_context()
            return None

        Path(self.ca).read_bytes()
        context = ssl.create_default_context(cafile=self.ca)
        if self.insecure:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE

        if not self.cert or not self.key:
            log.debug("[TLS] Only have CA file, go TLS")
            return context

        log.debug("[TLS] Have both CA and cert/key, go mTLS way")
        context.load_cert_chain(self.cert, self.key)
        return context


def _insecure_context() -> ssl.SSLContext:
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


class NoRetryError(Exception):
    """An error after which retrying is pointless."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


def normalize(global_value: T, local: T, valid: T, default: T) -> T:
    """Pick the local value if valid, else the global one if valid, else the default."""
    if local <= valid:  # type: ignore[operator]
        local = global_value if global_value > valid else default  # type: ignore[operator]
    return local


def reverse_map(mapping: Mapping[K, V]) -> dict[V, K]:
    """Swap keys and values."""
    return {v: k for k, v in mapping.items()}


def enum_to_yaml(mapping: Mapping[Any, str], value: Any, typename: str) -> str:
    """Return the YAML string form of an enum value."""
    try:
        return mapping[value]
    except KeyError:
        raise ValueError(f"{value} is not a valid {typename}") from None


def enum_to_json(mapping: Mapping[Any, str], value: Any, typename: str) -> str:
    """Return the JSON text of an enum value."""
    try:
        return f'"{mapping[value]}"'
    except KeyError:
        raise ValueError(f"{value} is not a valid {typename}") from None


def _lookup(raw: Any, mapping: Mapping[str, T], typename: str) -> T:
    if not isinstance(raw, str):
        raise ValueError(f"{raw!r} is not a valid {typename}")
    try:
        return mapping[raw.lower()]
    except KeyError:
        raise ValueError(f"{raw} is not a valid {typename}") from None


def enum_from_yaml(text: str | bytes, mapping: Mapping[str, T], typename: str) -> T:
    """Parse a YAML scalar into an enum value, case-insensitively."""
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ValueError(f"invalid YAML for {typename}: {exc}") from exc
    return _lookup(raw, mapping, typename)


def enum_from_json(data: str | bytes, mapping: Mapping[str, T], typename: str) -> T:
    """Parse a JSON string into an enum value, case-insensitively."""
    try:
        raw = json.loads(data)
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid JSON for {typename}: {exc}") from exc
    return _lookup(raw, mapping, typename)


def do_retry(kind: str, name: str, tag: str, retry: Retry, fn: Callable[[], Any]) -> Any:
    """Call fn until it succeeds, up to retry.times; NoRetryError stops at once."""
    last: Exception | None = None
    for attempt in range(retry.times):
        try:
            return fn()
        except NoRetryError:
            raise
        except Exception as exc:  # noqa: BLE001
            last = exc
            log.warning(
                "[%s / %s / %s] Retried to send %d/%d - %s",
                kind, name, tag, attempt + 1, retry.times, exc,
            )
        if attempt < retry.times - 1:
            time.sleep(retry.interval)
    raise RuntimeError(
        f"[{kind} / {name} / {tag}] failed after {retry.times} retries - {last}"
    ) from last


def _home_dir() -> str:
    try:
        return str(Path.home())
    except (RuntimeError, KeyError, OSError) as exc:
        log.warning("Cannot get the user home directory: %s, using /tmp directory!", exc)
        return tempfile.gettempdir()


def get_work_dir() -> str:
    """Return the working directory, falling back to home, then the temp dir."""
    try:
        return os.getcwd()
    except OSError as exc:
        log.warning("Cannot get the current directory: %s, using $HOME directory!", exc)
        return _home_dir()


def make_directory(filename: str) -> str:
    """Return an absolute path for filename, creating its directory if needed."""
    directory, file = os.path.split(filename)
    if directory and not directory.endswith(os.sep):
        directory += os.sep
    if not directory:
        directory = get_work_dir()
    if not file:
        return directory
    if directory.startswith("~/"):
        directory = os.path.join(_home_dir(), directory[2:])
    try:
        directory = os.path.abspath(directory)
    except OSError as exc:
        log.warning("Cannot get the absolute path: %s", exc)
        directory = get_work_dir()
    if not os.path.exists(directory):
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as exc:
            log.warning("Cannot create the directory: %s", exc)
            directory = get_work_dir()
    return os.path.join(directory, file)


def command_line(cmd: str, args: Iterable[str]) -> str:
    """Join a command and its arguments with spaces."""
    return " ".join([cmd, *args])


def escape_quote(text: str) -> str:
    """Drop backticks and escape backslashes and both kinds of quote."""
    for old, new in (("`", ""), ("\\", "\\\\"), ("'", "\\'"), ('"', '\\"')):
        text = text.replace(old, new)
    return text