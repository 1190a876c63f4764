import os
import tempfile
from unittest import mock

import pytest

from easeprobe.common import (
    TLS,
    NoRetryError,
    Retry,
    command_line,
    do_retry,
    enum_from_json,
    enum_from_yaml,
    enum_to_json,
    enum_to_yaml,
    escape_quote,
    get_work_dir,
    make_directory,
    normalize,
    reverse_map,
)

TO_STR = {0: "unknown", 1: "test1", 2: "test2", 3: "test3", 4: "test4"}
FROM_STR = reverse_map(TO_STR)


def test_reverse_map():
    n = reverse_map({1: "a", 2: "b", 3: "c"})
    assert n == {"a": 1, "b": 2, "c": 3}


@pytest.mark.parametrize("text,value", [("test1", 1), ("test2", 2), ("test3", 3), ("test4", 4), ("unknown", 0)])
def test_enum_good(text, value):
    assert enum_from_yaml(text + "\n", FROM_STR, "Test") == value
    assert enum_from_json(f'"{text}"', FROM_STR, "Test") == value
    assert enum_to_yaml(TO_STR, value, "Test") == text
    assert enum_to_json(TO_STR, value, "Test") == f'"{text}"'


def test_enum_bad():
    with pytest.raises(ValueError):
        enum_from_yaml("bad\n", FROM_STR, "Test")
    with pytest.raises(ValueError):
        enum_from_json('"bad"', FROM_STR, "Test")
    with pytest.raises(ValueError):
        enum_from_json('{"x":"y"}', FROM_STR, "Test")
    with pytest.raises(ValueError):
        enum_from_yaml("-bad::", FROM_STR, "Test")
    with pytest.raises(ValueError):
        enum_to_yaml(TO_STR, 10, "Test")
    with pytest.raises(ValueError):
        enum_to_json(TO_STR, 10, "Test")


def test_tls_none_and_insecure():
    assert TLS().config() is None
    ctx = TLS(insecure=True).config()
    assert ctx.check_hostname is False


def test_tls_missing_ca(tmp_path):
    tls = TLS(ca=str(tmp_path / "ca.crt"), cert=str(tmp_path / "t.crt"), key=str(tmp_path / "t.key"))
    with pytest.raises(OSError):
        tls.config()


def test_normalize():
    assert normalize(10, 20, 0, 30) == 20
    assert normalize(10, 0, 0, 10) == 10
    assert normalize(0, 0, 0, 30) == 30


def test_retry():
    r = Retry(times=3, interval=0.01)
    cnt = 0

    def f():
        nonlocal cnt
        if cnt < r.times:
            cnt += 1
            raise RuntimeError(f"error, cnt={cnt}")
        return None

    with pytest.raises(RuntimeError):
        do_retry("test", "dummy", "tag", r, f)
    assert cnt == r.times

    cnt = 1
    assert do_retry("test", "dummy", "tag", r, f) is None
    assert cnt == r.times

    def g():
        nonlocal cnt
        cnt += 1
        raise NoRetryError("No Retry Error")

    cnt = 0
    with pytest.raises(NoRetryError) as info:
        do_retry("test", "dummy", "tag", r, g)
    assert cnt == 1
    assert str(info.value) == "No Retry Error"


def test_make_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert make_directory("") == get_work_dir()
    assert make_directory("./test.txt") == os.path.abspath("./test.txt")
    result = make_directory("./none/existed/test.txt")
    assert result == os.path.abspath("./none/existed/test.txt")
    assert os.path.isdir(tmp_path / "none" / "existed")


def test_make_directory_home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    assert make_directory("~/none/existed/test.txt") == os.path.join(str(tmp_path), "none/existed/test.txt")


def test_get_work_dir_fail(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    with mock.patch("os.getcwd", side_effect=OSError("error")):
        assert get_work_dir() == str(tmp_path)
        with mock.patch("pathlib.Path.home", side_effect=RuntimeError("error")):
            assert get_work_dir() == tempfile.gettempdir()


def test_make_directory_home_fail():
    with mock.patch("pathlib.Path.home", side_effect=RuntimeError("error")):
        assert make_directory("~/test.txt") == os.path.join(tempfile.gettempdir(), "test.txt")


def test_make_directory_mkdir_fail():
    with mock.patch("os.makedirs", side_effect=OSError("error")):
        result = make_directory("/not/existed/test.txt")
    assert result == os.path.join(get_work_dir(), "test.txt")


def test_command_line():
    assert command_line("echo", ["hello", "world"]) == "echo hello world"
    assert (
        command_line("kubectl", ["get", "pod", "--all-namespaces", "-o", "json"])
        == "kubectl get pod --all-namespaces -o json"
    )


def test_escape():
    assert escape_quote("test") == "test"
    assert escape_quote("`test`") == "test"
    assert escape_quote("'test'") == "\\'test\\'"
    assert escape_quote('"test"') == '\\"test\\"'
    assert escape_quote("\\test\\") == "\\\\test\\\\"