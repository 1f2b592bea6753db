# tests/test_command.py
import locale
import shlex

import pytest

from pingprobe.prober.ping import build_ping_command
from pingprobe.schemas import ProbeConfig


@pytest.mark.parametrize("ttl", [1, 5, 64, 255, 1000, 123456])
def test_command_embeds_ttl_and_target(ttl):
    cmd = build_ping_command("example.com", ttl)
    assert shlex.split(cmd) == ["ping", "-c", "1", "-t", str(ttl), "--", "example.com"]


@pytest.fixture
def grouping_locale():
    saved = locale.setlocale(locale.LC_NUMERIC)
    for name in ("de_DE.UTF-8", "en_US.UTF-8", "fr_FR.UTF-8"):
        try:
            locale.setlocale(locale.LC_NUMERIC, name)
        except locale.Error:
            continue
        if locale.localeconv()["thousands_sep"]:
            break
    else:
        locale.setlocale(locale.LC_NUMERIC, saved)
        pytest.skip("no locale with a thousands separator installed")
    yield
    locale.setlocale(locale.LC_NUMERIC, saved)


def test_command_ignores_locale_grouping(grouping_locale):
    # the locale would render 1000 as "1,000" or "1.000"
    assert locale.format_string("%d", 1000, grouping=True) != "1000"
    assert shlex.split(build_ping_command("192.0.2.1", 1000))[4] == "1000"


def test_dash_target_is_not_an_option():
    args = shlex.split(build_ping_command("-c5", 3))
    assert args == ["ping", "-c", "1", "-t", "3", "--", "-c5"]


def test_command_custom_binary_and_literal_address():
    cmd = build_ping_command("93.184.216.34", 7, ping_bin="/usr/bin/ping")
    assert cmd == "/usr/bin/ping -c 1 -t 7 -- 93.184.216.34"


def test_target_is_not_validated():
    cmd = build_ping_command("not a host; rm -rf /", 3)
    assert shlex.split(cmd)[-1] == "not a host; rm -rf /"


@pytest.mark.parametrize("ttl", [0, -1, 1.5, True, "5"])
def test_bad_ttl(ttl):
    with pytest.raises(ValueError):
        build_ping_command("example.com", ttl)
    with pytest.raises(ValueError):
        ProbeConfig("example.com", ttl)


def test_empty_target_rejected_by_config():
    with pytest.raises(ValueError):
        ProbeConfig("", 3)
