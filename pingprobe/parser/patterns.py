# pingprobe/parser/patterns.py
import re
from dataclasses import dataclass
from typing import Callable, NamedTuple, Optional, Union

from pingprobe.schemas import RttStats

# Line shapes printed by iputils ping with LC_ALL=C.
_HOST = r"([\w.-]+)"
_IP = r"(\d{1,3}(?:\.\d{1,3}){3})"
_FLOAT = r"(\d+(?:\.\d+)?)"

_TTL_EXCEEDED = r"icmp_seq=\d+ Time to live exceeded"
_SUCCESS = r"icmp_seq=\d+ ttl=\d+ time=" + _FLOAT + r" ms"


@dataclass(frozen=True)
class TtlExceeded:
    address: str
    hostname: Optional[str] = None


@dataclass(frozen=True)
class Success:
    address: str
    latency_ms: float
    hostname: Optional[str] = None


@dataclass(frozen=True)
class RttSummary:
    stats: RttStats


@dataclass(frozen=True)
class Timeout:
    pass


@dataclass(frozen=True)
class NoMatch:
    pass


ClassificationOutcome = Union[TtlExceeded, Success, RttSummary, Timeout, NoMatch]


class Rule(NamedTuple):
    name: str
    pattern: re.Pattern
    build: Callable[[re.Match], ClassificationOutcome]


def _rule(name: str, regex: str, build) -> Rule:
    return Rule(name, re.compile(regex, re.IGNORECASE), build)


# Ordered; the first full-line match decides the outcome.
RULES: tuple[Rule, ...] = (
    # From host (ip): icmp_seq=1 Time to live exceeded
    _rule("ttl_exceeded_hostname",
          rf"From {_HOST} \({_IP}\): {_TTL_EXCEEDED}",
          lambda m: TtlExceeded(address=m.group(2), hostname=m.group(1))),
    # From ip: icmp_seq=1 Time to live exceeded
    _rule("ttl_exceeded",
          rf"From {_IP}: {_TTL_EXCEEDED}",
          lambda m: TtlExceeded(address=m.group(1))),
    # 64 bytes from host (ip): icmp_seq=1 ttl=56 time=11.2 ms
    _rule("success_hostname",
          rf"\d+ bytes from {_HOST} \({_IP}\): {_SUCCESS}",
          lambda m: Success(address=m.group(2), latency_ms=float(m.group(3)), hostname=m.group(1))),
    # 64 bytes from ip: icmp_seq=1 ttl=56 time=11.2 ms
    _rule("success",
          rf"\d+ bytes from {_IP}: {_SUCCESS}",
          lambda m: Success(address=m.group(1), latency_ms=float(m.group(2)))),
    # rtt min/avg/max/mdev = 11.100/11.200/11.300/0.114 ms
    _rule("rtt_summary",
          rf"rtt min/avg/max/mdev = {_FLOAT}/{_FLOAT}/{_FLOAT}/{_FLOAT} ms",
          lambda m: RttSummary(RttStats(*(float(g) for g in m.groups())))),
    # 1 packets transmitted, 0 received, 100% packet loss, time 0ms
    _rule("timeout",
          r"1 packets transmitted, 0 received, 100% packet loss, time \d+ms",
          lambda m: Timeout()),
)

_NO_MATCH = NoMatch()


def rule_names() -> list[str]:
    return [r.name for r in RULES]


def classify(line: str) -> ClassificationOutcome:
    """Match one line of ping output against RULES (whole line, case-insensitive)."""
    line = line.rstrip("\r\n")
    for rule in RULES:
        m = rule.pattern.fullmatch(line)
        if m:
            return rule.build(m)
    return _NO_MATCH
