# pingprobe/parser/accumulator.py
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Iterable, Optional

from pingprobe.parser.patterns import RttSummary, Success, Timeout, TtlExceeded, classify
from pingprobe.schemas import (
    FailureKind,
    ProbeConfig,
    ProbeFailure,
    ProbeOutcome,
    ProbeResult,
    RttStats,
)

logger = logging.getLogger(__name__)


class State(Enum):
    COLLECTING = "collecting"
    COMPLETED = "completed"
    LOST = "lost"
    UNPARSABLE = "unparsable"


class ResponseAccumulator:
    """
    Folds the stdout of one `ping -c 1 -t <ttl>` run into a single outcome.

    A reply line ("64 bytes from ...") is only provisional: it records the
    hostname/address and keeps collecting until the "rtt min/avg/max/mdev"
    summary closes the probe. Its per-packet time is kept in `latency_ms`
    only as a provisional reading; the result takes the summary's avg.
    A "Time to live exceeded" line or the all-lost statistics line close
    it immediately. Anything else is ignored.
    One instance per probe; nothing is shared between instances.
    """

    def __init__(self, config: ProbeConfig, start_time: datetime,
                 end_time: Optional[datetime] = None):
        self.config = config
        self.start_time = start_time
        self.end_time = end_time or datetime.now(timezone.utc)
        self.state = State.COLLECTING
        self.result: Optional[ProbeResult] = None

        # working fields, filled by reply lines
        self.hostname: Optional[str] = None
        self.address: Optional[str] = None
        self.latency_ms: int = self.elapsed_ms()

    def elapsed_ms(self) -> int:
        delta = self.end_time - self.start_time
        return max(0, int(delta.total_seconds() * 1000))

    @property
    def done(self) -> bool:
        return self.state is not State.COLLECTING

    def feed(self, line: str) -> State:
        if self.done:
            raise RuntimeError(f"probe already finished ({self.state.value})")

        logger.debug("Parsing line: %s", line.rstrip("\r\n"))
        outcome = classify(line)

        if isinstance(outcome, TtlExceeded):
            # ping's own figure is not reported here; use wall-clock time
            self._complete(outcome.hostname, outcome.address, self.elapsed_ms(), None)
        elif isinstance(outcome, Success):
            self.hostname = outcome.hostname
            self.address = outcome.address
            self.latency_ms = int(outcome.latency_ms)
        elif isinstance(outcome, RttSummary):
            self._complete(self.hostname, self.address, int(outcome.stats.avg), outcome.stats)
        elif isinstance(outcome, Timeout):
            self.state = State.LOST

        return self.state

    def finish(self) -> State:
        if self.state is State.COLLECTING:
            self.state = State.UNPARSABLE
        return self.state

    def _complete(self, hostname, address, latency_ms: int, rtt: Optional[RttStats]):
        self.result = ProbeResult(
            start_time=self.start_time,
            end_time=self.end_time,
            config=self.config,
            hostname=hostname,
            address=address,
            latency_ms=max(0, latency_ms),
            ttl_at_response=self.config.ttl,
            rtt=rtt,
        )
        self.state = State.COMPLETED

    def outcome(self) -> ProbeOutcome:
        if self.state is State.COMPLETED:
            return self.result
        if self.state is State.LOST:
            return self._failure(FailureKind.PACKET_LOSS, "Packet is lost")
        if self.state is State.UNPARSABLE:
            return self._failure(FailureKind.UNPARSABLE_RESPONSE, "Could not parse response")
        raise RuntimeError("probe still collecting; call finish() first")

    def _failure(self, kind: FailureKind, message: str) -> ProbeFailure:
        return ProbeFailure(kind=kind, message=message, config=self.config,
                            start_time=self.start_time, end_time=self.end_time)


def parse_ping_response(lines: Iterable[str], config: ProbeConfig, start_time: datetime,
                        end_time: Optional[datetime] = None) -> ProbeOutcome:
    """Run the accumulator over `lines`, stopping at the first line that decides the probe."""
    acc = ResponseAccumulator(config, start_time, end_time)
    for line in lines:
        if acc.feed(line) is not State.COLLECTING:
            break
    acc.finish()
    return acc.outcome()
