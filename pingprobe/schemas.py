from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Literal, Optional, TypedDict, Union

ReplyType = Literal["ttl_exceeded", "dest_reached"]


class ProbeEvent(TypedDict, total=False):
    target: str
    ttl: int
    status: ReplyType
    hostname: Optional[str]
    hop_ip: Optional[str]
    rtt_ms: int
    rtt: Optional[dict]
    start_time: str
    end_time: str


@dataclass(frozen=True)
class ProbeConfig:
    target: str
    ttl: int

    def __post_init__(self):
        if not self.target:
            raise ValueError("target must be a non-empty hostname or address")
        # bool is an int subclass, but True is not a TTL
        if isinstance(self.ttl, bool) or not isinstance(self.ttl, int) or self.ttl < 1:
            raise ValueError(f"ttl must be an integer >= 1, got {self.ttl!r}")


@dataclass(frozen=True)
class RttStats:
    min: float
    avg: float
    max: float
    mdev: float


@dataclass(frozen=True)
class ProbeResult:
    """
    Outcome of one probe that got an answer, either from an intermediate
    router (rtt is None) or from the target itself (rtt from the summary line).
    """
    start_time: datetime
    end_time: datetime
    config: ProbeConfig
    hostname: Optional[str]
    address: Optional[str]
    latency_ms: int
    ttl_at_response: int
    rtt: Optional[RttStats] = None

    @property
    def status(self) -> ReplyType:
        return "ttl_exceeded" if self.rtt is None else "dest_reached"

    def as_event(self) -> ProbeEvent:
        return {
            "target": self.config.target,
            "ttl": self.ttl_at_response,
            "status": self.status,
            "hostname": self.hostname,
            "hop_ip": self.address,
            "rtt_ms": self.latency_ms,
            "rtt": None if self.rtt is None else {
                "min": self.rtt.min, "avg": self.rtt.avg,
                "max": self.rtt.max, "mdev": self.rtt.mdev,
            },
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
        }


class FailureKind(Enum):
    EXECUTION_FAILURE = "execution_failure"
    PACKET_LOSS = "packet_loss"
    UNPARSABLE_RESPONSE = "unparsable_response"


@dataclass(frozen=True)
class ProbeFailure:
    kind: FailureKind
    message: str
    config: ProbeConfig
    start_time: datetime
    end_time: datetime

    def as_event(self) -> dict:
        return {
            "target": self.config.target,
            "ttl": self.config.ttl,
            "status": self.kind.value,
            "error": self.message,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
        }


ProbeOutcome = Union[ProbeResult, ProbeFailure]
