# pingprobe/prober/base.py
from abc import ABC, abstractmethod

from pingprobe.errors import raise_for_failure
from pingprobe.schemas import ProbeFailure, ProbeOutcome, ProbeResult


class Prober(ABC):
    @abstractmethod
    def probe_once(self, target: str, ttl: int) -> ProbeOutcome:
        """Send exactly one packet to target with the given ttl and classify the answer."""
        raise NotImplementedError

    def probe_or_raise(self, target: str, ttl: int) -> ProbeResult:
        outcome = self.probe_once(target, ttl)
        if isinstance(outcome, ProbeFailure):
            raise_for_failure(outcome)
        return outcome
