# pingprobe/prober/fake.py
import io
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Sequence

from pingprobe.config import Settings
from pingprobe.prober.base import Prober
from pingprobe.prober.ping import outcome_from_run
from pingprobe.schemas import ProbeConfig, ProbeOutcome

ALL_LOST = [
    "PING 192.0.2.1 (192.0.2.1) 56(84) bytes of data.",
    "",
    "--- 192.0.2.1 ping statistics ---",
    "1 packets transmitted, 0 received, 100% packet loss, time 0ms",
]


@dataclass
class FakeRun:
    stdout: Sequence[str]
    returncode: int = 0
    stderr: Sequence[str] = field(default_factory=tuple)


class FakeProber(Prober):
    """
    script: dict[(target, ttl)] -> list of transcripts replayed one per call.
    A transcript is either a list of stdout lines or a FakeRun.
    If no scripted transcript is left, replays an all-lost ping run.
    """
    def __init__(self, script=None, settings: Optional[Settings] = None):
        self.settings = settings or Settings(ping_bin="ping")
        self.script = {}
        if script:
            for k, v in script.items():
                self.script[k] = deque(v)

    def probe_once(self, target: str, ttl: int) -> ProbeOutcome:
        config = ProbeConfig(target, ttl)
        dq = self.script.get((target, ttl))
        run = dq.popleft() if dq else ALL_LOST
        if not isinstance(run, FakeRun):
            run = FakeRun(stdout=run)

        return outcome_from_run(
            config,
            datetime.now(timezone.utc),
            run.stdout,
            run.returncode,
            io.StringIO("\n".join(run.stderr)),
            self.settings,
        )
