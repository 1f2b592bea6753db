import shutil
from dataclasses import dataclass, field


def _default_ping_bin() -> str:
    return shutil.which("ping") or "/bin/ping"


@dataclass
class Settings:
    ping_bin: str = field(default_factory=_default_ping_bin)
    timeout_s: float = 10.0           # liveness bound on one ping process

    # ping exits 1 when no reply came back (ttl exceeded, loss), 2+ on real errors
    error_exit_status: int = 2
    max_error_chars: int = 4096       # cap on the drained stderr message

    log_level: str = "INFO"
