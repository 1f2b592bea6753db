# pingprobe/prober/ping.py
import io
import logging
import os
import shlex
import subprocess
from datetime import datetime, timezone
from typing import Iterable, Optional, TextIO

from pingprobe.config import Settings
from pingprobe.parser.accumulator import parse_ping_response
from pingprobe.prober.base import Prober
from pingprobe.schemas import FailureKind, ProbeConfig, ProbeFailure, ProbeOutcome

logger = logging.getLogger(__name__)


def build_ping_command(target: str, ttl: int, ping_bin: str = "ping") -> str:
    """
    Command line for one packet with the given ttl, e.g. `ping -c 1 -t 5 -- example.com`.
    `%d` never applies locale grouping, so ping always sees plain digits.
    The target is quoted but otherwise passed through unchecked.
    """
    if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl < 1:
        raise ValueError(f"ttl must be an integer >= 1, got {ttl!r}")
    # "--" keeps a target such as "-c5" from being read as an option
    return "%s -c 1 -t %d -- %s" % (shlex.quote(ping_bin), ttl, shlex.quote(target))


def drain_error_stream(stream: TextIO, max_chars: int = 4096) -> str:
    """
    Read the whole diagnostic stream into one message, up to max_chars.
    A read error keeps whatever was collected so far.
    """
    parts = []
    size = 0
    while size < max_chars:
        try:
            line = stream.readline()
        except (OSError, ValueError) as e:
            logger.warning("Error message creation interrupted: %s", e)
            break
        if not line:
            break
        line = line.strip()
        if line:
            parts.append(line)
            size += len(line) + 1
    return " ".join(parts)[:max_chars]


def outcome_from_run(config: ProbeConfig, start_time: datetime, stdout_lines: Iterable[str],
                     returncode: int, stderr: TextIO, settings: Settings,
                     killed: bool = False) -> ProbeOutcome:
    """Turn a finished ping run into a result; abnormal exits never reach the parser."""
    if not killed and (returncode < 0 or returncode >= settings.error_exit_status):
        message = drain_error_stream(stderr, settings.max_error_chars)
        failure = ProbeFailure(
            kind=FailureKind.EXECUTION_FAILURE,
            message=message or f"ping exited with status {returncode}",
            config=config,
            start_time=start_time,
            end_time=datetime.now(timezone.utc),
        )
        logger.info("%s ttl=%d: execution failure (status %d): %s",
                    config.target, config.ttl, returncode, failure.message)
        return failure

    outcome = parse_ping_response(stdout_lines, config, start_time)
    if isinstance(outcome, ProbeFailure):
        logger.info("%s ttl=%d: %s", config.target, config.ttl, outcome.kind.value)
    else:
        logger.info("%s ttl=%d: %s from %s in %d ms", config.target, config.ttl,
                    outcome.status, outcome.address, outcome.latency_ms)
    return outcome


class PingProber(Prober):
    """
    Runs the system `ping` once per probe and classifies its output.
    The process is bounded by settings.timeout_s; on expiry it is killed
    and whatever it printed so far is parsed.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()
        if not os.path.exists(self.settings.ping_bin):
            raise FileNotFoundError(f"ping binary not found at {self.settings.ping_bin}")
        # C locale keeps "11.2 ms" style numbers in ping's output
        self._env = dict(os.environ, LC_ALL="C")

    def probe_once(self, target: str, ttl: int) -> ProbeOutcome:
        config = ProbeConfig(target, ttl)
        cmd = build_ping_command(config.target, config.ttl, self.settings.ping_bin)
        logger.debug("Will launch: %s", cmd)

        start_time = datetime.now(timezone.utc)
        try:
            proc = subprocess.Popen(shlex.split(cmd), stdout=subprocess.PIPE, stderr=subprocess.PIPE,
                                    text=True, errors="replace", env=self._env)
        except OSError as e:
            return ProbeFailure(
                kind=FailureKind.EXECUTION_FAILURE,
                message=f"could not launch {cmd}: {e}",
                config=config,
                start_time=start_time,
                end_time=datetime.now(timezone.utc),
            )

        killed = False
        try:
            out, err = proc.communicate(timeout=self.settings.timeout_s)
        except subprocess.TimeoutExpired:
            logger.warning("%s did not finish within %.1fs, killing it", cmd, self.settings.timeout_s)
            proc.kill()
            out, err = proc.communicate()
            killed = True

        return outcome_from_run(config, start_time, (out or "").splitlines(), proc.returncode,
                                io.StringIO(err or ""), self.settings, killed=killed)
