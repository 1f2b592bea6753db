# tools/probe_test.py
# Usage:
#   python3 -m tools.probe_test 8.8.8.8 5
#   python3 -m tools.probe_test example.com 64 --timeout 3 --debug
import argparse
import json
import sys

from pingprobe.config import Settings
from pingprobe.log import setup_logger
from pingprobe.prober.ping import PingProber
from pingprobe.schemas import ProbeFailure


def build_argparser():
    s = Settings()
    ap = argparse.ArgumentParser(description="Send one TTL-limited ping and classify the reply")
    ap.add_argument("target", help="Destination host/IP")
    ap.add_argument("ttl", nargs="?", type=int, default=5, help="TTL for the single probe")
    ap.add_argument("--timeout", type=float, default=s.timeout_s, help="Seconds to wait for ping")
    ap.add_argument("--ping-bin", default=s.ping_bin, help="Path to the ping binary")
    ap.add_argument("--debug", action="store_true", help="Log the command and every parsed line")
    return ap


def main(argv=None) -> int:
    args = build_argparser().parse_args(argv)
    settings = Settings(ping_bin=args.ping_bin, timeout_s=args.timeout,
                        log_level="DEBUG" if args.debug else "INFO")
    setup_logger("pingprobe", settings.log_level)

    outcome = PingProber(settings).probe_once(args.target, args.ttl)
    print(json.dumps(outcome.as_event(), indent=2))
    return 1 if isinstance(outcome, ProbeFailure) else 0


if __name__ == "__main__":
    sys.exit(main())
