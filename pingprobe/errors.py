from pingprobe.schemas import FailureKind, ProbeFailure


class ProbeError(Exception):
    kind: FailureKind

    def __init__(self, failure: ProbeFailure):
        super().__init__(failure.message)
        self.failure = failure


class ExecutionFailure(ProbeError):
    """ping exited abnormally; the message is what it wrote to stderr."""
    kind = FailureKind.EXECUTION_FAILURE


class PacketLoss(ProbeError):
    kind = FailureKind.PACKET_LOSS


class UnparsableResponse(ProbeError):
    kind = FailureKind.UNPARSABLE_RESPONSE


_BY_KIND = {cls.kind: cls for cls in (ExecutionFailure, PacketLoss, UnparsableResponse)}


def raise_for_failure(failure: ProbeFailure):
    raise _BY_KIND[failure.kind](failure)
