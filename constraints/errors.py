"""Error taxonomy for circuit synthesis and verification."""


class Error(Exception):
    """Base class for all circuit errors."""


class SynthesisError(Error):
    """The backend could not allocate a cell, constraint or region.

    Fatal to the current proof-construction attempt.
    """


class WitnessError(Error):
    """A witness value is invalid for the requested operation.

    For example, witnessing the identity where a non-identity point is
    required. Distinct from SynthesisError so callers can tell bad input
    from a broken backend.
    """


class VerificationError(Error):
    """A synthesized circuit does not satisfy its constraints."""

    def __init__(self, failures):
        self.failures = list(failures)
        lines = "\n".join(f"  {failure}" for failure in self.failures[:20])
        more = len(self.failures) - 20
        if more > 0:
            lines += f"\n  ... and {more} more"
        super().__init__(f"{len(self.failures)} constraint failure(s):\n{lines}")
