"""Error taxonomy for the conformance harness."""


class HarnessError(Exception):
    """Base class for every harness error."""


class ConfigError(HarnessError):
    """Bad or missing harness configuration. Aborts the whole run."""


class TransportError(HarnessError):
    """No usable response: connection failure, malformed response, redirect loop."""


class FixtureError(HarnessError):
    """A reference file needed by a check could not be read."""


class DecodeError(HarnessError):
    """A response body could not be decoded with its declared content-encoding."""
