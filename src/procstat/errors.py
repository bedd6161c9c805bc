"""Exceptions raised while decoding /proc/<pid>/stat records."""


class ProcStatError(Exception):
    """Base class for every procstat decode failure."""


class InvalidIdentity(ProcStatError, ValueError):
    """The caller supplied a pid that cannot name a process."""

    def __init__(self, pid: object) -> None:
        super().__init__(f"invalid process id: {pid!r}")
        self.pid = pid


class MalformedRecord(ProcStatError, ValueError):
    """The record is missing one of its structural delimiters."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"malformed stat record: {reason}")
        self.reason = reason


class DecodeError(ProcStatError, ValueError):
    """A token could not be decoded as the kind its field declares."""

    def __init__(self, field: str, token: bytes) -> None:
        super().__init__(f"cannot decode field {field!r} from token {token!r}")
        self.field = field
        self.token = token


class SchemaError(ProcStatError, ValueError):
    """The record has fewer trailing fields than the schema declares."""

    def __init__(self, expected: int, got: int) -> None:
        super().__init__(f"expected at least {expected} fields after state, got {got}")
        self.expected = expected
        self.got = got


class InvalidSchema(ProcStatError, ValueError):
    """A schema cannot populate ProcessStatRecord."""

    def __init__(self, version: str, reason: str) -> None:
        super().__init__(f"invalid stat schema {version!r}: {reason}")
        self.version = version
        self.reason = reason


class IdentityMismatch(ProcStatError, ValueError):
    """The record's own pid differs from the pid it was read for."""

    def __init__(self, expected: int, got: int) -> None:
        super().__init__(f"record is for pid {got}, expected pid {expected}")
        self.expected = expected
        self.got = got
