"""Decoder for /proc/<pid>/stat records.

A record looks like::

    1234 (bash) S 1200 1234 1234 34816 5678 4194304 ...

The command name sits between ``(`` and the LAST ``)`` in the buffer, so names
containing spaces or parentheses decode correctly. A name containing ``) ``
followed by text that looks like the rest of the record can still be split in
the wrong place; the kernel gives no way to tell the two apart.

Decoding is one pass: tokenize, decode each token by its schema kind, then
build the record. Either a complete record is returned or an exception from
:mod:`procstat.errors` is raised.
"""

import logging
import re
from typing import NamedTuple

from procstat.errors import (
    DecodeError,
    IdentityMismatch,
    InvalidIdentity,
    MalformedRecord,
    ProcStatError,
    SchemaError,
)
from procstat.models import ProcessStatRecord
from procstat.schema import (
    KIND_RANGES,
    PID_KIND,
    RECORD_FIELDS,
    STAT_SCHEMA,
    STATE_KIND,
    NumericKind,
    StatSchema,
)

logger = logging.getLogger(__name__)

_INTEGER = re.compile(rb"[+-]?[0-9]+")


class RecordTokens(NamedTuple):
    """Raw tokens of one record, in record order."""

    pid: bytes
    name: bytes
    state: bytes
    fields: list[bytes]


def tokenize(raw: bytes) -> RecordTokens:
    """
    Split a raw record into its pid, name, state and trailing tokens.

    Args:
        raw: The complete record, as read in one piece from the stat file.

    Returns:
        The record's tokens. Trailing tokens are not checked against any schema.

    Raises:
        MalformedRecord: If the pid, the parentheses around the name or the
            single-character state cannot be located.
    """
    raw = bytes(raw)

    space = raw.find(b" ")
    if space < 0:
        raise MalformedRecord("no space after the pid")
    pid = raw[:space]
    if not _INTEGER.fullmatch(pid):
        raise MalformedRecord("record does not start with a pid")

    name_start = space + 1
    if raw[name_start : name_start + 1] != b"(":
        raise MalformedRecord("missing '(' before the command name")
    name_end = raw.rfind(b")", name_start + 1)
    if name_end < 0:
        raise MalformedRecord("missing ')' after the command name")

    state_at = name_end + 2
    if raw[name_end + 1 : state_at] != b" ":
        raise MalformedRecord("expected a single space after the command name")
    state = raw[state_at : state_at + 1]
    if not state or state.isspace():
        raise MalformedRecord("missing state code")
    rest = raw[state_at + 1 :]
    if rest and not rest[:1].isspace():
        raise MalformedRecord("state code is longer than one character")

    return RecordTokens(
        pid=pid,
        name=raw[name_start + 1 : name_end],
        state=state,
        fields=rest.split(),
    )


def decode_field(field: str, token: bytes, kind: NumericKind) -> int | str:
    """
    Decode one token as ``kind``.

    Integers must be plain base-10 and fit the kind's range; they are never
    truncated or wrapped. ``CHAR`` tokens are returned verbatim as a
    one-character string.

    Raises:
        DecodeError: If the token is not valid for ``kind``.
    """
    if kind is NumericKind.CHAR:
        if len(token) != 1:
            raise DecodeError(field, token)
        return token.decode("latin-1")

    if not _INTEGER.fullmatch(token):
        raise DecodeError(field, token)
    value = int(token)
    low, high = KIND_RANGES[kind]
    if not low <= value <= high:
        raise DecodeError(field, token)
    return value


def assemble(tokens: RecordTokens, schema: StatSchema = STAT_SCHEMA) -> ProcessStatRecord:
    """
    Build a record from tokens, consuming trailing fields in schema order.

    Tokens beyond the schema are ignored so that records from newer kernels
    still decode. Schema fields the record does not name go to its ``extra``
    tuple; record fields the schema does not declare stay None.

    Raises:
        SchemaError: If fewer trailing tokens are present than the schema needs.
        DecodeError: If any token does not decode as its field's kind.
    """
    expected = len(schema.fields)
    got = len(tokens.fields)
    if got < expected:
        raise SchemaError(expected, got)

    values: dict[str, int | str] = {
        "pid": decode_field("pid", tokens.pid, PID_KIND),
        "comm": tokens.name.decode("utf-8", "surrogateescape"),
        "state": decode_field("state", tokens.state, STATE_KIND),
    }
    extra: list[tuple[str, int | str]] = []
    for spec, token in zip(schema.fields, tokens.fields):
        value = decode_field(spec.name, token, spec.kind)
        if spec.name in RECORD_FIELDS:
            values[spec.name] = value
        else:
            extra.append((spec.name, value))

    return ProcessStatRecord(**values, extra=tuple(extra))


def validate_pid(pid: int) -> None:
    """Reject pids that cannot name a process (zero, negative, non-integer)."""
    if isinstance(pid, bool) or not isinstance(pid, int) or pid <= 0:
        raise InvalidIdentity(pid)


def decode(
    pid: int,
    raw: bytes,
    *,
    schema: StatSchema = STAT_SCHEMA,
    verify_pid: bool = True,
) -> ProcessStatRecord:
    """
    Decode the stat record ``raw`` read for process ``pid``.

    Args:
        pid: The process the record was read for. Checked before ``raw``.
        raw: The complete record.
        schema: The field layout to decode the trailing tokens with.
        verify_pid: Require the record's own pid to equal ``pid``.

    Returns:
        A fully populated ProcessStatRecord.

    Raises:
        InvalidIdentity: If ``pid`` is not a positive integer.
        MalformedRecord, DecodeError, SchemaError: If ``raw`` does not decode.
        IdentityMismatch: If ``verify_pid`` is set and the pids differ.
    """
    validate_pid(pid)
    try:
        record = assemble(tokenize(raw), schema)
    except ProcStatError as exc:
        logger.debug(f"Rejected stat record for pid {pid}: {exc}")
        raise

    if verify_pid and record.pid != pid:
        raise IdentityMismatch(pid, record.pid)
    return record
