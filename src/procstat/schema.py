"""Positional schema of the /proc/<pid>/stat record."""

import dataclasses
import struct
from dataclasses import dataclass
from enum import Enum

from procstat.errors import InvalidSchema
from procstat.models import ProcessStatRecord


class NumericKind(Enum):
    """Decode kinds for record tokens."""

    U64 = "u64"
    S64 = "s64"
    U32 = "u32"
    S32 = "s32"
    UWORD = "uword"  # C unsigned long, width follows the platform ABI
    CHAR = "char"


WORD_BITS = struct.calcsize("@L") * 8

# Inclusive (min, max) per integer kind.
KIND_RANGES: dict[NumericKind, tuple[int, int]] = {
    NumericKind.U64: (0, 2**64 - 1),
    NumericKind.S64: (-(2**63), 2**63 - 1),
    NumericKind.U32: (0, 2**32 - 1),
    NumericKind.S32: (-(2**31), 2**31 - 1),
    NumericKind.UWORD: (0, 2**WORD_BITS - 1),
}

HEAD_FIELDS = ("pid", "comm", "state")
EXTRA_FIELD = "extra"

# Record fields a schema can fill, and those it must fill.
RECORD_FIELDS = tuple(
    field.name
    for field in dataclasses.fields(ProcessStatRecord)
    if field.name not in HEAD_FIELDS and field.name != EXTRA_FIELD
)
REQUIRED_FIELDS = frozenset(
    field.name
    for field in dataclasses.fields(ProcessStatRecord)
    if field.name in RECORD_FIELDS and field.default is dataclasses.MISSING
)


@dataclass(slots=True, frozen=True)
class FieldSpec:
    """A named field and the kind its token decodes as."""

    name: str
    kind: NumericKind


@dataclass(slots=True, frozen=True)
class StatSchema:
    """An ordered, versioned list of the fields following the state code.

    The pid, comm and state fields lead every version of the record and are
    handled by the tokenizer, so they are not listed here. Fields that
    ProcessStatRecord does not name are decoded into its ``extra`` tuple.

    Raises:
        InvalidSchema: If a name repeats, shadows pid/comm/state/extra, or a
            required record field is missing.
    """

    version: str
    fields: tuple[FieldSpec, ...]

    def __post_init__(self) -> None:
        names = self.names
        repeated = sorted({name for name in names if names.count(name) > 1})
        if repeated:
            raise InvalidSchema(self.version, f"repeated fields {repeated}")
        reserved = sorted(set(names) & {*HEAD_FIELDS, EXTRA_FIELD})
        if reserved:
            raise InvalidSchema(self.version, f"reserved field names {reserved}")
        missing = [name for name in RECORD_FIELDS if name in REQUIRED_FIELDS and name not in names]
        if missing:
            raise InvalidSchema(self.version, f"missing fields {missing}")

    def __len__(self) -> int:
        return len(self.fields)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields)


PID_KIND = NumericKind.S32
STATE_KIND = NumericKind.CHAR

_U64 = NumericKind.U64
_S64 = NumericKind.S64
_S32 = NumericKind.S32
_UWORD = NumericKind.UWORD

# Linux 2.6.24 layout: fields 4 through 44 of proc(5).
STAT_SCHEMA = StatSchema(
    version="2.6.24",
    fields=(
        FieldSpec("ppid", _S32),
        FieldSpec("pgrp", _S32),
        FieldSpec("session", _S32),
        FieldSpec("tty_nr", _S32),
        FieldSpec("tpgid", _S32),
        FieldSpec("flags", _S64),
        FieldSpec("minflt", _S64),
        FieldSpec("cminflt", _U64),
        FieldSpec("majflt", _U64),
        FieldSpec("cmajflt", _U64),
        FieldSpec("utime", _U64),
        FieldSpec("stime", _U64),
        FieldSpec("cutime", _S64),
        FieldSpec("cstime", _S64),
        FieldSpec("priority", _S64),
        FieldSpec("nice", _S64),
        FieldSpec("num_threads", _U64),
        FieldSpec("itrealvalue", _U64),
        FieldSpec("starttime", _U64),
        FieldSpec("vsize", _U64),
        FieldSpec("rss", _U64),
        FieldSpec("rsslim", _U64),
        FieldSpec("startcode", _U64),
        FieldSpec("endcode", _U64),
        FieldSpec("startstack", _U64),
        FieldSpec("kstkesp", _U64),
        FieldSpec("kstkeip", _U64),
        FieldSpec("signal", _U64),
        FieldSpec("blocked", _U64),
        FieldSpec("sigignore", _U64),
        FieldSpec("sigcatch", _U64),
        FieldSpec("wchan", _U64),
        FieldSpec("nswap", _U64),
        FieldSpec("cnswap", _U64),
        FieldSpec("exit_signal", _S32),
        FieldSpec("processor", _S32),
        FieldSpec("rt_priority", _UWORD),
        FieldSpec("policy", _UWORD),
        FieldSpec("delayacct_blkio_ticks", _U64),
        FieldSpec("guest_time", _U64),
        FieldSpec("cguest_time", _S64),
    ),
)

# Linux 2.6.18 layout: no guest time fields yet.
STAT_SCHEMA_2_6_18 = StatSchema(version="2.6.18", fields=STAT_SCHEMA.fields[:-2])

# Linux 3.5 layout: fields 45 through 52 land in ProcessStatRecord.extra.
STAT_SCHEMA_3_5 = StatSchema(
    version="3.5",
    fields=STAT_SCHEMA.fields
    + (
        FieldSpec("start_data", _U64),
        FieldSpec("end_data", _U64),
        FieldSpec("start_brk", _U64),
        FieldSpec("arg_start", _U64),
        FieldSpec("arg_end", _U64),
        FieldSpec("env_start", _U64),
        FieldSpec("env_end", _U64),
        FieldSpec("exit_code", _S32),
    ),
)

SCHEMAS: dict[str, StatSchema] = {
    schema.version: schema for schema in (STAT_SCHEMA_2_6_18, STAT_SCHEMA, STAT_SCHEMA_3_5)
}
