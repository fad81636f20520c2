from dataclasses import dataclass

from tikey.core.models.fieldtype import TypeCode

MAX_FSP = 6

NANOS_PER_MICRO = 1_000
NANOS_PER_SECOND = 1_000_000_000
NANOS_PER_MINUTE = 60 * NANOS_PER_SECOND
NANOS_PER_HOUR = 60 * NANOS_PER_MINUTE


@dataclass(frozen=True, slots=True)
class Time:
    """
    A date/datetime/timestamp value unpacked from its 64-bit storage form.

    Packed layout (most significant first):

        ymdhms:40 = ((year * 13 + month) << 5 | day) << 17
                  | hour << 12 | minute << 6 | second
        microsecond:24
    """
    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    microsecond: int
    tp: int = TypeCode.DATETIME
    fsp: int = 0

    @classmethod
    def from_packed(cls, packed: int, tp: int = TypeCode.DATETIME, fsp: int = 0) -> "Time":
        ymdhms = packed >> 24
        ymd = ymdhms >> 17
        day = ymd & ((1 << 5) - 1)
        ym = ymd >> 5

        hms = ymdhms & ((1 << 17) - 1)
        second = hms & ((1 << 6) - 1)
        minute = (hms >> 6) & ((1 << 6) - 1)
        hour = hms >> 12

        return cls(
            year=ym // 13,
            month=ym % 13,
            day=day,
            hour=hour,
            minute=minute,
            second=second,
            microsecond=packed % (1 << 24),
            tp=tp,
            fsp=max(0, min(fsp, MAX_FSP)),
        )

    def __str__(self) -> str:
        date = f"{self.year:04d}-{self.month:02d}-{self.day:02d}"
        if self.tp == TypeCode.DATE:
            return date

        text = f"{date} {self.hour:02d}:{self.minute:02d}:{self.second:02d}"
        if self.fsp > 0:
            text += "." + f"{self.microsecond:06d}"[:self.fsp]
        return text


@dataclass(frozen=True, slots=True)
class Duration:
    """A signed time-of-day span stored as nanoseconds."""
    nanos: int
    fsp: int = MAX_FSP

    def __str__(self) -> str:
        sign = "-" if self.nanos < 0 else ""
        rest = abs(self.nanos)

        hours, rest = divmod(rest, NANOS_PER_HOUR)
        minutes, rest = divmod(rest, NANOS_PER_MINUTE)
        seconds, rest = divmod(rest, NANOS_PER_SECOND)
        micros = rest // NANOS_PER_MICRO

        text = f"{sign}{hours:02d}:{minutes:02d}:{seconds:02d}"
        fsp = max(0, min(self.fsp, MAX_FSP))
        if fsp > 0:
            text += "." + f"{micros:06d}"[:fsp]
        return text


@dataclass(frozen=True, slots=True)
class EnumValue:
    name: str
    value: int

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class SetValue:
    name: str
    value: int

    def __str__(self) -> str:
        return self.name


def parse_enum_value(elems: list[str], number: int) -> EnumValue:
    if number == 0 or number > len(elems):
        raise ValueError(f"invalid enum ordinal {number} for {len(elems)} elements")
    return EnumValue(name=elems[number - 1], value=number)


def parse_set_value(elems: list[str], number: int) -> SetValue:
    if number == 0:
        return SetValue(name="", value=0)

    if number >> len(elems):
        raise ValueError(f"invalid set value {number} for {len(elems)} elements")

    names = [elem for i, elem in enumerate(elems) if number & (1 << i)]
    return SetValue(name=",".join(names), value=number)


def binary_literal_from_uint(value: int, byte_size: int) -> bytes:
    """Big-endian bytes of ``value`` cut to ``byte_size`` (1 to 8)."""
    byte_size = max(1, min(byte_size, 8))
    return (value & ((1 << 64) - 1)).to_bytes(8, "big")[8 - byte_size:]
