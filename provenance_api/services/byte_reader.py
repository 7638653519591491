from __future__ import annotations

import struct
from enum import Enum
from typing import NamedTuple, Optional


class TruncatedDataError(ValueError):
	"""Raised when a read would run past the end of the buffer."""


class ByteOrder(str, Enum):
	BIG = "MM"
	LITTLE = "II"

	@property
	def prefix(self) -> str:
		return ">" if self is ByteOrder.BIG else "<"

	@classmethod
	def from_marker(cls, marker: bytes) -> Optional["ByteOrder"]:
		try:
			return cls(marker.decode("ascii"))
		except (UnicodeDecodeError, ValueError):
			return None


class Rational(NamedTuple):
	numerator: int
	denominator: int

	@property
	def value(self) -> Optional[float]:
		if not self.denominator:
			return None
		return self.numerator / self.denominator


class ByteReader:
	"""
	Bounds-checked view over an immutable byte string.
	Every multi-byte read uses the byte order fixed at construction.
	"""

	def __init__(self, data: bytes, order: ByteOrder = ByteOrder.BIG):
		self.data = bytes(data)
		self.order = order

	def __len__(self) -> int:
		return len(self.data)

	def in_bounds(self, offset: int, length: int) -> bool:
		return offset >= 0 and length >= 0 and offset + length <= len(self.data)

	def _unpack(self, fmt: str, offset: int):
		size = struct.calcsize(fmt)
		if not self.in_bounds(offset, size):
			raise TruncatedDataError(f"read of {size} bytes at offset {offset} exceeds buffer of {len(self.data)}")
		return struct.unpack_from(self.order.prefix + fmt, self.data, offset)[0]

	def u8(self, offset: int) -> int:
		return self._unpack("B", offset)

	def i8(self, offset: int) -> int:
		return self._unpack("b", offset)

	def u16(self, offset: int) -> int:
		return self._unpack("H", offset)

	def i16(self, offset: int) -> int:
		return self._unpack("h", offset)

	def u32(self, offset: int) -> int:
		return self._unpack("I", offset)

	def i32(self, offset: int) -> int:
		return self._unpack("i", offset)

	def f32(self, offset: int) -> float:
		return self._unpack("f", offset)

	def f64(self, offset: int) -> float:
		return self._unpack("d", offset)

	def rational(self, offset: int) -> Rational:
		return Rational(self.u32(offset), self.u32(offset + 4))

	def srational(self, offset: int) -> Rational:
		return Rational(self.i32(offset), self.i32(offset + 4))

	def raw(self, offset: int, length: int) -> bytes:
		if not self.in_bounds(offset, length):
			raise TruncatedDataError(f"read of {length} bytes at offset {offset} exceeds buffer of {len(self.data)}")
		return self.data[offset:offset + length]
