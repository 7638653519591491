from __future__ import annotations

from typing import Any, Callable, Dict, NamedTuple, Optional

from provenance_api.services.byte_reader import ByteReader


class TagType(NamedTuple):
	name: str
	size: int
	read: Optional[Callable[[ByteReader, int], Any]]


# TIFF 6.0 field types. ASCII and UNDEFINED are read as raw byte runs.
TYPES: Dict[int, TagType] = {
	1: TagType("BYTE", 1, ByteReader.u8),
	2: TagType("ASCII", 1, None),
	3: TagType("SHORT", 2, ByteReader.u16),
	4: TagType("LONG", 4, ByteReader.u32),
	5: TagType("RATIONAL", 8, ByteReader.rational),
	6: TagType("SBYTE", 1, ByteReader.i8),
	7: TagType("UNDEFINED", 1, None),
	8: TagType("SSHORT", 2, ByteReader.i16),
	9: TagType("SLONG", 4, ByteReader.i32),
	10: TagType("SRATIONAL", 8, ByteReader.srational),
	11: TagType("FLOAT", 4, ByteReader.f32),
	12: TagType("DOUBLE", 8, ByteReader.f64),
}

ASCII = 2
UNDEFINED = 7


class Decoded(NamedTuple):
	value: Any = None
	error: Optional[str] = None

	@property
	def ok(self) -> bool:
		return self.error is None


def value_length(type_code: int, count: int) -> Optional[int]:
	tag_type = TYPES.get(type_code)
	if tag_type is None:
		return None
	return count * tag_type.size


def decode_ascii(raw: bytes) -> str:
	return raw.rstrip(b"\x00").decode("utf-8", errors="ignore")


def decode_value(type_code: int, count: int, field: bytes, block: ByteReader) -> Decoded:
	"""
	Decode one directory entry.

	`field` is the entry's 4-byte value/offset slot. Values of up to four bytes sit
	in the slot itself; anything longer lives at the offset the slot holds.
	"""
	tag_type = TYPES.get(type_code)
	if tag_type is None:
		return Decoded(error=f"unknown type code {type_code}")
	if len(field) != 4:
		return Decoded(error="value field must be 4 bytes")

	length = count * tag_type.size
	if length <= 4:
		source = ByteReader(field, block.order)
		start = 0
	else:
		source = block
		start = ByteReader(field, block.order).u32(0)
		if not source.in_bounds(start, length):
			return Decoded(error=f"{length} bytes at offset {start} exceed block of {len(block)}")

	if type_code == ASCII:
		return Decoded(decode_ascii(source.raw(start, length)))
	if type_code == UNDEFINED:
		return Decoded(source.raw(start, length))

	values = [tag_type.read(source, start + i * tag_type.size) for i in range(count)]
	if count == 1:
		return Decoded(values[0])
	return Decoded(values)
