from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, NamedTuple, Optional, Tuple, Union

from provenance_api.services.byte_reader import ByteOrder, ByteReader
from provenance_api.services.container import RawBlock
from provenance_api.services.tags import IMAGE, NEXT_IFD, SUB_IFD_POINTERS, is_pointer, tag_name
from provenance_api.services.values import decode_value, value_length

logger = logging.getLogger(__name__)

EXIF_IDENTIFIER = b"Exif\x00\x00"
TIFF_MAGIC = 42
ENTRY_SIZE = 12

Namespaces = Dict[str, Dict[str, Any]]


@dataclass
class TagDictionary:
	"""Decoded tags keyed by namespace (Image, Photo, GPSInfo, Thumbnail, Iop) then tag name."""

	namespaces: Namespaces = field(default_factory=dict)
	byte_order: Optional[ByteOrder] = None

	def get(self, namespace: str) -> Dict[str, Any]:
		return self.namespaces.get(namespace, {})

	def is_empty(self) -> bool:
		return not any(self.namespaces.values())

	@property
	def big_endian(self) -> Optional[bool]:
		if self.byte_order is None:
			return None
		return self.byte_order is ByteOrder.BIG


class Directory(NamedTuple):
	values: Dict[str, Any]
	pointers: Dict[int, int]
	next_offset: int


def decode(block: Union[RawBlock, bytes]) -> TagDictionary:
	"""
	Parse a TIFF-structured EXIF block. Never raises for malformed input: a bad
	header yields an empty dictionary, bad entries or sub-directories are skipped.
	"""
	data = block.data if isinstance(block, RawBlock) else bytes(block)
	if data.startswith(EXIF_IDENTIFIER):
		data = data[len(EXIF_IDENTIFIER):]

	if len(data) < 8:
		logger.debug("EXIF block too short for a TIFF header (%d bytes)", len(data))
		return TagDictionary()
	order = ByteOrder.from_marker(data[:2])
	if order is None:
		logger.debug("Unrecognised byte order marker %r", data[:2])
		return TagDictionary()
	reader = ByteReader(data, order)
	if reader.u16(2) != TIFF_MAGIC:
		logger.debug("TIFF magic mismatch: %d", reader.u16(2))
		return TagDictionary()

	# Out-of-line values may overlap, so cap the bytes decoded at the block size.
	namespaces, _, _ = _walk(reader, reader.u32(4), IMAGE, {}, frozenset(), len(reader))
	return TagDictionary(namespaces, order)


def _walk(
	reader: ByteReader,
	offset: int,
	namespace: str,
	acc: Namespaces,
	visited: FrozenSet[int],
	budget: int,
) -> Tuple[Namespaces, FrozenSet[int], int]:
	if offset in visited:
		logger.debug("IFD cycle at offset %d (%s)", offset, namespace)
		return acc, visited, budget
	visited = visited | {offset}

	directory, budget = read_directory(reader, offset, namespace, budget)
	if directory is None:
		return acc, visited, budget

	result = dict(acc)
	if directory.values:
		result[namespace] = {**acc.get(namespace, {}), **directory.values}

	for tag_id, child in SUB_IFD_POINTERS.get(namespace, {}).items():
		pointer = directory.pointers.get(tag_id)
		if pointer:
			result, visited, budget = _walk(reader, pointer, child, result, visited, budget)

	chained = NEXT_IFD.get(namespace)
	if chained and directory.next_offset:
		result, visited, budget = _walk(reader, directory.next_offset, chained, result, visited, budget)
	return result, visited, budget


def read_directory(
	reader: ByteReader,
	offset: int,
	namespace: str,
	budget: int,
) -> Tuple[Optional[Directory], int]:
	"""
	Read one IFD. Returns None when the entry count itself is out of range.
	`budget` is the number of out-of-line bytes still allowed; the remainder is returned.
	"""
	if not reader.in_bounds(offset, 2):
		logger.debug("%s IFD offset %d outside block", namespace, offset)
		return None, budget

	count = reader.u16(offset)
	values: Dict[str, Any] = {}
	pointers: Dict[int, int] = {}
	position = offset + 2
	for _ in range(count):
		if not reader.in_bounds(position, ENTRY_SIZE):
			logger.debug("%s IFD truncated after %d entries", namespace, len(values) + len(pointers))
			return Directory(values, pointers, 0), budget
		tag_id = reader.u16(position)
		type_code = reader.u16(position + 2)
		item_count = reader.u32(position + 4)
		field_bytes = reader.raw(position + 8, 4)
		position += ENTRY_SIZE

		if is_pointer(namespace, tag_id):
			pointers[tag_id] = reader.u32(position - 4)
			continue
		length = value_length(type_code, item_count)
		if length is not None and length > 4:
			if length > budget:
				logger.debug("Skipping %s tag 0x%04X: %d bytes exceed remaining budget %d", namespace, tag_id, length, budget)
				continue
		decoded = decode_value(type_code, item_count, field_bytes, reader)
		if not decoded.ok:
			logger.debug("Skipping %s tag 0x%04X: %s", namespace, tag_id, decoded.error)
			continue
		if length is not None and length > 4:
			budget -= length
		values[tag_name(namespace, tag_id)] = decoded.value

	next_offset = reader.u32(position) if reader.in_bounds(position, 4) else 0
	return Directory(values, pointers, next_offset), budget
