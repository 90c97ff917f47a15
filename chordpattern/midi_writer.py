"""Append-only binary writer for Standard MIDI File chunks.

Keeps endianness and variable-length quantity (VLQ) encoding out of the event
logic in `chordpattern.midi_file`.

A VLQ splits an integer into 7-bit groups, most significant first, with the
high bit set on every byte except the last:

	```python
	encode_vlq(0)      # b"\\x00"
	encode_vlq(127)    # b"\\x7f"
	encode_vlq(128)    # b"\\x81\\x00"
	encode_vlq(16383)  # b"\\xff\\x7f"
	```
"""

import struct
import typing


# Largest value a four-byte VLQ can hold
MAX_VLQ = 0x0FFFFFFF


def encode_vlq (value: int) -> bytes:

	"""
	Encode a non-negative integer as a MIDI variable-length quantity.
	"""

	if value < 0:
		raise ValueError(f"VLQ value cannot be negative, got {value}")

	if value > MAX_VLQ:
		raise ValueError(f"VLQ value {value} exceeds maximum {MAX_VLQ}")

	groups = [value & 0x7F]
	value >>= 7

	while value:
		groups.append((value & 0x7F) | 0x80)
		value >>= 7

	return bytes(reversed(groups))


def decode_vlq (data: bytes, offset: int = 0) -> typing.Tuple[int, int]:

	"""Decode a variable-length quantity starting at ``offset``.

	Returns:
		Tuple of ``(value, next_offset)``.

	Raises:
		ValueError: If the data ends before the final (high bit clear) byte.
	"""

	value = 0

	for position in range(offset, len(data)):

		byte = data[position]
		value = (value << 7) | (byte & 0x7F)

		if not byte & 0x80:
			return value, position + 1

	raise ValueError(f"Truncated variable-length quantity at offset {offset}")


class BinaryWriter:

	"""
	Accumulates big-endian integers, ASCII tags, VLQs and raw bytes.
	"""

	def __init__ (self) -> None:

		self._buffer = bytearray()


	def __len__ (self) -> int:

		return len(self._buffer)


	def write_tag (self, tag: str) -> None:

		"""
		Write a four-character ASCII chunk tag such as ``"MThd"``.
		"""

		encoded = tag.encode("ascii")

		if len(encoded) != 4:
			raise ValueError(f"Chunk tag must be 4 ASCII characters, got {tag!r}")

		self._buffer += encoded


	def write_uint8 (self, value: int) -> None:

		self._write_struct(">B", value, 0xFF)


	def write_uint16 (self, value: int) -> None:

		self._write_struct(">H", value, 0xFFFF)


	def write_uint32 (self, value: int) -> None:

		self._write_struct(">I", value, 0xFFFFFFFF)


	def write_vlq (self, value: int) -> None:

		self._buffer += encode_vlq(value)


	def write_bytes (self, data: typing.Iterable[int]) -> None:

		self._buffer += bytes(data)


	def write_chunk (self, tag: str, payload: bytes) -> None:

		"""
		Write a complete chunk: tag, 32-bit length, then the payload.
		"""

		self.write_tag(tag)
		self.write_uint32(len(payload))
		self.write_bytes(payload)


	def getvalue (self) -> bytes:

		return bytes(self._buffer)


	def _write_struct (self, fmt: str, value: int, maximum: int) -> None:

		if not 0 <= value <= maximum:
			raise ValueError(f"Value {value} does not fit in {struct.calcsize(fmt)} bytes")

		self._buffer += struct.pack(fmt, value)
