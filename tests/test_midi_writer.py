import pytest

import chordpattern.midi_writer


@pytest.mark.parametrize("value, encoded", [
	(0, b"\x00"),
	(127, b"\x7f"),
	(128, b"\x81\x00"),
	(16383, b"\xff\x7f"),
	(16384, b"\x81\x80\x00"),
	(480, b"\x83\x60"),
	(0x0FFFFFFF, b"\xff\xff\xff\x7f"),
])
def test_vlq_literals (value: int, encoded: bytes) -> None:

	"""Known values encode to the standard byte sequences and decode back."""

	assert chordpattern.midi_writer.encode_vlq(value) == encoded
	assert chordpattern.midi_writer.decode_vlq(encoded) == (value, len(encoded))


def test_vlq_round_trip_across_group_boundaries () -> None:

	"""Values either side of each 7-bit boundary survive a round trip."""

	for shift in (7, 14, 21):
		for value in ((1 << shift) - 1, 1 << shift, (1 << shift) + 1):
			encoded = chordpattern.midi_writer.encode_vlq(value)
			assert chordpattern.midi_writer.decode_vlq(encoded)[0] == value
			assert all(byte & 0x80 for byte in encoded[:-1])
			assert not encoded[-1] & 0x80


def test_vlq_rejects_out_of_range () -> None:

	"""Negative values and values beyond four bytes are rejected."""

	with pytest.raises(ValueError):
		chordpattern.midi_writer.encode_vlq(-1)

	with pytest.raises(ValueError):
		chordpattern.midi_writer.encode_vlq(0x10000000)


def test_decode_vlq_offset_and_truncation () -> None:

	"""Decoding starts at the offset and fails on a missing final byte."""

	assert chordpattern.midi_writer.decode_vlq(b"\x00\x81\x00\x05", 1) == (128, 3)

	with pytest.raises(ValueError):
		chordpattern.midi_writer.decode_vlq(b"\x81\x80")


def test_writer_big_endian_fields () -> None:

	"""Integers are written big-endian at their fixed widths."""

	writer = chordpattern.midi_writer.BinaryWriter()
	writer.write_uint8(0x90)
	writer.write_uint16(480)
	writer.write_uint32(6)

	assert writer.getvalue() == b"\x90\x01\xe0\x00\x00\x00\x06"
	assert len(writer) == 7


def test_writer_range_checks () -> None:

	"""Values that do not fit their width raise ValueError."""

	writer = chordpattern.midi_writer.BinaryWriter()

	with pytest.raises(ValueError):
		writer.write_uint8(256)

	with pytest.raises(ValueError):
		writer.write_uint16(-1)

	with pytest.raises(ValueError):
		writer.write_tag("MTr")


def test_writer_chunk () -> None:

	"""A chunk is its tag, 32-bit payload length, then the payload."""

	writer = chordpattern.midi_writer.BinaryWriter()
	writer.write_chunk("MTrk", b"\x00\xff\x2f\x00")

	assert writer.getvalue() == b"MTrk\x00\x00\x00\x04\x00\xff\x2f\x00"
