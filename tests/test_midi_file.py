import base64
import io
import pathlib
import random
import typing

import mido
import pytest

import chordpattern.generators
import chordpattern.midi_file
import chordpattern.midi_writer
import chordpattern.pattern
import chordpattern.progression


def _pattern (notes: typing.Sequence[chordpattern.pattern.Note], tempo: float = 120, time_signature: str = "4/4") -> chordpattern.pattern.MidiPattern:

	return chordpattern.pattern.MidiPattern(
		name = "Test",
		notes = tuple(notes),
		tempo = tempo,
		time_signature = time_signature,
		length_in_bars = 1,
		key = "C"
	)


def _read (data: bytes) -> mido.MidiFile:

	return mido.MidiFile(file=io.BytesIO(data))


def _absolute (track: mido.MidiTrack) -> typing.List[typing.Tuple[int, typing.Union[mido.Message, mido.MetaMessage]]]:

	tick = 0
	result = []

	for message in track:
		tick += message.time
		result.append((tick, message))

	return result


def test_header_is_exact () -> None:

	"""The first 14 bytes are MThd, length 6, format 0, one track, 480 PPQ."""

	data = chordpattern.midi_file.encode(_pattern([]))

	assert data[:14] == b"MThd\x00\x00\x00\x06\x00\x00\x00\x01\x01\xe0"


def test_header_uses_configured_ppq () -> None:

	"""The division field reflects a custom resolution."""

	data = chordpattern.midi_file.encode(_pattern([]), ppq=96)

	assert data[12:14] == b"\x00\x60"


def test_invalid_ppq () -> None:

	"""Resolutions that are not positive 15-bit values are rejected."""

	with pytest.raises(ValueError):
		chordpattern.midi_file.encode(_pattern([]), ppq=0)

	with pytest.raises(ValueError):
		chordpattern.midi_file.encode(_pattern([]), ppq=0x8000)


def test_empty_pattern_bytes () -> None:

	"""An empty pattern encodes tempo, time signature and end of track only."""

	data = chordpattern.midi_file.encode(_pattern([]))

	track = (
		b"\x00\xff\x51\x03\x07\xa1\x20"
		b"\x00\xff\x58\x04\x04\x02\x18\x08"
		b"\x83\x60\xff\x2f\x00"
	)

	assert data[14:] == b"MTrk" + len(track).to_bytes(4, "big") + track


def test_empty_pattern_is_readable () -> None:

	"""mido reads the minimal file back."""

	midi = _read(chordpattern.midi_file.encode(_pattern([])))

	assert midi.type == 0
	assert midi.ticks_per_beat == 480
	assert [message.type for message in midi.tracks[0]] == ["set_tempo", "time_signature", "end_of_track"]


def test_tempo_and_time_signature () -> None:

	"""Tempo becomes microseconds per quarter; the denominator is stored as a power of two."""

	midi = _read(chordpattern.midi_file.encode(_pattern([], tempo=90, time_signature="6/8")))
	tempo, signature = midi.tracks[0][0], midi.tracks[0][1]

	assert tempo.tempo == mido.bpm2tempo(90) == 666667
	assert signature.numerator == 6
	assert signature.denominator == 8
	assert signature.clocks_per_click == 24
	assert signature.notated_32nd_notes_per_beat == 8


def test_note_ticks () -> None:

	"""Notes become note-on and note-off events at rounded ticks."""

	note = chordpattern.pattern.Note(pitch=60, velocity=100, start_time=1.5, duration=0.9, channel=2)
	midi = _read(chordpattern.midi_file.encode(_pattern([note])))

	events = [(tick, message) for tick, message in _absolute(midi.tracks[0]) if not message.is_meta]

	assert [(tick, message.type, message.note, message.velocity, message.channel) for tick, message in events] == [
		(720, "note_on", 60, 100, 2),
		(1152, "note_off", 60, 0, 2),
	]


def test_end_of_track_one_quarter_after_last_event () -> None:

	"""End of track sits PPQ ticks after the final note-off."""

	note = chordpattern.pattern.Note(pitch=60, velocity=100, start_time=0, duration=2)
	events = _absolute(_read(chordpattern.midi_file.encode(_pattern([note]))).tracks[0])

	assert events[-1][1].type == "end_of_track"
	assert events[-1][0] == 960 + 480


def test_note_off_before_note_on_at_same_tick () -> None:

	"""A repeated pitch is released before it is struck again."""

	notes = [
		chordpattern.pattern.Note(pitch=60, velocity=100, start_time=0, duration=1),
		chordpattern.pattern.Note(pitch=60, velocity=90, start_time=1, duration=1),
	]

	events = chordpattern.midi_file.build_events(_pattern(notes))
	at_beat_one = [event for event in events if event.tick == 480]

	assert [event.data for event in at_beat_one] == [b"\x80\x3c\x00", b"\x90\x3c\x5a"]


def test_sub_tick_note_lasts_one_tick () -> None:

	"""A note shorter than one tick is released one tick after it is struck, never before."""

	note = chordpattern.pattern.Note(pitch=60, velocity=100, start_time=0, duration=0.0005)
	events = chordpattern.midi_file.build_events(_pattern([note]))
	notes = [(event.tick, event.data) for event in events if event.priority != chordpattern.midi_file.PRIORITY_META]

	assert notes == [(0, b"\x90\x3c\x64"), (1, b"\x80\x3c\x00")]

	decoded = [(tick, message.type) for tick, message in _absolute(_read(chordpattern.midi_file.encode(_pattern([note]))).tracks[0]) if not message.is_meta]

	assert decoded == [(0, "note_on"), (1, "note_off")]


def test_coarse_resolution_keeps_every_note_on_before_its_off () -> None:

	"""At one tick per beat, generated short notes still pair each note-on with a later note-off."""

	progression = chordpattern.progression.parse_progression("C G Am F", key="C", tempo=120)
	pattern = chordpattern.generators.arpeggio(progression, style="updown", rng=random.Random(3))
	events = _absolute(_read(chordpattern.midi_file.encode(pattern, ppq=1)).tracks[0])

	sounding: typing.Dict[int, int] = {}

	for tick, message in events:

		if message.type == "note_on":
			assert message.note not in sounding
			sounding[message.note] = tick

		elif message.type == "note_off":
			assert tick > sounding.pop(message.note)

	assert not sounding


def test_unsorted_notes_are_sorted () -> None:

	"""Events are written in tick order whatever the note order."""

	notes = [
		chordpattern.pattern.Note(pitch=67, velocity=100, start_time=3, duration=1),
		chordpattern.pattern.Note(pitch=60, velocity=100, start_time=0, duration=4),
		chordpattern.pattern.Note(pitch=64, velocity=100, start_time=1, duration=0.5),
	]

	ticks = [tick for tick, _ in _absolute(_read(chordpattern.midi_file.encode(_pattern(notes))).tracks[0])]

	assert ticks == sorted(ticks)


@pytest.mark.parametrize("pattern_type", chordpattern.generators.PATTERN_TYPES)
def test_generated_patterns_decode_in_order (pattern_type: str) -> None:

	"""Every generator's output decodes with non-decreasing ticks and matching note counts."""

	progression = chordpattern.progression.parse_progression("Cmaj7 Am7 Dm7 G7 Cadd9", key="C", tempo=128)
	pattern = chordpattern.generators.generate(progression, pattern_type, style="updown", seed=21)

	midi = _read(chordpattern.midi_file.encode(pattern))
	events = _absolute(midi.tracks[0])
	ticks = [tick for tick, _ in events]

	assert ticks == sorted(ticks)
	assert sum(1 for _, message in events if message.type == "note_on") == pattern.note_count
	assert sum(1 for _, message in events if message.type == "note_off") == pattern.note_count


def test_track_length_matches_payload () -> None:

	"""The MTrk length field equals the bytes that follow it."""

	progression = chordpattern.progression.parse_progression("C G Am F", key="C", tempo=120)
	data = chordpattern.midi_file.encode(chordpattern.generators.bass(progression))

	assert data[14:18] == b"MTrk"
	assert int.from_bytes(data[18:22], "big") == len(data) - 22


def test_delta_times_are_vlq () -> None:

	"""Walking the track with decode_vlq lands exactly on the end of track event."""

	note = chordpattern.pattern.Note(pitch=48, velocity=100, start_time=40, duration=1)
	data = chordpattern.midi_file.encode(_pattern([note]))
	track = data[22:]

	offset = 0
	deltas = []
	sizes = {0x90: 2, 0x80: 2}

	while offset < len(track):
		delta, offset = chordpattern.midi_writer.decode_vlq(track, offset)
		deltas.append(delta)
		status = track[offset]

		if status == 0xFF:
			length = track[offset + 2]
			offset += 3 + length
		else:
			offset += 1 + sizes[status & 0xF0]

	assert deltas == [0, 0, 19200, 480, 480]
	assert offset == len(track)


def test_base64_and_save (tmp_path: pathlib.Path) -> None:

	"""The base64 blob and the saved file hold the encoded bytes."""

	pattern = _pattern([chordpattern.pattern.Note(pitch=60, velocity=100, start_time=0, duration=1)])
	data = chordpattern.midi_file.encode(pattern)

	assert base64.b64decode(chordpattern.midi_file.encode_base64(pattern)) == data

	path = tmp_path / "pattern.mid"
	chordpattern.midi_file.save(pattern, path)

	assert path.read_bytes() == data
	assert len(mido.MidiFile(str(path)).tracks) == 1
