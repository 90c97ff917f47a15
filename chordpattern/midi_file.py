"""Standard MIDI File encoding.

Serializes a `MidiPattern` as a format 0 (single track) Standard MIDI File:

1. ``MThd`` header: length 6, format 0, one track, division = PPQ.
2. ``MTrk`` track: tempo and time-signature meta events at tick 0, a note-on
   and note-off per note, then end-of-track one quarter note after the last
   event. Each event is preceded by its delta time as a VLQ.

Events are ordered by absolute tick. At equal ticks, meta events come first,
then note-offs, then note-ons, so a note that ends exactly where the same
pitch starts again is released before it is re-struck.

Channel and meta message bytes come from ``mido``; chunk layout and delta
times are written by `chordpattern.midi_writer.BinaryWriter`.

Example:
	```python
	pattern = generate(progression, "bass")
	data = encode(pattern)           # raw bytes
	blob = encode_base64(pattern)    # text-safe for JSON responses
	save(pattern, "bass.mid")
	```
"""

import base64
import dataclasses
import logging
import pathlib
import typing

import mido

import chordpattern.constants.pulses
import chordpattern.midi_writer
import chordpattern.pattern
import chordpattern.progression


logger = logging.getLogger(__name__)

PPQ = chordpattern.constants.pulses.PPQ

SMF_FORMAT = 0

# Sort priority at equal ticks
PRIORITY_META = 0
PRIORITY_NOTE_OFF = 1
PRIORITY_NOTE_ON = 2


@dataclasses.dataclass(frozen=True)
class TrackEvent:

	"""
	A raw track event at an absolute tick.
	"""

	tick: int
	priority: int
	data: bytes


def beats_to_ticks (beats: float, ppq: int = PPQ) -> int:

	"""
	Convert a beat position to the nearest tick.
	"""

	return int(round(beats * ppq))


def tempo_event (bpm: float) -> TrackEvent:

	"""
	Build the tempo meta event (``FF 51 03`` + microseconds per quarter note).
	"""

	message = mido.MetaMessage("set_tempo", tempo=mido.bpm2tempo(bpm))

	return TrackEvent(tick=0, priority=PRIORITY_META, data=bytes(message.bytes()))


def time_signature_event (time_signature: str) -> TrackEvent:

	"""
	Build the time-signature meta event (``FF 58 04 nn dd cc bb``).
	"""

	signature = chordpattern.progression.TimeSignature.parse(time_signature)

	message = mido.MetaMessage(
		"time_signature",
		numerator = signature.numerator,
		denominator = signature.denominator,
		clocks_per_click = chordpattern.constants.pulses.MIDI_CLOCKS_PER_CLICK,
		notated_32nd_notes_per_beat = chordpattern.constants.pulses.NOTATED_32ND_NOTES_PER_BEAT
	)

	return TrackEvent(tick=0, priority=PRIORITY_META, data=bytes(message.bytes()))


def note_events (note: chordpattern.pattern.Note, ppq: int = PPQ) -> typing.Tuple[TrackEvent, TrackEvent]:

	"""
	Build the note-on and note-off events for a single note.
	"""

	note_on = mido.Message("note_on", channel=note.channel, note=note.pitch, velocity=note.velocity)
	note_off = mido.Message("note_off", channel=note.channel, note=note.pitch, velocity=0)

	on_tick = beats_to_ticks(note.start_time, ppq)

	# A note shorter than one tick still sounds for one tick, so its off never sorts ahead of its on
	off_tick = max(beats_to_ticks(note.end_time, ppq), on_tick + 1)

	return (
		TrackEvent(tick=on_tick, priority=PRIORITY_NOTE_ON, data=bytes(note_on.bytes())),
		TrackEvent(tick=off_tick, priority=PRIORITY_NOTE_OFF, data=bytes(note_off.bytes())),
	)


def build_events (pattern: chordpattern.pattern.MidiPattern, ppq: int = PPQ) -> typing.List[TrackEvent]:

	"""Return every track event except end-of-track, sorted by tick.

	The sort is stable, so events with the same tick and priority keep the
	order in which the notes appear in the pattern.
	"""

	events = [
		tempo_event(pattern.tempo),
		time_signature_event(pattern.time_signature),
	]

	for note in pattern.notes:
		events.extend(note_events(note, ppq))

	events.sort(key=lambda event: (event.tick, event.priority))

	return events


def encode (pattern: chordpattern.pattern.MidiPattern, ppq: int = PPQ) -> bytes:

	"""Encode a pattern as Standard MIDI File bytes.

	Parameters:
		pattern: Notes and metadata to write.
		ppq: Ticks per quarter note, written as the header division.

	Returns:
		Header chunk followed by a single track chunk.
	"""

	# Division values with the top bit set mean SMPTE timing
	if not 0 < ppq < 0x8000:
		raise ValueError(f"PPQ must be between 1 and 32767, got {ppq}")

	events = build_events(pattern, ppq)

	track = chordpattern.midi_writer.BinaryWriter()
	last_tick = 0

	for event in events:
		track.write_vlq(event.tick - last_tick)
		track.write_bytes(event.data)
		last_tick = event.tick

	# End of track, one quarter note after the last event
	track.write_vlq(ppq)
	track.write_bytes(mido.MetaMessage("end_of_track").bytes())

	writer = chordpattern.midi_writer.BinaryWriter()

	header = chordpattern.midi_writer.BinaryWriter()
	header.write_uint16(SMF_FORMAT)
	header.write_uint16(1)
	header.write_uint16(ppq)

	writer.write_chunk("MThd", header.getvalue())
	writer.write_chunk("MTrk", track.getvalue())

	data = writer.getvalue()

	logger.debug(f"Encoded {pattern.name!r}: {pattern.note_count} notes, {len(events) + 1} events, {len(data)} bytes")

	return data


def encode_base64 (pattern: chordpattern.pattern.MidiPattern, ppq: int = PPQ) -> str:

	"""
	Encode a pattern and return the file as an ASCII base64 string.
	"""

	return base64.b64encode(encode(pattern, ppq)).decode("ascii")


def save (pattern: chordpattern.pattern.MidiPattern, filename: typing.Union[str, pathlib.Path], ppq: int = PPQ) -> None:

	"""
	Encode a pattern and write it to ``filename``.
	"""

	path = pathlib.Path(filename)
	path.write_bytes(encode(pattern, ppq))

	logger.info(f"Saved {path}")
