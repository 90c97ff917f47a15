"""Pattern generators.

Each generator walks a `ChordProgression` with a time cursor that starts at
beat 0 and advances by every chord's duration, emitting `Note` events that
stay inside the chord's own span. The result is a `MidiPattern` ready for
`chordpattern.midi_file.encode()`.

Four algorithms are available:

- ``bass`` - chord root an octave down on every beat, accent on beat one.
- ``arpeggio`` - chord tones spread evenly across the chord (``up``, ``down`` or ``updown``).
- ``melody`` - a random rhythm cell filled with random chord tones.
- ``rhythm`` - a random rhythm cell with the whole chord struck on every slot.

All randomness is drawn from a single ``random.Random`` passed as ``rng``.
Pass a seeded instance (or ``seed=`` to `generate()`) for repeatable output:

	```python
	progression = parse_progression("C G Am F", key="C", tempo=120)
	a = generate(progression, "melody", seed=42)
	b = generate(progression, "melody", seed=42)
	assert a == b
	```
"""

import logging
import math
import random
import typing

import chordpattern.chords
import chordpattern.constants.velocity
import chordpattern.pattern
import chordpattern.progression


logger = logging.getLogger(__name__)

PATTERN_TYPES = ("bass", "arpeggio", "melody", "rhythm")
ARPEGGIO_STYLES = ("up", "down", "updown")

# Fraction of each slot that sounds, leaving a gap before the next note
BASS_GATE = 0.9
ARPEGGIO_GATE = 0.9
MELODY_GATE = 0.9
RHYTHM_GATE = 0.8

MELODY_MIN_NOTES = 2
MELODY_MAX_NOTES = 4

# Rhythm cells in beats
MELODY_RHYTHMS: typing.List[typing.List[float]] = [
	[1, 1, 1, 1],
	[2, 1, 1],
	[1, 2, 1],
	[0.5, 0.5, 1, 1, 1],
]

RHYTHM_PATTERNS: typing.List[typing.List[float]] = [
	[1, 1, 1, 1],
	[2, 2],
	[1, 0.5, 0.5, 1, 1],
	[0.5, 0.5, 0.5, 0.5, 2],
]


def _walk (progression: chordpattern.progression.ChordProgression) -> typing.Iterator[typing.Tuple[float, chordpattern.chords.Chord]]:

	"""
	Yield ``(start_beat, chord)`` for every chord that can produce events.
	"""

	cursor = 0.0

	for chord in progression.chords:

		if chord.duration <= 0:
			continue

		if chord.notes:
			yield cursor, chord

		cursor += chord.duration


def _jitter (rng: random.Random, base: int, spread: int) -> int:

	"""
	Return an integer velocity in ``[base, base + spread)``.
	"""

	return int(base + rng.random() * spread)


def _make_pattern (name: str, notes: typing.List[chordpattern.pattern.Note], progression: chordpattern.progression.ChordProgression) -> chordpattern.pattern.MidiPattern:

	logger.debug(f"{name}: {len(notes)} notes from {len(progression.chords)} chords")

	return chordpattern.pattern.MidiPattern(
		name = name,
		notes = tuple(notes),
		tempo = progression.tempo,
		time_signature = progression.time_signature,
		length_in_bars = len(progression.chords),
		key = progression.key
	)


def bass (progression: chordpattern.progression.ChordProgression, rng: typing.Optional[random.Random] = None, channel: int = 0) -> chordpattern.pattern.MidiPattern:

	"""Generate a quarter-note bass line on each chord root, one octave down.

	One note per whole beat of the chord, each lasting 0.9 beats. The first
	beat of every chord is accented (velocity 100), the rest play at 80.
	``rng`` is accepted for a uniform signature but not used.

	Raises:
		PitchRangeError: If a root is too low to transpose down an octave.
	"""

	notes: typing.List[chordpattern.pattern.Note] = []

	for start, chord in _walk(progression):

		pitch = chordpattern.chords.check_pitch(chord.root_note() - 12, f"bass note for {chord.name}")

		for beat in range(math.floor(chord.duration)):
			notes.append(chordpattern.pattern.Note(
				pitch = pitch,
				velocity = chordpattern.constants.velocity.BASS_ACCENT_VELOCITY if beat == 0 else chordpattern.constants.velocity.BASS_VELOCITY,
				start_time = start + beat,
				duration = BASS_GATE,
				channel = channel
			))

	return _make_pattern("Bass Line", notes, progression)


def arpeggio_order (pitches: typing.Sequence[int], style: str) -> typing.List[int]:

	"""Order chord tones for an arpeggio.

	Example:
		```python
		arpeggio_order([60, 64, 67], "up")      # [60, 64, 67]
		arpeggio_order([60, 64, 67], "down")    # [67, 64, 60]
		arpeggio_order([60, 64, 67], "updown")  # [60, 64, 67, 64]
		```
	"""

	if style == "up":
		return list(pitches)

	if style == "down":
		return list(reversed(pitches))

	if style == "updown":
		# [a, b, c] -> [a, b, c, b]: neither endpoint repeats.
		return list(pitches) + list(pitches[-2:0:-1])

	raise ValueError(f"Unknown arpeggio style {style!r}. Expected one of {ARPEGGIO_STYLES}")


def arpeggio (progression: chordpattern.progression.ChordProgression, style: str = "up", rng: typing.Optional[random.Random] = None, channel: int = 0) -> chordpattern.pattern.MidiPattern:

	"""Spread each chord's tones evenly across its duration.

	Every note lasts 90% of its slot, with velocity in the range 80-99.

	Parameters:
		progression: Source chords.
		style: ``"up"``, ``"down"`` or ``"updown"``.
		rng: Random source for velocity jitter.
		channel: MIDI channel (0-15).
	"""

	if style not in ARPEGGIO_STYLES:
		raise ValueError(f"Unknown arpeggio style {style!r}. Expected one of {ARPEGGIO_STYLES}")

	if rng is None:
		rng = random.Random()

	notes: typing.List[chordpattern.pattern.Note] = []

	for start, chord in _walk(progression):

		pitches = arpeggio_order(chord.notes, style)
		slot = chord.duration / len(pitches)

		for i, pitch in enumerate(pitches):
			notes.append(chordpattern.pattern.Note(
				pitch = pitch,
				velocity = _jitter(rng, chordpattern.constants.velocity.ARPEGGIO_VELOCITY_BASE, chordpattern.constants.velocity.ARPEGGIO_VELOCITY_RANGE),
				start_time = start + i * slot,
				duration = slot * ARPEGGIO_GATE,
				channel = channel
			))

	return _make_pattern(f"Arpeggio ({style})", notes, progression)


def melody (progression: chordpattern.progression.ChordProgression, rng: typing.Optional[random.Random] = None, channel: int = 0) -> chordpattern.pattern.MidiPattern:

	"""Generate a simple chord-tone melody.

	For each chord, pick a note cap (2-4) and a rhythm cell, then fill each
	slot with a random chord tone or the root an octave up. Slots stop once
	the cap is reached or the chord's time runs out; the last slot is
	clamped to the time that remains.
	"""

	if rng is None:
		rng = random.Random()

	notes: typing.List[chordpattern.pattern.Note] = []

	for start, chord in _walk(progression):

		pool = list(chord.notes) + [chordpattern.chords.check_pitch(chord.root_note() + 12, f"melody octave for {chord.name}")]
		max_notes = rng.randint(MELODY_MIN_NOTES, MELODY_MAX_NOTES)
		cell = rng.choice(MELODY_RHYTHMS)
		offset = 0.0

		for i, length in enumerate(cell):

			remaining = chord.duration - offset

			if i >= max_notes or remaining <= 0:
				break

			notes.append(chordpattern.pattern.Note(
				pitch = rng.choice(pool),
				velocity = _jitter(rng, chordpattern.constants.velocity.MELODY_VELOCITY_BASE, chordpattern.constants.velocity.MELODY_VELOCITY_RANGE),
				start_time = start + offset,
				duration = min(length, remaining) * MELODY_GATE,
				channel = channel
			))

			offset += length

	return _make_pattern("Melody", notes, progression)


def rhythm (progression: chordpattern.progression.ChordProgression, rng: typing.Optional[random.Random] = None, channel: int = 0) -> chordpattern.pattern.MidiPattern:

	"""Strike the whole chord on each slot of a random rhythm cell.

	Every note in a strike shares one velocity (75-89) and sounds for 80% of
	the slot, clamped to the chord's remaining time.
	"""

	if rng is None:
		rng = random.Random()

	notes: typing.List[chordpattern.pattern.Note] = []

	for start, chord in _walk(progression):

		cell = rng.choice(RHYTHM_PATTERNS)
		offset = 0.0

		for length in cell:

			remaining = chord.duration - offset

			if remaining <= 0:
				break

			velocity = _jitter(rng, chordpattern.constants.velocity.RHYTHM_VELOCITY_BASE, chordpattern.constants.velocity.RHYTHM_VELOCITY_RANGE)
			duration = min(length, remaining) * RHYTHM_GATE

			for pitch in chord.notes:
				notes.append(chordpattern.pattern.Note(
					pitch = pitch,
					velocity = velocity,
					start_time = start + offset,
					duration = duration,
					channel = channel
				))

			offset += length

	return _make_pattern("Rhythm Pattern", notes, progression)


def generate (
	progression: chordpattern.progression.ChordProgression,
	pattern_type: str,
	style: str = "up",
	rng: typing.Optional[random.Random] = None,
	seed: typing.Optional[int] = None,
	channel: int = 0
) -> chordpattern.pattern.MidiPattern:

	"""Run the generator named by ``pattern_type``.

	Parameters:
		progression: Source chords.
		pattern_type: One of ``"bass"``, ``"arpeggio"``, ``"melody"``, ``"rhythm"``.
		style: Arpeggio style, ignored by the other generators.
		rng: Random source. Takes precedence over ``seed``.
		seed: Seed for a new ``random.Random`` when ``rng`` is not given.
		channel: MIDI channel (0-15).

	Raises:
		ValueError: If the pattern type or arpeggio style is unknown.
	"""

	if rng is None:
		rng = random.Random(seed)

	if pattern_type == "bass":
		return bass(progression, rng=rng, channel=channel)

	if pattern_type == "arpeggio":
		return arpeggio(progression, style=style, rng=rng, channel=channel)

	if pattern_type == "melody":
		return melody(progression, rng=rng, channel=channel)

	if pattern_type == "rhythm":
		return rhythm(progression, rng=rng, channel=channel)

	raise ValueError(f"Unknown pattern type {pattern_type!r}. Expected one of {PATTERN_TYPES}")
