"""Chord progressions and time signatures.

A `ChordProgression` is built once from a whitespace-separated string of chord
symbols and never changes afterwards. Every chord lasts one bar, measured as
the time-signature numerator in beats.

Example:
	```python
	progression = parse_progression("Cmaj7 Am7 Dm7 G7", key="C", tempo=120)
	progression.total_beats  # → 16
	```
"""

import dataclasses
import logging
import re
import typing

import mido

import chordpattern.chords


logger = logging.getLogger(__name__)

DEFAULT_OCTAVE = 4
DEFAULT_TIME_SIGNATURE = "4/4"

# Microseconds per quarter note is stored in three bytes
MAX_MIDI_TEMPO = 0xFFFFFF

_TIME_SIGNATURE_RE = re.compile(r"^\s*(\d+)\s*/\s*(\d+)\s*$")


@dataclasses.dataclass(frozen=True)
class TimeSignature:

	"""
	A time signature such as 4/4 or 6/8. The denominator must be a power of two.
	"""

	numerator: int
	denominator: int


	def __post_init__ (self) -> None:

		# The time-signature meta event stores the numerator in one byte
		if not 0 < self.numerator <= 255:
			raise chordpattern.chords.ParseError(f"Time signature numerator must be 1-255, got {self.numerator}")

		if self.denominator <= 0 or self.denominator & (self.denominator - 1):
			raise chordpattern.chords.ParseError(f"Time signature denominator must be a power of two, got {self.denominator}")


	@classmethod
	def parse (cls, text: str) -> "TimeSignature":

		"""
		Parse an ``"N/D"`` string.
		"""

		match = _TIME_SIGNATURE_RE.match(text)

		if match is None:
			raise chordpattern.chords.ParseError(f"Invalid time signature: {text!r}")

		return cls(numerator=int(match.group(1)), denominator=int(match.group(2)))


	@property
	def denominator_power (self) -> int:

		"""
		The denominator expressed as a power of two (4 → 2, 8 → 3).
		"""

		return self.denominator.bit_length() - 1


	def __str__ (self) -> str:

		return f"{self.numerator}/{self.denominator}"


@dataclasses.dataclass(frozen=True)
class ChordProgression:

	"""
	An ordered, immutable sequence of chords plus the metadata patterns inherit.
	"""

	chords: typing.Tuple[chordpattern.chords.Chord, ...]
	key: str
	time_signature: str
	tempo: float


	@property
	def beats_per_bar (self) -> int:

		return TimeSignature.parse(self.time_signature).numerator


	@property
	def total_beats (self) -> float:

		"""
		Sum of all positive chord durations.
		"""

		return sum(chord.duration for chord in self.chords if chord.duration > 0)


def check_tempo (tempo: float) -> float:

	"""
	Return ``tempo`` unchanged, or raise ``ValueError`` if it cannot be written as a MIDI tempo event.
	"""

	if tempo <= 0:
		raise ValueError(f"Tempo must be positive, got {tempo}")

	if mido.bpm2tempo(tempo) > MAX_MIDI_TEMPO:
		raise ValueError(f"Tempo {tempo} BPM is too slow: a quarter note must last at most {MAX_MIDI_TEMPO} microseconds")

	return tempo


def parse_progression (
	text: str,
	key: str,
	tempo: float,
	time_signature: str = DEFAULT_TIME_SIGNATURE,
	octave: int = DEFAULT_OCTAVE,
	strict: bool = False
) -> ChordProgression:

	"""Parse a chord progression string such as ``"C G Am F"``.

	Parameters:
		text: Whitespace-separated chord symbols. Blank text gives an empty progression.
		key: Free-form key label, carried through to pattern metadata only.
		tempo: Beats per minute, must be positive.
		time_signature: ``"N/D"`` string; each chord lasts N beats.
		octave: Octave at which chords are built.
		strict: Reject unknown chord suffixes instead of assuming major.

	Raises:
		ParseError: If any chord symbol or the time signature is malformed.
			No partial progression is returned.
		PitchRangeError: If a chord does not fit in the MIDI range at ``octave``.
		ValueError: If the tempo is not positive or too slow for a MIDI tempo event.
	"""

	check_tempo(tempo)

	signature = TimeSignature.parse(time_signature)

	chords = tuple(
		chordpattern.chords.create_chord(token, duration=signature.numerator, octave=octave, strict=strict)
		for token in text.split()
	)

	logger.debug(f"Parsed {len(chords)} chords in {signature} at {tempo} BPM")

	return ChordProgression(
		chords = chords,
		key = key,
		time_signature = str(signature),
		tempo = tempo
	)
