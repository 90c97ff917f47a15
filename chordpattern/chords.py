"""Chord parsing and construction.

This module turns chord symbols such as ``"Cmaj7"`` or ``"F#m7b5"`` into a root
pitch class and a `Quality`, and materializes a `Chord` of absolute MIDI
pitches at a chosen octave.

Module-level constants:
- `NOTE_NAME_TO_PC`: Maps note names (e.g., `"C"`, `"F#"`, `"Bb"`) to pitch classes (0-11)
- `PC_TO_NOTE_NAME`: Maps pitch classes to note names
- `CHORD_INTERVALS`: Maps each `Quality` to its semitone offsets from the root
- `QUALITY_ALIASES`: Maps lower-case chord suffixes to a `Quality`

Unknown suffixes fall back to major unless ``strict=True`` is passed, in which
case they raise `ParseError` like any other malformed token.
"""

import dataclasses
import enum
import logging
import re
import typing


logger = logging.getLogger(__name__)


MIN_PITCH = 0
MAX_PITCH = 127


class ParseError (ValueError):

	"""
	A chord symbol, note name or time signature could not be parsed.
	"""


class PitchRangeError (ValueError):

	"""
	A computed MIDI pitch fell outside 0-127.
	"""


class Quality (str, enum.Enum):

	"""
	The harmonic category of a chord.
	"""

	MAJOR = "major"
	MINOR = "minor"
	DIMINISHED = "diminished"
	AUGMENTED = "augmented"
	MAJOR7 = "major7"
	MINOR7 = "minor7"
	DOMINANT7 = "dominant7"
	MINOR7B5 = "minor7b5"
	SUS2 = "sus2"
	SUS4 = "sus4"
	ADD9 = "add9"
	SIXTH = "6"
	MINOR6 = "minor6"


NOTE_NAME_TO_PC: typing.Dict[str, int] = {
	"C": 0,
	"C#": 1,
	"Db": 1,
	"D": 2,
	"D#": 3,
	"Eb": 3,
	"E": 4,
	"F": 5,
	"F#": 6,
	"Gb": 6,
	"G": 7,
	"G#": 8,
	"Ab": 8,
	"A": 9,
	"A#": 10,
	"Bb": 10,
	"B": 11,
}

PC_TO_NOTE_NAME: typing.List[str] = [
	"C",
	"C#",
	"D",
	"D#",
	"E",
	"F",
	"F#",
	"G",
	"G#",
	"A",
	"A#",
	"B",
]

CHORD_INTERVALS: typing.Dict[Quality, typing.List[int]] = {
	Quality.MAJOR: [0, 4, 7],
	Quality.MINOR: [0, 3, 7],
	Quality.DIMINISHED: [0, 3, 6],
	Quality.AUGMENTED: [0, 4, 8],
	Quality.MAJOR7: [0, 4, 7, 11],
	Quality.MINOR7: [0, 3, 7, 10],
	Quality.DOMINANT7: [0, 4, 7, 10],
	Quality.MINOR7B5: [0, 3, 6, 10],
	Quality.SUS2: [0, 2, 7],
	Quality.SUS4: [0, 5, 7],
	Quality.ADD9: [0, 4, 7, 14],		# the ninth sits above the octave
	Quality.SIXTH: [0, 4, 7, 9],
	Quality.MINOR6: [0, 3, 7, 9],
}

QUALITY_ALIASES: typing.Dict[str, Quality] = {
	"": Quality.MAJOR,
	"maj": Quality.MAJOR,
	"m": Quality.MINOR,
	"min": Quality.MINOR,
	"dim": Quality.DIMINISHED,
	"aug": Quality.AUGMENTED,
	"maj7": Quality.MAJOR7,
	"m7": Quality.MINOR7,
	"min7": Quality.MINOR7,
	"7": Quality.DOMINANT7,
	"m7b5": Quality.MINOR7B5,
	"sus2": Quality.SUS2,
	"sus4": Quality.SUS4,
	"add9": Quality.ADD9,
	"6": Quality.SIXTH,
	"m6": Quality.MINOR6,
}

_CHORD_RE = re.compile(r"^([A-G][#b]?)(.*)$")
_NOTE_NAME_RE = re.compile(r"^([A-G][#b]?)(-?\d+)$")


@dataclasses.dataclass(frozen=True)
class Chord:

	"""
	A chord symbol materialized at a specific octave.

	``notes[0]`` is always the root in its chosen octave.
	"""

	name: str
	root: int
	quality: Quality
	notes: typing.Tuple[int, ...]
	duration: float


	def root_note (self) -> int:

		"""
		Return the MIDI note number of the chord root.
		"""

		return self.notes[0]


def parse_chord (token: str, strict: bool = False) -> typing.Tuple[int, Quality]:

	"""Split a chord symbol into its root pitch class and quality.

	Parameters:
		token: Chord symbol, e.g. ``"C"``, ``"Am7"``, ``"Bbmaj7"``, ``"F#m7b5"``.
		strict: Raise on unrecognised suffixes instead of assuming major.

	Returns:
		Tuple of ``(root_pc, quality)``.

	Raises:
		ParseError: If the token is empty, the root letter is not A-G, or
			(in strict mode) the suffix is unknown.

	Example:
		```python
		parse_chord("Cmaj7")  # → (0, Quality.MAJOR7)
		parse_chord("Db")     # → (1, Quality.MAJOR)
		parse_chord("Cxyz")   # → (0, Quality.MAJOR)  - permissive fallback
		```
	"""

	match = _CHORD_RE.match(token.strip()) if token else None

	if match is None:
		raise ParseError(f"Invalid chord name: {token!r}")

	root_name, suffix = match.groups()

	if root_name not in NOTE_NAME_TO_PC:
		raise ParseError(f"Invalid root note {root_name!r} in chord {token!r}")

	quality = QUALITY_ALIASES.get(suffix.lower())

	if quality is None:

		if strict:
			raise ParseError(f"Unknown chord quality {suffix!r} in chord {token!r}")

		logger.warning(f"Unknown chord quality {suffix!r} in {token!r} - using major")
		quality = Quality.MAJOR

	return NOTE_NAME_TO_PC[root_name], quality


def chord_intervals (quality: Quality) -> typing.List[int]:

	"""
	Return the semitone offsets for a chord quality.
	"""

	if quality not in CHORD_INTERVALS:
		raise ValueError(f"Unknown chord quality: {quality}")

	return list(CHORD_INTERVALS[quality])


def check_pitch (pitch: int, context: str) -> int:

	"""
	Return ``pitch`` unchanged, or raise `PitchRangeError` if it is not a valid MIDI note.
	"""

	if not MIN_PITCH <= pitch <= MAX_PITCH:
		raise PitchRangeError(f"Pitch {pitch} out of range {MIN_PITCH}-{MAX_PITCH} ({context})")

	return pitch


def build_chord (root: int, quality: Quality, octave: int = 4, duration: float = 4, name: typing.Optional[str] = None) -> Chord:

	"""Materialize a chord as absolute MIDI pitches.

	Each pitch is ``root + octave * 12 + offset``, so octave 4 puts the C
	root on 48 and octave 5 on 60.

	Parameters:
		root: Root pitch class (0-11).
		quality: Chord quality.
		octave: Octave multiplier for the root.
		duration: Length of the chord in beats.
		name: Display name; defaults to the root name plus the quality alias.

	Raises:
		PitchRangeError: If any chord tone falls outside 0-127.
	"""

	if not 0 <= root <= 11:
		raise ValueError(f"Root pitch class must be 0-11, got {root}")

	if name is None:
		name = chord_name(root, quality)

	base = root + octave * 12
	notes = tuple(check_pitch(base + offset, f"chord {name} at octave {octave}") for offset in chord_intervals(quality))

	return Chord(
		name = name,
		root = root,
		quality = quality,
		notes = notes,
		duration = duration
	)


def create_chord (token: str, duration: float = 4, octave: int = 4, strict: bool = False) -> Chord:

	"""
	Parse a chord symbol and build it at the given octave.
	"""

	root, quality = parse_chord(token, strict=strict)

	return build_chord(root, quality, octave=octave, duration=duration, name=token.strip())


def chord_name (root: int, quality: Quality) -> str:

	"""
	Return a human-friendly chord name, e.g. ``"Am7"``.
	"""

	suffix = next(alias for alias, q in QUALITY_ALIASES.items() if q == quality)

	return f"{PC_TO_NOTE_NAME[root % 12]}{suffix}"


def note_number_to_name (note: int) -> str:

	"""Return the scientific name of a MIDI note number.

	Example:
		```python
		note_number_to_name(60)  # → "C4"
		note_number_to_name(21)  # → "A0"
		```
	"""

	check_pitch(note, "note name lookup")

	return f"{PC_TO_NOTE_NAME[note % 12]}{note // 12 - 1}"


def note_name_to_number (name: str) -> int:

	"""Return the MIDI note number for a scientific note name.

	Accepts sharps and flats (``"F#3"``, ``"Bb2"``) and negative octaves
	(``"C-1"`` = 0).

	Raises:
		ParseError: If the name is malformed.
		PitchRangeError: If the note lies outside 0-127.
	"""

	match = _NOTE_NAME_RE.match(name.strip())

	if match is None or match.group(1) not in NOTE_NAME_TO_PC:
		raise ParseError(f"Invalid note name: {name!r}")

	pc = NOTE_NAME_TO_PC[match.group(1)]
	octave = int(match.group(2))

	return check_pitch((octave + 1) * 12 + pc, f"note {name}")
