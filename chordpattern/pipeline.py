"""One-call pipeline: chord text to pattern to MIDI file.

`render()` is the entry point for callers such as an HTTP handler or the
command line. It returns the structured pattern alongside the encoded file,
so callers can inspect note counts and bar lengths without decoding the
binary.
"""

import base64
import dataclasses
import logging
import random
import typing

import chordpattern.generators
import chordpattern.midi_file
import chordpattern.pattern
import chordpattern.progression


logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class GeneratedPattern:

	"""
	A generated pattern, the progression it came from, and its encoded file.
	"""

	pattern: chordpattern.pattern.MidiPattern
	progression: chordpattern.progression.ChordProgression
	data: bytes


	@property
	def base64 (self) -> str:

		return base64.b64encode(self.data).decode("ascii")


	def to_dict (self) -> typing.Dict[str, typing.Any]:

		"""
		Return a JSON-friendly response body.
		"""

		return {
			"midiPattern": self.pattern.to_dict(),
			"chordProgression": {
				"chords": [
					{
						"name": chord.name,
						"root": chord.root,
						"quality": chord.quality.value,
						"notes": list(chord.notes),
						"duration": chord.duration,
					}
					for chord in self.progression.chords
				],
				"key": self.progression.key,
				"timeSignature": self.progression.time_signature,
				"tempo": self.progression.tempo,
			},
			"midiFileData": self.base64,
		}


def render (
	progression_text: str,
	key: str,
	tempo: float,
	time_signature: str = chordpattern.progression.DEFAULT_TIME_SIGNATURE,
	pattern_type: str = "bass",
	style: str = "up",
	seed: typing.Optional[int] = None,
	octave: int = chordpattern.progression.DEFAULT_OCTAVE,
	strict: bool = False,
	ppq: int = chordpattern.midi_file.PPQ,
	channel: int = 0
) -> GeneratedPattern:

	"""Parse a progression, generate a pattern and encode it.

	Parameters:
		progression_text: Whitespace-separated chord symbols, e.g. ``"C G Am F"``.
		key: Key label carried through to the pattern.
		tempo: Beats per minute.
		time_signature: ``"N/D"`` string.
		pattern_type: ``"bass"``, ``"arpeggio"``, ``"melody"`` or ``"rhythm"``.
		style: Arpeggio style (``"up"``, ``"down"``, ``"updown"``).
		seed: Seed for repeatable randomized patterns.
		octave: Octave at which chords are built.
		strict: Reject unknown chord suffixes.
		ppq: Ticks per quarter note in the encoded file.
		channel: MIDI channel (0-15).

	Raises:
		ParseError: Malformed chord or time signature.
		PitchRangeError: A generated pitch falls outside 0-127.
		ValueError: Bad tempo, pattern type or style.

	Example:
		```python
		result = render("Cmaj7 Am7 Dm7 G7", key="C", tempo=90, pattern_type="arpeggio", style="updown", seed=1)
		result.pattern.note_count  # → 24
		result.base64              # "TVRoZAAAAAYAAAAB..."
		```
	"""

	progression = chordpattern.progression.parse_progression(
		progression_text,
		key = key,
		tempo = tempo,
		time_signature = time_signature,
		octave = octave,
		strict = strict
	)

	pattern = chordpattern.generators.generate(
		progression,
		pattern_type,
		style = style,
		rng = random.Random(seed),
		channel = channel
	)

	data = chordpattern.midi_file.encode(pattern, ppq=ppq)

	logger.info(f"Rendered {pattern.name!r}: {pattern.note_count} notes over {pattern.length_in_bars} bars")

	return GeneratedPattern(pattern=pattern, progression=progression, data=data)
