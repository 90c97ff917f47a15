"""Note events and the patterns that hold them.

A `MidiPattern` is what every generator returns and what
`chordpattern.midi_file.encode()` consumes. Both types are frozen and
validate their fields on construction.
"""

import dataclasses
import typing

import chordpattern.chords
import chordpattern.constants.velocity


@dataclasses.dataclass(frozen=True)
class Note:

	"""
	A single timed MIDI note. Times and durations are in beats.
	"""

	pitch: int
	velocity: int
	start_time: float
	duration: float
	channel: int = 0


	def __post_init__ (self) -> None:

		"""
		Reject values that cannot be written to a MIDI file.
		"""

		chordpattern.chords.check_pitch(self.pitch, f"note at beat {self.start_time}")

		if not chordpattern.constants.velocity.MIN_VELOCITY <= self.velocity <= chordpattern.constants.velocity.MAX_VELOCITY:
			raise ValueError(f"Velocity must be {chordpattern.constants.velocity.MIN_VELOCITY}-{chordpattern.constants.velocity.MAX_VELOCITY}, got {self.velocity}")

		if not 0 <= self.channel <= 15:
			raise ValueError(f"Channel must be 0-15, got {self.channel}")

		if self.start_time < 0:
			raise ValueError("Start time cannot be negative")

		if self.duration <= 0:
			raise ValueError("Note duration must be positive")


	@property
	def end_time (self) -> float:

		return self.start_time + self.duration


	def to_dict (self) -> typing.Dict[str, typing.Any]:

		return {
			"pitch": self.pitch,
			"velocity": self.velocity,
			"startTime": self.start_time,
			"duration": self.duration,
			"channel": self.channel,
		}


@dataclasses.dataclass(frozen=True)
class MidiPattern:

	"""
	The output of a pattern generator: notes in construction order plus the
	metadata the encoder needs.
	"""

	name: str
	notes: typing.Tuple[Note, ...]
	tempo: float
	time_signature: str
	length_in_bars: int
	key: str


	@property
	def note_count (self) -> int:

		return len(self.notes)


	@property
	def total_beats (self) -> float:

		"""
		The end time of the latest note, or 0 for an empty pattern.
		"""

		return max((note.end_time for note in self.notes), default=0.0)


	def to_dict (self) -> typing.Dict[str, typing.Any]:

		"""
		Return a JSON-friendly representation with camelCase keys.
		"""

		return {
			"name": self.name,
			"notes": [note.to_dict() for note in self.notes],
			"tempo": self.tempo,
			"timeSignature": self.time_signature,
			"lengthInBars": self.length_in_bars,
			"key": self.key,
		}
