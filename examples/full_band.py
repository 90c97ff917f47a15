"""
chordpattern - four parts from one progression

Renders bass, arpeggio, melody and rhythm parts from the same chord
progression and writes each to its own .mid file. Drop the files onto four
tracks in any DAW and they line up bar for bar.

The arpeggio, melody and rhythm parts are randomized; the fixed seed makes
every run produce the same files.
"""

import logging

import chordpattern


logging.basicConfig(level=logging.INFO)

PROGRESSION = "Cmaj7 Am7 Dm7 G7 Em7 Am7 Dm7 G7"
KEY = "C"
BPM = 96
SEED = 2024

PARTS = [
	# (pattern type, arpeggio style, MIDI channel)
	("bass", "up", 1),
	("arpeggio", "updown", 2),
	("melody", "up", 3),
	("rhythm", "up", 4),
]

for pattern_type, style, channel in PARTS:

	result = chordpattern.render(
		PROGRESSION,
		key = KEY,
		tempo = BPM,
		pattern_type = pattern_type,
		style = style,
		seed = SEED,
		channel = channel
	)

	with open(f"{pattern_type}.mid", "wb") as f:
		f.write(result.data)

	logging.info(f"{pattern_type}.mid: {result.pattern.note_count} notes, {result.pattern.length_in_bars} bars")
