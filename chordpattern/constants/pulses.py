"""MIDI file timing constants.

Encoded files use **480 pulses per quarter note** (PPQ = 480) as their
division. Patterns are built in beats and converted to ticks only when a file
is encoded, so the resolution can be overridden per call.
"""

PPQ = 480

# Metronome fields of the time-signature meta event
MIDI_CLOCKS_PER_CLICK = 24
NOTATED_32ND_NOTES_PER_BEAT = 8
