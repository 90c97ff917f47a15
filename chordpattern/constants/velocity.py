"""MIDI velocity constants.

Velocity is the MIDI attack strength (0-127). Randomized generators draw from
``BASE + random() * RANGE`` and truncate, so values stay in ``[BASE, BASE + RANGE)``.
"""

# Bass: accent on the first beat of every chord
BASS_ACCENT_VELOCITY = 100
BASS_VELOCITY = 80

ARPEGGIO_VELOCITY_BASE = 80
ARPEGGIO_VELOCITY_RANGE = 20

MELODY_VELOCITY_BASE = 85
MELODY_VELOCITY_RANGE = 15

RHYTHM_VELOCITY_BASE = 75
RHYTHM_VELOCITY_RANGE = 15

# MIDI standard range
MIN_VELOCITY = 0
MAX_VELOCITY = 127
