"""
chordpattern - deterministic chord-progression to MIDI pattern generation.

Give it a chord progression as text, a key, a tempo and a time signature, and
it produces a timed note pattern plus a Standard MIDI File that any sequencer
or DAW can import. There is no audio engine and no playback: input goes in,
bytes come out.

Pipeline:

- **Chords.** ``parse_chord("F#m7b5")`` splits a symbol into a root pitch
  class and a quality. Thirteen qualities are supported, from triads to
  ``add9``. Unknown suffixes fall back to major (or raise with
  ``strict=True``).
- **Progressions.** ``parse_progression("C G Am F", key="C", tempo=120)``
  builds every chord at octave 4, one bar each.
- **Patterns.** ``generate(progression, "bass" | "arpeggio" | "melody" |
  "rhythm")`` walks the chords and emits notes in beats. Randomized
  generators draw from one injectable ``random.Random``, so ``seed=42``
  repeats every decision.
- **Files.** ``encode(pattern)`` writes a format 0 file at 480 PPQ with
  tempo and time-signature meta events, tick-sorted note events and VLQ
  delta times.

Minimal example:

    ```python
    import chordpattern

    result = chordpattern.render("Cmaj7 Am7 Dm7 G7", key="C", tempo=96, pattern_type="arpeggio", style="updown", seed=7)

    result.pattern.note_count   # structured notes for inspection
    result.data[:4]             # b"MThd"
    result.base64               # text-safe blob for API responses
    ```

Command line:

    python -m chordpattern "C G Am F" --type bass --tempo 120 --output bass.mid

Package-level exports: ``parse_chord``, ``parse_progression``, ``generate``,
``encode``, ``render``, ``ParseError``, ``PitchRangeError``.
"""

import chordpattern.chords
import chordpattern.generators
import chordpattern.midi_file
import chordpattern.pipeline
import chordpattern.progression


ParseError = chordpattern.chords.ParseError
PitchRangeError = chordpattern.chords.PitchRangeError
parse_chord = chordpattern.chords.parse_chord
parse_progression = chordpattern.progression.parse_progression
generate = chordpattern.generators.generate
encode = chordpattern.midi_file.encode
render = chordpattern.pipeline.render
