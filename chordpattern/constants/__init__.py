"""Constants for chordpattern.

This package contains two sets of constants:

- ``chordpattern.constants.pulses`` - MIDI file time resolution
- ``chordpattern.constants.velocity`` - Velocity levels used by the pattern generators
"""
