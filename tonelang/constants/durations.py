"""Beat-based duration constants.

All values are in **beats**, where 1.0 = one quarter note. ToneLang durations
scale the quarter note: ``C3*2`` lasts a half note, ``C3/4`` a sixteenth::

    import tonelang.constants.durations as dur

    dur.HALF        # C3*2
    dur.SIXTEENTH   # C3/4
"""

THIRTYSECOND = 0.125
SIXTEENTH = 0.25
TRIPLET_EIGHTH = 1 / 3
EIGHTH = 0.5
DOTTED_EIGHTH = 0.75
QUARTER = 1.0
DOTTED_QUARTER = 1.5
HALF = 2.0
WHOLE = 4.0

# A note with no duration modifier lasts one quarter note.
DEFAULT_DURATION = QUARTER

# Onsets closer than this (in beats) are treated as simultaneous.
TIME_TOLERANCE = 0.001
