"""MIDI velocity constants.

Velocity is the MIDI attack strength (0-127). A ToneLang note without a ``v``
modifier plays at ``DEFAULT_VELOCITY``, and the formatter leaves the modifier
out whenever a note's velocity equals it.
"""

DEFAULT_VELOCITY = 70

# MIDI standard range
MIN_VELOCITY = 0
MAX_VELOCITY = 127
