"""Constants for ToneLang.

This package contains three sets of constants:

- ``tonelang.constants.velocity`` - MIDI velocity defaults and range
- ``tonelang.constants.durations`` - Beat-based durations and the timing tolerance
- ``tonelang.constants.pitch`` - MIDI pitch range and pitch class tables (C3 = 60)

The most commonly used values are re-exported here so
``tonelang.constants.DEFAULT_VELOCITY`` works without a sub-import.
"""

from tonelang.constants.durations import DEFAULT_DURATION, TIME_TOLERANCE
from tonelang.constants.pitch import MAX_PITCH, MIN_PITCH
from tonelang.constants.velocity import DEFAULT_VELOCITY, MAX_VELOCITY, MIN_VELOCITY
