"""
jitter.py
- Randomized additive delay around a nominal number of seconds.
- Used for the cycle cadence and for operation status polling so that
  several shifter instances do not hit the provider API in lockstep.
"""

import random

JITTER_RATIO = 1 / 3  # up to 33% on top of the nominal value


def apply_jitter(seconds, rng=None):
    """
    Return a duration in [seconds, seconds + seconds/3].

    The offset is uniformly distributed and only ever added, so the nominal
    cadence is never undershot. apply_jitter(0) is always 0.
    """
    if seconds < 0:
        raise ValueError(f"seconds must be >= 0, got {seconds}")
    if seconds == 0:
        return 0

    rng = rng or random
    return seconds + rng.uniform(0, seconds * JITTER_RATIO)
