"""intake: conversational profile slot-filling engine.

Collects a fixed set of profile fields (name, age, gender, location) from
free-form user turns, validating every candidate value before it is merged
into the accumulated profile.
"""

__version__ = "0.1.0"
