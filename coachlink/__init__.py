"""coachlink - client-side logic for the coaching/athlete workout-tracking platform."""

__version__ = "0.1.0"
