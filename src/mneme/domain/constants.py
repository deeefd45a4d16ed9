"""Centralized constants for the mneme engine.

All magic numbers and defaults that are not calibration data live here so
every layer imports from a single source of truth. FSRS weights are
calibration data and live in ``mneme.application.config`` instead.
"""

# ---------- Card categories ----------
MATURE_INTERVAL_DAYS = 21

# ---------- FSRS ----------
FSRS_WEIGHT_COUNT = 17
FSRS_DEFAULT_RETENTION = 0.9
FSRS_MAXIMUM_INTERVAL = 36500  # 100 years
FSRS_DECAY_FACTOR = 9.0
MIN_STABILITY = 0.1
MIN_DIFFICULTY = 1.0
MAX_DIFFICULTY = 10.0
LAPSE_SUSPEND_THRESHOLD = 8

# ---------- SM-2 ----------
SM2_MIN_EASE_FACTOR = 1.3
SM2_INITIAL_EASE_FACTOR = 2.5
SM2_MAXIMUM_INTERVAL = 365
SM2_SECOND_INTERVAL = 6

# ---------- Reset defaults ----------
RESET_STABILITY = 1.0
RESET_DIFFICULTY = 5.0
RESET_DIFFICULTY_RATING = 3

# ---------- Learning metrics ----------
RESPONSE_TIME_EMA_ALPHA = 0.2
RECENT_ACCURACY_DECAY = 0.9
RECENT_ACCURACY_WINDOW = 10

# ---------- Sessions ----------
DEFAULT_RESPONSE_TIME_MS = 30_000.0
LONG_SESSION_MINUTES = 60
MEDIUM_SESSION_MINUTES = 30
LONG_SESSION_BREAK_RATIO = 0.2
MEDIUM_SESSION_BREAK_RATIO = 0.1

# ---------- Selector ----------
DEFAULT_MAX_QUESTIONS = 20
