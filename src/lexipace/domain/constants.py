"""Centralized constants for lexipace.

All magic numbers and configuration defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Time ----------
MS_PER_HOUR = 60 * 60 * 1000
HOURS_PER_DAY = 24

# ---------- Forgetting Curve ----------
# Checkpoints: 1 hour, 9 hours, 1 day, 3 days, 1 week, 1 month
REVIEW_POINTS_HOURS = [1.0, 9.0, 24.0, 72.0, 168.0, 720.0]
RETENTION_RATES = [0.58, 0.44, 0.36, 0.28, 0.25, 0.21]
EXCELLENT_CURVE_CAP = 5
GOOD_CURVE_CAP = 3

# ---------- Mastery Thresholds ----------
EXCELLENT_CORRECT_RATE = 0.9
GOOD_CORRECT_RATE = 0.7
POOR_CORRECT_RATE = 0.6

# ---------- Priority Weights ----------
FREQUENCY_NORMALIZATION_FACTOR = 100_000_000
ERROR_WEIGHT_MULTIPLIER = 2.0
MAX_TIME_WEIGHT = 2.0
RESPONSE_TIME_THRESHOLD_MS = 5000

# ---------- Learning Insights ----------
MIN_ATTEMPTS_FOR_ANALYSIS = 3
ANALYSIS_LIMIT = 10
PROFILE_ANALYSIS_LIMIT = 5
REVIEW_FOCUS_LEARNED_ITEMS = 50

# ---------- Session ----------
DEFAULT_LEARNING_COUNT = 10
MAX_REVIEW_ITEMS = 5
MINUTES_PER_REVIEW_ITEM = 2
MINUTES_PER_NEW_ITEM = 3
REVIEW_CHECK_INTERVAL_MS = MS_PER_HOUR
REMINDER_PREVIEW_SIZE = 5

# ---------- Advice ----------
STREAK_ENCOURAGEMENT_DAYS = 7
MORNING_START_HOUR = 6
MORNING_END_HOUR = 8  # inclusive

# ---------- Persistence ----------
SNAPSHOT_VERSION = "1.0"
RECORDS_FILE = "learning_records.json"
PROFILE_FILE = "learner_profile.json"
