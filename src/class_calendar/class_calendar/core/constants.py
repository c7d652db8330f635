"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

MIN_PERIOD = 1
MAX_PERIOD = 5
MIN_DAY_OF_WEEK = 0
MAX_DAY_OF_WEEK = 6

# Share of a subject's declared classes a student may miss.
MAX_ABSENCE_RATIO = 0.25

DEFAULT_SUBJECT_COLOR = "#3b82f6"

SUGGESTION_REASON_MAX_LENGTH = 500
DEFAULT_APPROVAL_MESSAGE = "Suggestion approved"

DEFAULT_SESSION_DAYS = 30
EMAIL_VERIFICATION_HOURS = 24
ACCESS_CODE_MINUTES = 15
OTP_DIGITS = 6

DAY_NAMES = {
    0: "Sunday",
    1: "Monday",
    2: "Tuesday",
    3: "Wednesday",
    4: "Thursday",
    5: "Friday",
    6: "Saturday",
}
