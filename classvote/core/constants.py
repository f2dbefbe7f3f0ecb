"""Reserved strings and limits shared by schemas, services and storage."""

# Yes/no answers as stored in submissions
YES_NO_CHOICES = ("yes", "no")

# Reserved submission values (see classvote.core.submission_value)
USER_OPTION_PREFIX = "USER_OPTION:"
ANONYMOUS_VOTED_STUB = "ANONYMOUS_VOTED_STUB"
ANONYMOUS_CONTENT = "ANONYMOUS_CONTENT"
# Never accepted as free-text answers
RESERVED_ANSWERS = (ANONYMOUS_VOTED_STUB, ANONYMOUS_CONTENT)

# Vote creation limits
MIN_TITLE_LENGTH = 3
MAX_TITLE_LENGTH = 100
MAX_OPTION_LENGTH = 100
MAX_OPTIONS = 20
DEFAULT_EXPECTED_VOTERS = 38
MAX_EXPECTED_VOTERS = 1000

# Free-text answers are capped at 500 characters
MAX_FREE_TEXT_LENGTH = 500

# AI summary themes are capped at 15 entries
MAX_SUMMARY_THEMES = 15

# Generated document identifiers
ID_LENGTH = 20

# JWT Token Configuration
# Token expiration time in minutes (8 hours)
ACCESS_TOKEN_EXPIRE_MINUTES = 480
