"""Application constants.

This module contains magic strings and numbers used throughout the application.
Centralizing these values makes them easier to maintain and modify.
"""

# Meeting Code Configuration
# Self check-in codes are short uppercase alphanumeric strings
MEETING_CODE_LENGTH = 6
MEETING_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"

# QR rendering parameters passed to the external QR image service
QR_IMAGE_SIZE = "200x200"

# Recurring series
# Instances generated at creation time are spaced one week apart
RECURRENCE_INTERVAL_DAYS = 7
MAX_RECURRENCE_WEEKS = 52

# Text field limits (mirrored by the database column lengths)
MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 2000
MAX_LOCATION_LENGTH = 200

# JWT Token Configuration
# Token expiration time in minutes (8 hours)
ACCESS_TOKEN_EXPIRE_MINUTES = 480

# Name of the cookie carrying the session JWT issued by the identity service
SESSION_COOKIE_NAME = "session_token"
