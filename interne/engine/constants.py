"""
constants.py
------------
Limits and display ranges shared by the validators and the engine.
"""
# --- Field limits ---
TITLE_MAX_LENGTH = 500
COLLECTION_NAME_MAX_LENGTH = 100
URL_SCHEMES = ("http://", "https://")

# --- Fixed-length calendar approximations (days) ---
DAYS_PER_WEEK = 7
DAYS_PER_MONTH = 30
DAYS_PER_YEAR = 365

# --- Tag cloud ranges ---
# Font size in rem
TAG_SIZE_MIN = 0.75
TAG_SIZE_MAX = 2.5

# HSL colour: light teal for rare tags, deep indigo for frequent ones
TAG_HUE_MIN = 180.0
TAG_HUE_MAX = 260.0
TAG_SATURATION_MIN = 40.0
TAG_SATURATION_MAX = 60.0
TAG_LIGHTNESS_MAX = 70.0
TAG_LIGHTNESS_MIN = 35.0

# Ratio used when every tag has the same count
TAG_RATIO_FLAT = 0.5
