"""
Exercise Constants

Set-detail formats accepted on workout template items and the fallback
group used when an exercise has no type.
"""

import re

# Group used for items whose exercise has no exercise_type
DEFAULT_GROUP_KEY = 'Other'

# Per-set detail formats. Empty values are always allowed.
SET_DETAIL_PATTERNS = {
    'reps': re.compile(r'^(|\d+(-\d+)?|amrap)$', re.IGNORECASE),
    'weight': re.compile(r'^(|bw|\d+(\.\d+)?\s*(kg|lbs|bw)?)$', re.IGNORECASE),
    'time': re.compile(r'^(|\d+\s*(sec|min|hr)?)$', re.IGNORECASE),
    'rest': re.compile(r'^(|\d+\s*(sec|min|hr)?)$', re.IGNORECASE),
    'resistance': re.compile(r'^(|Lvl\s*\d+|Small|Medium|Large|Ex\.?\s*Large)$', re.IGNORECASE),
    'speed': re.compile(r'^(|\d+(\.\d+)?\s*(Mph|Kmph)?)$', re.IGNORECASE),
    'incline': re.compile(r'^(|Lvl\s*\d+|\d+(\.\d+)?\s*%?)$', re.IGNORECASE),
}

# Examples shown in validation errors
SET_DETAIL_EXAMPLES = {
    'reps': 'e.g., 8, 8-12, amrap',
    'weight': 'e.g., 50 kg, 100 lbs, BW',
    'time': 'e.g., 60 sec, 2 min',
    'rest': 'e.g., 90 sec, 3 min',
    'resistance': 'Lvl #, Small, Medium, Large, Ex. Large',
    'speed': 'e.g., 5 Mph, 10 Kmph',
    'incline': 'e.g., Lvl 3, 5%',
}
