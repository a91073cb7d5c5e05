"""
User profile helpers shared by the engine, plans, and coach.
"""

import os
import re

import yaml


DEFAULT_WORKOUT_FREQUENCY = 3

FREQUENCY_RE = re.compile(r"^\s*(\d+)_days\s*$", re.IGNORECASE)

LIST_FIELDS = ["dietaryRestrictions", "allergies", "injuries"]


def parse_workout_frequency(value):
    """Parse a '<N>_days' token into N, defaulting to 3."""
    match = FREQUENCY_RE.match(str(value or ""))
    if not match:
        return DEFAULT_WORKOUT_FREQUENCY
    return int(match.group(1))


def display_token(value, default=""):
    """Render a token like 'weight_loss' as 'weight loss'."""
    if not value:
        return default
    return str(value).replace("_", " ", 1)


def goal_text(profile, default=""):
    return display_token((profile or {}).get("primaryGoal"), default)


def normalize_profile(raw):
    """
    Return a copy of a raw profile mapping with list fields present and
    numeric fields coerced where possible.
    """
    profile = dict(raw or {})

    for field in LIST_FIELDS:
        value = profile.get(field)
        if value is None:
            profile[field] = []
        elif isinstance(value, str):
            profile[field] = [value]
        else:
            profile[field] = list(value)

    for field in ["age", "preferredMeals"]:
        if profile.get(field) is not None:
            try:
                profile[field] = int(profile[field])
            except (TypeError, ValueError):
                profile[field] = None

    for field in ["height", "weight", "targetWeight"]:
        if profile.get(field) is not None:
            try:
                profile[field] = float(profile[field])
            except (TypeError, ValueError):
                profile[field] = None

    return profile


def load_profile(path):
    """Load a profile YAML file. Returns an empty normalized profile if missing."""
    if not path or not os.path.exists(path):
        return normalize_profile({})

    with open(path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    return normalize_profile(raw)
