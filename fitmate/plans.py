"""
Deterministic workout, nutrition and supplement plans from the user profile.
"""

import math

from fitmate.profile import parse_workout_frequency


BASE_SETS = 3

WORKOUT_POOLS = {
    "beginner": [
        {"name": "Full Body Strength", "duration": "45 min", "exercises": ["Push-ups", "Squats", "Plank", "Lunges"]},
        {"name": "Cardio & Core", "duration": "30 min", "exercises": ["Walking", "Knee Raises", "Dead Bug", "Bird Dog"]},
        {"name": "Upper Body Focus", "duration": "40 min", "exercises": ["Wall Push-ups", "Arm Circles", "Resistance Band Rows"]},
    ],
    "intermediate": [
        {"name": "Push Day", "duration": "60 min", "exercises": ["Bench Press", "Shoulder Press", "Dips", "Push-ups"]},
        {"name": "Pull Day", "duration": "60 min", "exercises": ["Pull-ups", "Rows", "Lat Pulldowns", "Bicep Curls"]},
        {"name": "Leg Day", "duration": "75 min", "exercises": ["Squats", "Deadlifts", "Lunges", "Calf Raises"]},
        {"name": "Cardio HIIT", "duration": "45 min", "exercises": ["Burpees", "Mountain Climbers", "Jump Squats"]},
    ],
    "advanced": [
        {"name": "Heavy Compound", "duration": "90 min", "exercises": ["Deadlifts", "Squats", "Bench Press", "Rows"]},
        {"name": "Olympic Lifts", "duration": "75 min", "exercises": ["Clean & Jerk", "Snatch", "Front Squats"]},
        {"name": "HIIT Circuit", "duration": "60 min", "exercises": ["Box Jumps", "Battle Ropes", "Kettlebell Swings"]},
        {"name": "Accessory Work", "duration": "45 min", "exercises": ["Isolation Exercises", "Core Work", "Mobility"]},
    ],
}

# (injury, substrings to drop, replacement exercises)
INJURY_RULES = [
    ("Knee Pain", ["squat", "lunge"], ["Leg Press (light)", "Stationary Bike"]),
    ("Back Pain", ["deadlift"], ["Cat-Cow Stretches", "Swimming"]),
    ("Shoulder Issues", ["press", "push"], ["Light Resistance Bands", "Physical Therapy Exercises"]),
]

ACTIVITY_MULTIPLIERS = {
    "sedentary": 1.2,
    "light": 1.375,
    "moderate": 1.55,
    "very": 1.725,
    "extra": 1.9,
}

GOAL_MULTIPLIERS = {
    "weight_loss": 0.85,
    "muscle_gain": 1.15,
    "maintenance": 1.0,
    "endurance": 1.1,
    "strength": 1.1,
    "flexibility": 1.0,
}

BASE_SUPPLEMENTS = [
    {"name": "Whey Protein", "reason": "Support muscle protein synthesis", "timing": "Post-workout"},
    {"name": "Multivitamin", "reason": "Fill nutritional gaps", "timing": "With breakfast"},
]

GOAL_SUPPLEMENTS = {
    "muscle_gain": [
        {"name": "Creatine Monohydrate", "reason": "Increase strength and muscle mass", "timing": "Post-workout"},
        {"name": "BCAAs", "reason": "Reduce muscle breakdown", "timing": "During workout"},
    ],
    "weight_loss": [
        {"name": "L-Carnitine", "reason": "Support fat metabolism", "timing": "Pre-workout"},
        {"name": "Green Tea Extract", "reason": "Boost metabolism", "timing": "Between meals"},
    ],
    "endurance": [
        {"name": "Beta-Alanine", "reason": "Improve muscular endurance", "timing": "Pre-workout"},
        {"name": "Electrolytes", "reason": "Maintain hydration", "timing": "During workout"},
    ],
}

JOINT_SUPPLEMENTS = [
    {"name": "Glucosamine & Chondroitin", "reason": "Support joint health", "timing": "With meals"},
    {"name": "Omega-3", "reason": "Reduce inflammation", "timing": "With meals"},
]


def _round_half_up(value):
    return int(math.floor(value + 0.5))


def calculate_bmi(profile):
    """Body mass index from weight (kg) and height (cm); None if unknown."""
    height = profile.get("height")
    weight = profile.get("weight")
    if not height or weight is None:
        return None
    return weight / (height / 100) ** 2


def _filter_for_injuries(exercises, injuries):
    filtered = list(exercises)
    for injury, blocked, replacements in INJURY_RULES:
        if injury not in injuries:
            continue
        filtered = [
            ex for ex in filtered
            if not any(token in ex.lower() for token in blocked)
        ]
        filtered.extend(replacements)
    return filtered


def generate_workout_plan(profile, difficulty_adjustment=1.0):
    """
    Pick weekly workouts for the profile's level, frequency and injuries.

    Args:
        profile: User profile mapping
        difficulty_adjustment: Multiplier from the recommendation engine,
            applied to the per-exercise set count

    Returns:
        List of dicts with name, duration, exercises, sets
    """
    pool = WORKOUT_POOLS.get(profile.get("fitnessLevel"), WORKOUT_POOLS["beginner"])
    injuries = profile.get("injuries") or []
    frequency = parse_workout_frequency(profile.get("workoutFrequency"))
    sets = max(1, _round_half_up(BASE_SETS * difficulty_adjustment))

    plan = []
    for workout in pool:
        plan.append(
            {
                "name": workout["name"],
                "duration": workout["duration"],
                "exercises": _filter_for_injuries(workout["exercises"], injuries),
                "sets": sets,
            }
        )
    return plan[:frequency]


def generate_nutrition_plan(profile):
    """Daily calorie and macro targets."""
    base_calories = 2200 if profile.get("gender") == "male" else 1800
    activity_multiplier = ACTIVITY_MULTIPLIERS.get(profile.get("activityLevel") or "moderate", 1.55)
    goal_multiplier = GOAL_MULTIPLIERS.get(profile.get("primaryGoal") or "maintenance", 1.0)

    total_calories = _round_half_up(base_calories * activity_multiplier * goal_multiplier)
    weight = profile.get("weight") or 0

    return {
        "calories": total_calories,
        "protein": _round_half_up(weight * 2.2),
        "carbs": _round_half_up(total_calories * 0.4 / 4),
        "fats": _round_half_up(total_calories * 0.25 / 9),
        "meals": profile.get("preferredMeals") or 4,
    }


def generate_supplements(profile):
    """Supplement suggestions for the profile's goal and injuries."""
    supplements = [dict(item) for item in BASE_SUPPLEMENTS]
    supplements.extend(dict(item) for item in GOAL_SUPPLEMENTS.get(profile.get("primaryGoal"), []))

    injuries = profile.get("injuries") or []
    if any("Joint" in injury or "Arthritis" in injury for injury in injuries):
        supplements.extend(dict(item) for item in JOINT_SUPPLEMENTS)

    return supplements
