"""
Feedback-driven recommendation and progress prediction engine.

Holds workout feedback, meal feedback and progress history for one session,
mirrors every append into a key-value store, and recomputes adjustments,
predictions and recommendations from the current history on each call.
"""

import threading
from datetime import datetime, timedelta

from fitmate.profile import parse_workout_frequency


WORKOUT_FEEDBACK_KEY = "fitmate_workoutFeedback"
MEAL_FEEDBACK_KEY = "fitmate_mealFeedback"
PROGRESS_HISTORY_KEY = "fitmate_progressHistory"

DIFFICULTY_SCORES = {
    "too_easy": 0.3,
    "just_right": 0.6,
    "too_hard": 0.9,
}
DIFFICULTIES = list(DIFFICULTY_SCORES)

DIFFICULTY_WINDOW = 5
DIFFICULTY_MIN_ENTRIES = 3
MEAL_MIN_ENTRIES = 5
MAX_MEAL_PREFERENCES = 5
PROGRESS_WINDOW = 8
PROGRESS_MIN_ENTRIES = 2
RECOVERY_WINDOW = timedelta(days=7)

PRIORITY_ORDER = {"high": 3, "medium": 2, "low": 1}


def calculate_trend(values):
    """
    Least-squares slope of values against their 1-based index.

    Returns 0.0 for fewer than two points.
    """
    n = len(values)
    if n < 2:
        return 0.0

    sum_x = n * (n + 1) / 2
    sum_y = sum(values)
    sum_xy = sum(value * (index + 1) for index, value in enumerate(values))
    sum_x2 = n * (n + 1) * (2 * n + 1) / 6

    return (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)


def build_workout_feedback(workout_id, difficulty, enjoyment, completion_rate, timestamp=None):
    """Compose a workout feedback record. Values are not range-checked."""
    return {
        "workoutId": workout_id,
        "difficulty": difficulty,
        "enjoyment": enjoyment,
        "completionRate": completion_rate,
        "timestamp": timestamp or datetime.now(),
    }


def build_meal_feedback(
    meal_id,
    rating,
    liked,
    too_salty=None,
    too_spicy=None,
    too_sweet=None,
    timestamp=None,
):
    """Compose a meal feedback record. Optional flags are omitted when None."""
    record = {
        "mealId": meal_id,
        "rating": rating,
        "liked": liked,
    }
    for key, value in [("tooSalty", too_salty), ("tooSpicy", too_spicy), ("tooSweet", too_sweet)]:
        if value is not None:
            record[key] = value
    record["timestamp"] = timestamp or datetime.now()
    return record


def build_progress_entry(weight=None, measurements=None, workout_performance=None, date=None):
    """
    Compose a progress entry.

    Args:
        weight: Body weight in kg, or None if not measured
        measurements: Optional dict with chest/waist/arms/thighs
        workout_performance: Optional dict with strength/endurance/consistency
        date: Entry date (defaults to now)
    """
    entry = {}
    if weight is not None:
        entry["weight"] = weight
    if measurements:
        cleaned = {k: v for k, v in measurements.items() if v is not None}
        if cleaned:
            entry["measurements"] = cleaned
    if workout_performance:
        entry["workoutPerformance"] = dict(workout_performance)
    entry["date"] = date or datetime.now()
    return entry


NUMERIC_FIELDS = {
    WORKOUT_FEEDBACK_KEY: [("completionRate",)],
    MEAL_FEEDBACK_KEY: [("rating",)],
    PROGRESS_HISTORY_KEY: [("weight",), ("workoutPerformance", "strength")],
}


def _serialize(records, time_field):
    serialized = []
    for record in records:
        item = dict(record)
        value = item.get(time_field)
        if isinstance(value, datetime):
            item[time_field] = value.isoformat()
        serialized.append(item)
    return serialized


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_numeric(record, path):
    value = record
    for name in path:
        if value is None:
            return
        if not isinstance(value, dict):
            raise ValueError(f"expected a mapping at {'.'.join(path)}")
        value = value.get(name)
    if value is not None and not _is_number(value):
        raise ValueError(f"{'.'.join(path)} is not a number")


def _parse_stamp(stamp):
    # Stored stamps are compared with naive local clock times.
    if stamp.endswith("Z"):
        stamp = stamp[:-1] + "+00:00"
    parsed = datetime.fromisoformat(stamp)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _deserialize(value, time_field, numeric_fields=()):
    """Decode a stored list of records. Raises ValueError on any malformed item."""
    if not isinstance(value, list):
        raise ValueError(f"expected a list, got {type(value).__name__}")

    records = []
    for item in value:
        if not isinstance(item, dict):
            raise ValueError(f"expected a record, got {type(item).__name__}")
        record = dict(item)
        stamp = record.get(time_field)
        if not isinstance(stamp, str):
            raise ValueError(f"missing {time_field}")
        record[time_field] = _parse_stamp(stamp)
        for path in numeric_fields:
            _check_numeric(record, path)
        for id_field in ("workoutId", "mealId"):
            if id_field in record and not isinstance(record[id_field], (str, int, float)):
                raise ValueError(f"{id_field} is not a scalar")
        records.append(record)
    return records


class RecommendationEngine:
    """Learns from user feedback and progress to adapt plans."""

    def __init__(self, store, clock=None):
        """
        Initialize an engine for one session.

        Args:
            store: Object exposing get(key) and put(key, value) over JSON values
            clock: Zero-argument callable returning the current datetime
        """
        self.store = store
        self.clock = clock or datetime.now
        self.workout_feedback = []
        self.meal_feedback = []
        self.progress_history = []
        self._lock = threading.RLock()

    # ── Recording ───────────────────────────────────────────────

    def record_workout_feedback(self, feedback):
        with self._lock:
            self.workout_feedback.append(feedback)
            self._persist(WORKOUT_FEEDBACK_KEY, _serialize(self.workout_feedback, "timestamp"))

    def record_meal_feedback(self, feedback):
        with self._lock:
            self.meal_feedback.append(feedback)
            self._persist(MEAL_FEEDBACK_KEY, _serialize(self.meal_feedback, "timestamp"))

    def record_progress(self, entry):
        with self._lock:
            self.progress_history.append(entry)
            self._persist(PROGRESS_HISTORY_KEY, _serialize(self.progress_history, "date"))

    def _persist(self, key, records):
        try:
            self.store.put(key, records)
        except Exception as exc:
            print(f"  Failed to save {key} ({exc}), keeping history in memory only.")

    def load_persisted(self):
        """
        Replace in-memory histories with the stored ones.

        Absent keys or malformed content leave that history empty.
        """
        with self._lock:
            self.workout_feedback = self._load_history(WORKOUT_FEEDBACK_KEY, "timestamp")
            self.meal_feedback = self._load_history(MEAL_FEEDBACK_KEY, "timestamp")
            self.progress_history = self._load_history(PROGRESS_HISTORY_KEY, "date")

    def _load_history(self, key, time_field):
        try:
            value = self.store.get(key)
            if value is None:
                return []
            return _deserialize(value, time_field, NUMERIC_FIELDS.get(key, ()))
        except (TypeError, ValueError) as exc:
            print(f"  Ignoring stored {key} ({exc}), starting with empty history.")
            return []

    # ── Adaptation ──────────────────────────────────────────────

    def get_workout_difficulty_adjustment(self, profile):
        """
        Return a workout intensity multiplier from recent feedback.

        1.2 to intensify, 0.8 to ease off, 1.0 to keep (also the answer
        with fewer than three feedback entries).
        """
        with self._lock:
            if len(self.workout_feedback) < DIFFICULTY_MIN_ENTRIES:
                return 1.0

            recent = self.workout_feedback[-DIFFICULTY_WINDOW:]
            avg_difficulty = sum(
                DIFFICULTY_SCORES.get(f.get("difficulty"), DIFFICULTY_SCORES["too_hard"])
                for f in recent
            ) / len(recent)
            avg_completion = sum(f.get("completionRate", 0) for f in recent) / len(recent) / 100

        if avg_difficulty < 0.4 and avg_completion > 0.8:
            return 1.2
        if avg_difficulty > 0.8 or avg_completion < 0.6:
            return 0.8
        return 1.0

    def get_meal_preferences(self):
        """Return up to five most-liked meal ids, most frequent first."""
        with self._lock:
            if len(self.meal_feedback) < MEAL_MIN_ENTRIES:
                return []

            counts = {}
            for feedback in self.meal_feedback:
                if feedback.get("liked") and feedback.get("rating", 0) >= 4:
                    meal_id = feedback.get("mealId")
                    counts[meal_id] = counts.get(meal_id, 0) + 1

        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return [meal_id for meal_id, _count in ranked[:MAX_MEAL_PREFERENCES]]

    def predict_progress(self, profile, timeframe_weeks):
        """
        Predict change over a timeframe.

        Returns:
            Dict with weightChange, strengthGain, enduranceImprovement, confidence
        """
        profile = profile or {}
        with self._lock:
            if len(self.progress_history) < PROGRESS_MIN_ENTRIES:
                return self._baseline_prediction(profile, timeframe_weeks)
            recent = self.progress_history[-PROGRESS_WINDOW:]

        fallback_weight = profile.get("weight") or 0.0
        weights = [
            entry["weight"] if entry.get("weight") is not None else fallback_weight
            for entry in recent
        ]
        strengths = [
            ((entry.get("workoutPerformance") or {}).get("strength") or 0)
            for entry in recent
        ]

        weight_trend = calculate_trend(weights)
        strength_trend = calculate_trend(strengths)

        return {
            "weightChange": weight_trend * timeframe_weeks,
            "strengthGain": max(0, strength_trend),
            "enduranceImprovement": max(0, strength_trend * 0.8),
            "confidence": min(0.9, len(recent) / PROGRESS_WINDOW),
        }

    def _baseline_prediction(self, profile, timeframe_weeks):
        goal = profile.get("primaryGoal")
        if goal == "weight_loss":
            weekly_change = -0.5
        elif goal == "muscle_gain":
            weekly_change = 0.2
        else:
            weekly_change = 0

        is_beginner = profile.get("fitnessLevel") == "beginner"
        return {
            "weightChange": weekly_change * timeframe_weeks,
            "strengthGain": 0.3 if is_beginner else 0.15,
            "enduranceImprovement": 0.25 if is_beginner else 0.1,
            "confidence": 0.6,
        }

    # ── Recommendations ─────────────────────────────────────────

    def generate_recommendations(self, profile, now=None):
        """
        Build recommendations ordered by priority (high first).

        Args:
            profile: User profile mapping
            now: Evaluation time for the 7-day recovery window (defaults to clock)
        """
        profile = profile or {}
        now = now or self.clock()
        recommendations = []

        with self._lock:
            adjustment = self.get_workout_difficulty_adjustment(profile)
            if adjustment != 1.0:
                if adjustment > 1:
                    title = "Increase Workout Intensity"
                    description = "Based on your recent feedback, you're ready for more challenging workouts!"
                else:
                    title = "Reduce Workout Intensity"
                    description = "Let's adjust your workouts to match your current fitness level better."
                recommendations.append(
                    {
                        "type": "workout_adjustment",
                        "title": title,
                        "description": description,
                        "confidence": 0.8,
                        "priority": "medium",
                        "actionable": True,
                    }
                )

            preferences = self.get_meal_preferences()
            if preferences:
                liked = " and ".join(str(meal_id) for meal_id in preferences[:2])
                recommendations.append(
                    {
                        "type": "meal_suggestion",
                        "title": "Personalized Meal Suggestions",
                        "description": (
                            f"We've noticed you enjoy {liked}. "
                            "We'll prioritize similar meals in your plan."
                        ),
                        "confidence": 0.75,
                        "priority": "low",
                        "actionable": True,
                    }
                )

            if self.progress_history:
                prediction = self.predict_progress(profile, 4)
                if prediction["confidence"] > 0.7:
                    change = prediction["weightChange"]
                    direction = "weight loss" if change < 0 else "muscle gain"
                    recommendations.append(
                        {
                            "type": "motivation",
                            "title": "You're On Track!",
                            "description": (
                                f"Based on your progress, you could see {abs(change):.1f}kg "
                                f"{direction} in the next month."
                            ),
                            "confidence": prediction["confidence"],
                            "priority": "high",
                            "actionable": False,
                        }
                    )

            recent_workouts = [
                f for f in self.workout_feedback
                if now - f["timestamp"] < RECOVERY_WINDOW
            ]

        if len(recent_workouts) > parse_workout_frequency(profile.get("workoutFrequency")):
            recommendations.append(
                {
                    "type": "recovery",
                    "title": "Consider a Rest Day",
                    "description": (
                        "You've been very consistent this week. "
                        "A rest day might help optimize your recovery."
                    ),
                    "confidence": 0.7,
                    "priority": "medium",
                    "actionable": True,
                }
            )

        return sorted(
            recommendations,
            key=lambda rec: PRIORITY_ORDER[rec["priority"]],
            reverse=True,
        )
