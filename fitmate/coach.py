"""
AI coach chat responses using Claude API, with template fallbacks.
"""

from datetime import datetime

import anthropic

from fitmate.profile import display_token, goal_text


MOTIVATION_KEYWORDS = ["motivation", "tired", "unmotivated"]
NUTRITION_KEYWORDS = ["diet", "nutrition", "meal"]
TRAINING_KEYWORDS = ["workout", "exercise", "training"]

CATEGORY_KEYWORDS = [
    ("workout", ["workout", "exercise", "training"]),
    ("nutrition", ["diet", "nutrition", "meal", "food"]),
    ("motivation", ["motivat", "tired", "give up", "difficult"]),
    ("progress", ["progress", "result", "improvement"]),
]


QUICK_PROMPTS = [
    ("Need Motivation", "I'm feeling unmotivated today. Can you help?"),
    ("Workout Tips", "Can you give me some workout tips based on my current routine?"),
    ("Nutrition Help", "I need advice about my nutrition plan"),
    ("Progress Check", "How am I doing with my fitness goals?"),
    ("Time Management", "I'm struggling to find time for workouts. Any suggestions?"),
    ("Adjust Goals", "I want to adjust my fitness goals. Can you help?"),
]


def resolve_quick_prompt(text):
    """Map a quick-action number ('1'..'6') to its prompt; other text passes through."""
    text = (text or "").strip()
    if text.isdigit() and 1 <= int(text) <= len(QUICK_PROMPTS):
        return QUICK_PROMPTS[int(text) - 1][1]
    return text


def _contains_any(text, keywords):
    return any(keyword in text for keyword in keywords)


def categorize_message(message):
    """Classify a chat message as workout, nutrition, motivation, progress or general."""
    lower_message = (message or "").lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if _contains_any(lower_message, keywords):
            return category
    return "general"


def fallback_response(message, profile):
    """Keyword-matched template reply used when generation is unavailable."""
    profile = profile or {}
    lower_message = (message or "").lower()
    goal = goal_text(profile)
    primary_goal = profile.get("primaryGoal")
    level = profile.get("fitnessLevel") or ""

    if _contains_any(lower_message, MOTIVATION_KEYWORDS):
        return (
            f"Remember why you started your {goal} journey. Based on your {level} level, "
            "you're building sustainable habits. Small consistent actions lead to big results! 💪"
        )

    if _contains_any(lower_message, NUTRITION_KEYWORDS):
        if primary_goal == "weight_loss":
            focus = "a slight calorie deficit with high protein"
        elif primary_goal == "muscle_gain":
            focus = "adequate calories and protein timing around workouts"
        else:
            focus = "balanced nutrition to maintain your current physique"
        return f"For your {goal} goal, focus on {focus}."

    if _contains_any(lower_message, TRAINING_KEYWORDS):
        frequency = display_token(profile.get("workoutFrequency"))
        return (
            f"Your {level} level and {frequency} frequency is a great foundation. "
            "Focus on consistency over perfection!"
        )

    return f"As your AI coach, I'm here to help with your {goal} journey! How can I assist you today?"


def welcome_message(profile, now=None):
    """Greeting shown when a chat session opens."""
    profile = profile or {}
    hour = (now or datetime.now()).hour
    if hour < 12:
        greeting = "Good morning"
    elif hour < 17:
        greeting = "Good afternoon"
    else:
        greeting = "Good evening"

    goal = goal_text(profile, default="fitness")
    level = profile.get("fitnessLevel") or "your current level"

    return (
        f"{greeting}! I'm your AI fitness coach, here to support your {goal} journey. "
        f"As a {level} fitness enthusiast, I'll provide personalized advice based on your "
        "progress and preferences. How can I help you today? 💪"
    )


class CoachResponder:
    """Answers coaching questions with Claude, falling back to templates."""

    def __init__(self, api_key, config, client=None):
        """
        Initialize the coach.

        Args:
            api_key: Anthropic API key (None disables generation)
            config: Full configuration dictionary
            client: Pre-built client, mainly for tests
        """
        claude_config = (config or {}).get("claude", {}) or {}
        self.model = claude_config.get("model")
        self.max_tokens = claude_config.get("max_tokens", 600)

        if client is not None:
            self.client = client
        elif api_key:
            self.client = anthropic.Anthropic(
                api_key=api_key,
                timeout=claude_config.get("timeout", 60),
            )
        else:
            self.client = None

    def _build_system_prompt(self, profile):
        profile = profile or {}
        injuries = ", ".join(profile.get("injuries") or []) or "none"
        restrictions = ", ".join(profile.get("dietaryRestrictions") or []) or "none"

        return f"""You are FitMate, a supportive and knowledgeable fitness coach.

USER PROFILE:
- Age: {profile.get('age', 'unknown')}
- Gender: {profile.get('gender', 'unknown')}
- Height: {profile.get('height', 'unknown')} cm
- Weight: {profile.get('weight', 'unknown')} kg
- Activity level: {profile.get('activityLevel', 'unknown')}
- Primary goal: {goal_text(profile, default='unknown')}
- Fitness level: {profile.get('fitnessLevel', 'unknown')}
- Workout frequency: {display_token(profile.get('workoutFrequency'), default='unknown')}
- Injuries: {injuries}
- Dietary restrictions: {restrictions}

Keep answers short (under 150 words), practical, and specific to this profile.
Never give medical diagnoses; suggest a professional for pain or injuries.
"""

    def generate(self, message, profile):
        """
        Ask Claude for a reply.

        Returns:
            Dict with keys ok (bool), text (str or None), error (str or None)
        """
        if self.client is None:
            return {"ok": False, "text": None, "error": "generation not configured"}

        try:
            response = self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=self._build_system_prompt(profile),
                messages=[{"role": "user", "content": message}],
            )
            text = response.content[0].text
        except Exception as exc:
            return {"ok": False, "text": None, "error": str(exc)}

        if not text or not text.strip():
            return {"ok": False, "text": None, "error": "empty response"}

        return {"ok": True, "text": text, "error": None}

    def respond(self, message, profile):
        """Return Claude's reply verbatim, or a template reply on failure."""
        result = self.generate(message, profile)
        if result["ok"]:
            return result["text"]

        print(f"  Coach generation failed ({result['error']}), using template response.")
        return fallback_response(message, profile)
