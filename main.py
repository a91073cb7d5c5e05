#!/usr/bin/env python3
"""
FitMate command-line tool.
Main entry point for the application.
"""

import argparse
import os
import sys

import yaml
from dotenv import load_dotenv

from fitmate.coach import (
    QUICK_PROMPTS,
    CoachResponder,
    resolve_quick_prompt,
    welcome_message,
)
from fitmate.feedback_store import SQLiteStore
from fitmate.plans import (
    calculate_bmi,
    generate_nutrition_plan,
    generate_supplements,
    generate_workout_plan,
)
from fitmate.profile import load_profile
from fitmate.recommendation_engine import (
    DIFFICULTIES,
    RecommendationEngine,
    build_meal_feedback,
    build_progress_entry,
    build_workout_feedback,
)


def load_config():
    """Load configuration from config.yaml."""
    config_path = os.path.join(os.path.dirname(__file__), 'config.yaml')

    if not os.path.exists(config_path):
        print("Error: config.yaml not found!")
        sys.exit(1)

    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)

    return config


def print_banner():
    """Print welcome banner."""
    banner = """
╔══════════════════════════════════════════════════════════════╗
║                                                              ║
║        FITMATE                                               ║
║        Personalized fitness guidance                         ║
║                                                              ║
╚══════════════════════════════════════════════════════════════╝
    """
    print(banner)


def print_section(title):
    print("\n" + "=" * 60)
    print(title)
    print("=" * 60)


def show_plan(engine, profile):
    adjustment = engine.get_workout_difficulty_adjustment(profile)
    bmi = calculate_bmi(profile)

    print_section("OVERVIEW")
    print(f"Weight: {profile.get('weight')} kg")
    if bmi is not None:
        print(f"BMI: {bmi:.1f}")
    print(f"Intensity multiplier: {adjustment}")

    print_section("WORKOUTS")
    for workout in generate_workout_plan(profile, difficulty_adjustment=adjustment):
        print(f"\n{workout['name']} ({workout['duration']})")
        for exercise in workout['exercises']:
            print(f"  - {exercise}: {workout['sets']} sets")

    print_section("NUTRITION")
    nutrition = generate_nutrition_plan(profile)
    print(f"Calories: {nutrition['calories']} kcal")
    print(f"Protein: {nutrition['protein']} g")
    print(f"Carbs: {nutrition['carbs']} g")
    print(f"Fats: {nutrition['fats']} g")
    print(f"Meals per day: {nutrition['meals']}")

    print_section("SUPPLEMENTS")
    for supplement in generate_supplements(profile):
        print(f"- {supplement['name']} ({supplement['timing']}): {supplement['reason']}")


def show_prediction(engine, profile, weeks):
    prediction = engine.predict_progress(profile, weeks)
    print_section(f"PREDICTION ({weeks} WEEKS)")
    print(f"Weight change: {prediction['weightChange']:+.1f} kg")
    print(f"Strength gain: {prediction['strengthGain']:.2f}")
    print(f"Endurance improvement: {prediction['enduranceImprovement']:.2f}")
    print(f"Confidence: {prediction['confidence'] * 100:.0f}%")


def show_recommendations(engine, profile):
    recommendations = engine.generate_recommendations(profile)
    print_section("RECOMMENDATIONS")
    if not recommendations:
        print("No recommendations yet. Log a few workouts, meals, and check-ins first.")
        return

    for rec in recommendations:
        print(f"\n[{rec['priority'].upper()}] {rec['title']}")
        print(f"  {rec['description']}")
        print(f"  confidence: {rec['confidence']:.2f}")


def show_status(store):
    print_section("STORED HISTORY")
    summary = store.count_summary()
    if not summary:
        print("Nothing stored yet.")
        return
    for key, count in summary.items():
        print(f"{key}: {'unreadable' if count is None else count}")


def run_chat(coach, profile, message):
    if message:
        print(coach.respond(message, profile))
        return

    print(welcome_message(profile))
    print("\nQuick actions:")
    for index, (label, prompt) in enumerate(QUICK_PROMPTS, start=1):
        print(f"  {index}. {label}: \"{prompt}\"")
    print("\nType a question or a quick action number, or an empty line to quit.\n")
    while True:
        try:
            line = input("> ").strip()
        except EOFError:
            break
        if not line:
            break
        print(f"\n{coach.respond(resolve_quick_prompt(line), profile)}\n")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Personalized workout, nutrition, and coaching guidance.")
    parser.add_argument("--profile", type=str, default="", help="Profile YAML path (defaults to config value).")
    parser.add_argument("--db-path", type=str, default="", help="SQLite store path (defaults to config value).")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("plan", help="Show workout, nutrition, and supplement plans.")

    workout = subparsers.add_parser("log-workout", help="Record feedback for a completed workout.")
    workout.add_argument("workout_id", type=str)
    workout.add_argument("--difficulty", choices=DIFFICULTIES, default="just_right")
    workout.add_argument("--enjoyment", type=int, default=5, help="1-5 scale.")
    workout.add_argument("--completion", type=float, default=100.0, help="Completion rate, 0-100.")

    meal = subparsers.add_parser("log-meal", help="Record feedback for a meal.")
    meal.add_argument("meal_id", type=str)
    meal.add_argument("--rating", type=int, required=True, help="1-5 scale.")
    meal.add_argument("--disliked", action="store_true")
    meal.add_argument("--too-salty", action="store_true")
    meal.add_argument("--too-spicy", action="store_true")
    meal.add_argument("--too-sweet", action="store_true")

    progress = subparsers.add_parser("log-progress", help="Record a progress check-in.")
    progress.add_argument("--weight", type=float)
    progress.add_argument("--chest", type=float)
    progress.add_argument("--waist", type=float)
    progress.add_argument("--arms", type=float)
    progress.add_argument("--thighs", type=float)
    progress.add_argument("--strength", type=float, help="Relative strength rating.")
    progress.add_argument("--endurance", type=float, help="Relative endurance rating.")
    progress.add_argument("--consistency", type=float, help="Consistency percentage, 0-100.")

    predict = subparsers.add_parser("predict", help="Predict progress over a timeframe.")
    predict.add_argument("--weeks", type=int, default=4)

    subparsers.add_parser("recommend", help="Show feedback-driven recommendations.")
    subparsers.add_parser("status", help="Show stored history counts.")

    chat = subparsers.add_parser("chat", help="Ask the AI coach.")
    chat.add_argument("message", nargs="?", default="")

    return parser.parse_args(argv)


def main(argv=None):
    """Main application flow."""
    args = parse_args(argv)
    print_banner()

    # Load environment variables
    load_dotenv()

    config = load_config()
    profile_path = args.profile or config.get('profile', {}).get('path', 'profile.yaml')
    db_path = args.db_path or config.get('storage', {}).get('path', 'data/fitmate.db')

    profile = load_profile(profile_path)
    if not profile.get('primaryGoal'):
        print(f"⚠ Warning: no profile found at {profile_path}. Copy profile.example.yaml to get started.")

    store = SQLiteStore(db_path)
    engine = RecommendationEngine(store)
    engine.load_persisted()

    try:
        if args.command == "plan":
            show_plan(engine, profile)

        elif args.command == "log-workout":
            engine.record_workout_feedback(
                build_workout_feedback(
                    workout_id=args.workout_id,
                    difficulty=args.difficulty,
                    enjoyment=args.enjoyment,
                    completion_rate=args.completion,
                )
            )
            print("✓ Workout feedback recorded!")

        elif args.command == "log-meal":
            engine.record_meal_feedback(
                build_meal_feedback(
                    meal_id=args.meal_id,
                    rating=args.rating,
                    liked=not args.disliked,
                    too_salty=args.too_salty or None,
                    too_spicy=args.too_spicy or None,
                    too_sweet=args.too_sweet or None,
                )
            )
            print("✓ Meal feedback recorded!")

        elif args.command == "log-progress":
            performance = None
            if args.strength is not None or args.endurance is not None or args.consistency is not None:
                performance = {
                    "strength": args.strength or 0,
                    "endurance": args.endurance or 0,
                    "consistency": args.consistency or 0,
                }
            engine.record_progress(
                build_progress_entry(
                    weight=args.weight,
                    measurements={
                        "chest": args.chest,
                        "waist": args.waist,
                        "arms": args.arms,
                        "thighs": args.thighs,
                    },
                    workout_performance=performance,
                )
            )
            print("✓ Progress recorded!")

        elif args.command == "predict":
            show_prediction(engine, profile, args.weeks)

        elif args.command == "recommend":
            show_recommendations(engine, profile)

        elif args.command == "status":
            show_status(store)

        elif args.command == "chat":
            api_key_env = config.get('claude', {}).get('api_key_env', 'ANTHROPIC_API_KEY')
            api_key = os.getenv(api_key_env)
            if not api_key:
                print(f"  {api_key_env} not set, coach will use template responses.")
            coach = CoachResponder(api_key=api_key, config=config)
            run_chat(coach, profile, args.message)
    finally:
        store.close()


if __name__ == "__main__":
    main()
