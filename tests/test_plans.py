import unittest

from fitmate.plans import (
    calculate_bmi,
    generate_nutrition_plan,
    generate_supplements,
    generate_workout_plan,
)


class WorkoutPlanTests(unittest.TestCase):
    def test_beginner_knee_pain_swaps_squats_and_lunges(self):
        profile = {"fitnessLevel": "beginner", "workoutFrequency": "3_days", "injuries": ["Knee Pain"]}
        plan = generate_workout_plan(profile)

        self.assertEqual(len(plan), 3)
        self.assertEqual(plan[0]["name"], "Full Body Strength")
        self.assertEqual(
            plan[0]["exercises"],
            ["Push-ups", "Plank", "Leg Press (light)", "Stationary Bike"],
        )
        self.assertEqual(plan[0]["sets"], 3)

    def test_frequency_limits_workouts_to_pool_size(self):
        intermediate = generate_workout_plan({"fitnessLevel": "intermediate", "workoutFrequency": "5_days"})
        self.assertEqual([w["name"] for w in intermediate], ["Push Day", "Pull Day", "Leg Day", "Cardio HIIT"])

        advanced = generate_workout_plan({"fitnessLevel": "advanced", "workoutFrequency": "2_days"})
        self.assertEqual([w["name"] for w in advanced], ["Heavy Compound", "Olympic Lifts"])

    def test_unknown_level_and_frequency_use_defaults(self):
        plan = generate_workout_plan({"fitnessLevel": "", "workoutFrequency": None})
        self.assertEqual(len(plan), 3)
        self.assertEqual(plan[1]["name"], "Cardio & Core")

    def test_shoulder_issues_drop_press_and_push(self):
        profile = {"fitnessLevel": "intermediate", "workoutFrequency": "4_days", "injuries": ["Shoulder Issues"]}
        push_day = generate_workout_plan(profile)[0]
        self.assertEqual(
            push_day["exercises"],
            ["Dips", "Light Resistance Bands", "Physical Therapy Exercises"],
        )

    def test_back_pain_drops_deadlifts(self):
        profile = {"fitnessLevel": "advanced", "workoutFrequency": "1_days", "injuries": ["Back Pain"]}
        heavy = generate_workout_plan(profile)[0]
        self.assertNotIn("Deadlifts", heavy["exercises"])
        self.assertEqual(heavy["exercises"][-2:], ["Cat-Cow Stretches", "Swimming"])

    def test_difficulty_adjustment_scales_sets(self):
        profile = {"fitnessLevel": "beginner", "workoutFrequency": "3_days"}
        self.assertEqual(generate_workout_plan(profile, difficulty_adjustment=1.2)[0]["sets"], 4)
        self.assertEqual(generate_workout_plan(profile, difficulty_adjustment=0.8)[0]["sets"], 2)


class NutritionPlanTests(unittest.TestCase):
    def test_male_moderate_maintenance(self):
        plan = generate_nutrition_plan(
            {"gender": "male", "activityLevel": "moderate", "primaryGoal": "maintenance", "weight": 80.0}
        )
        self.assertEqual(
            plan,
            {"calories": 3410, "protein": 176, "carbs": 341, "fats": 95, "meals": 4},
        )

    def test_goal_and_activity_multipliers(self):
        plan = generate_nutrition_plan(
            {"gender": "male", "activityLevel": "very", "primaryGoal": "muscle_gain", "weight": 90.0, "preferredMeals": 5}
        )
        self.assertEqual(plan["calories"], 4364)
        self.assertEqual(plan["meals"], 5)

    def test_unknown_activity_uses_moderate(self):
        known = generate_nutrition_plan({"gender": "female", "activityLevel": "moderate", "weight": 60})
        unknown = generate_nutrition_plan({"gender": "female", "activityLevel": "couch", "weight": 60})
        self.assertEqual(known, unknown)
        self.assertEqual(known["calories"], 2790)


class SupplementTests(unittest.TestCase):
    def test_base_supplements_always_present(self):
        names = [s["name"] for s in generate_supplements({"primaryGoal": "flexibility"})]
        self.assertEqual(names, ["Whey Protein", "Multivitamin"])

    def test_goal_specific_supplements(self):
        names = [s["name"] for s in generate_supplements({"primaryGoal": "muscle_gain"})]
        self.assertEqual(names[2:], ["Creatine Monohydrate", "BCAAs"])

        names = [s["name"] for s in generate_supplements({"primaryGoal": "endurance"})]
        self.assertIn("Electrolytes", names)

    def test_joint_injuries_add_joint_support(self):
        names = [
            s["name"]
            for s in generate_supplements({"primaryGoal": "weight_loss", "injuries": ["Arthritis"]})
        ]
        self.assertEqual(
            names,
            [
                "Whey Protein",
                "Multivitamin",
                "L-Carnitine",
                "Green Tea Extract",
                "Glucosamine & Chondroitin",
                "Omega-3",
            ],
        )


class BMITests(unittest.TestCase):
    def test_bmi(self):
        self.assertAlmostEqual(calculate_bmi({"weight": 70.0, "height": 175.0}), 22.857, places=3)

    def test_bmi_unknown_height(self):
        self.assertIsNone(calculate_bmi({"weight": 70.0, "height": None}))


if __name__ == "__main__":
    unittest.main()
