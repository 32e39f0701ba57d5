from ..schemas import GenerationProfile, Goal, MacroTargets

# grams per kg of body weight
BASE_PER_KG = {"protein": 2.0, "carbs": 3.5, "fats": 0.8}

GOAL_FACTORS = {
    Goal.WEIGHT_LOSS: {"protein": 1.1, "carbs": 0.6, "fats": 0.8},
    Goal.MUSCLE_GAIN: {"protein": 1.25, "carbs": 1.4, "fats": 1.2},
}


def daily_macro_targets(profile: GenerationProfile) -> MacroTargets:
    factors = GOAL_FACTORS.get(profile.goal, {})
    values = {
        macro: round(profile.weight * per_kg * factors.get(macro, 1.0))
        for macro, per_kg in BASE_PER_KG.items()
    }
    return MacroTargets(**values)
