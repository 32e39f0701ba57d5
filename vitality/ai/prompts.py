import json

from ..schemas import GenerationProfile, Goal, Language


def meal_plan_prompt(profile: GenerationProfile, language: Language, days: int) -> str:
    goal = profile.goal.value
    return f"""
    Create a {days}-day elite nutritional strategy and MEAL PREP GUIDE for a user with the following profile:
    {json.dumps(profile.prompt_context())}. Goal: {goal}.

    CRITICAL MANDATE:
    1. Focus on REAL WHOLE FOODS as the primary meal options.
    2. Structure each day as a COMPLETE 24-hour itinerary: breakfast, lunch, dinner, snacks and a supplement protocol.
    3. Include a "Prep Strategy" that consolidates a categorized shopping list and batch-cooking tasks for the {days} days.
    4. Tailor macros specifically for the goal: {goal}.
    5. Provide ONE OPTIONAL product substitution per meal for "Elite Efficiency".
    6. Every calorie and macro value must be a non-negative number.

    Return the response in {language.display_name}.
    """


def workout_plan_prompt(profile: GenerationProfile, language: Language, days: int) -> str:
    level = profile.experience_level.value
    return f"""
    Create a {days}-day elite split workout plan for a {level} user.
    Context: {json.dumps(profile.prompt_context())}.
    Goal: {profile.goal.value}.
    MANDATORY: Tailor exercise choice, sets, and reps strictly to the {level} experience level.
    For each exercise, provide sets, reps, target muscles, a "Coaching Cue", a detailed "Description"
    and an intensity of Low, Moderate, High or Elite.
    Return in {language.display_name}.
    """


def venue_discovery_prompt(location: str, goal: Goal, language: Language) -> str:
    return f"""
    Find the best high-end gyms and fitness centers in {location} for the goal of {goal.value}.
    I need precise names, addresses, and ratings.
    Crucially, I need the latitude and longitude coordinates for each place found so I can map them accurately.
    Return results in {language.display_name}.
    """


def venue_extraction_prompt(discovery_text: str, grounding_chunks: list[dict]) -> str:
    return f"""
    Extract a JSON list of gyms from the following search results.
    Search Result Text: {discovery_text}
    Grounding Context: {json.dumps(grounding_chunks)}

    Requirements:
    1. You MUST find or estimate latitude (lat) and longitude (lng) for EVERY gym.
    2. If coordinates aren't in the metadata, use your knowledge of the address to provide approximate coordinates.
    3. Coordinates MUST be numbers.
    4. distance is in miles.
    """


def meal_image_prompt(subject: str) -> str:
    return (
        f"A high-end, professional food photography shot of a healthy {subject}. "
        "The lighting is soft and natural. Elegant plating on a dark, textured stone background. "
        "Macro shot showing fresh ingredients, vibrant colors, and appetizing textures. "
        "Ultra-high definition, editorial style."
    )


def image_edit_prompt(instruction: str) -> str:
    return f"Modify this meal image: {instruction}. Maintain the professional aesthetic and lighting."


def exercise_video_prompt(subject: str) -> str:
    return (
        f"A 3D educational demonstration of a fitness professional performing a perfect {subject}. "
        "Cinematic gym lighting. Camera angle: side or 45-degree view. "
        "Extreme focus on proper form, full range of motion, and muscle contraction. "
        "No text overlays. Ensure biomechanical accuracy and postural alignment."
    )


def assistant_instruction(profile: GenerationProfile, language: Language) -> str:
    return f"""
    You are the Vitality Elite AI Assistant, a world-class trainer and nutritionist.
    User profile: {json.dumps(profile.prompt_context())}.
    IMPORTANT: You must communicate entirely in {language.display_name}.
    Keep responses professional, concise and motivating.
    """

