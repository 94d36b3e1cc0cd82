"""Prompt builders for the generation services."""

from hairstyle_helper.domain.preferences import Preferences
from hairstyle_helper.domain.suggestions import Suggestion


def build_suggestions_prompt(preferences: Preferences) -> str:
    """Embed all four preference fields verbatim, empty ones included."""
    return (
        "Based on the following preferences, suggest 5 hairstyle ideas. "
        "Provide the suggestions in a JSON array with each element containing "
        '"name" and "description" fields.\n'
        "Preferences:\n"
        f"- Hair Length: {preferences.hair_length}\n"
        f"- Hair Type: {preferences.hair_type}\n"
        f"- Desired Style: {preferences.desired_style}\n"
        f"- Color Preference: {preferences.color_preference}"
    )


def build_image_prompt(preferences: Preferences, suggestion: Suggestion) -> str:
    return (
        f"Generate an image of a person with {preferences.hair_length} "
        f"{preferences.hair_type} hair styled as {suggestion.name} "
        f"with {preferences.color_preference} color."
    )


def build_narration_text(preferences: Preferences, suggestion: Suggestion) -> str:
    return (
        f"The {suggestion.name} is a {preferences.desired_style} hairstyle "
        f"that {suggestion.description}"
    )
