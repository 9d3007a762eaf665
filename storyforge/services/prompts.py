"""Prompt builders and per-task generation defaults for the AI assistant."""

from __future__ import annotations

from storyforge.schemas.ai import (
    ChapterRequest,
    CharacterRequest,
    EditorialRequest,
    PlotRequest,
    SettingRequest,
)

_PREAMBLE = "You are a helpful AI writing assistant for StoryForge, a platform for young writers."

SYSTEM_PROMPTS = {
    "character": f"{_PREAMBLE} Your task is to help create engaging and well-developed characters.",
    "plot": f"{_PREAMBLE} Your task is to help create compelling plot elements that drive the narrative forward.",
    "setting": f"{_PREAMBLE} Your task is to help create rich, immersive settings that enhance the story world.",
    "chapter": f"{_PREAMBLE} Your task is to help write engaging chapters that advance the story.",
    "editorial": f"{_PREAMBLE} Your task is to provide constructive editorial feedback to improve the story.",
}

TEMPERATURE = {"character": 0.7, "plot": 0.6, "setting": 0.7, "chapter": 0.4, "editorial": 0.3}
MAX_TOKENS = {"character": 500, "plot": 800, "setting": 600, "chapter": 1500, "editorial": 400}

DEFAULT_GENRE = "fantasy"
DEFAULT_AUDIENCE = "young adult"

FILTER_NOTES = {
    "strict": "Keep all content gentle and suitable for the youngest readers; avoid violence and frightening detail.",
    "standard": "Keep all content age-appropriate.",
    "relaxed": "Mature themes are acceptable when handled thoughtfully.",
}

CHARACTER_JSON_SHAPE = """{
  "name": "Character Name",
  "short_description": "One sentence description",
  "background": "Character backstory (3-5 sentences)",
  "physical_traits": ["trait1", "trait2", "trait3"],
  "personality_traits": ["trait1", "trait2", "trait3"],
  "goals": ["primary goal", "secondary goal"],
  "fears": ["primary fear", "secondary fear"],
  "skills": ["skill1", "skill2"],
  "voice": "Brief description of how this character speaks",
  "role": "Role in the story",
  "arc": "Potential character arc or development path"
}"""


def _lines(*parts: str | None) -> str:
    return "\n".join(p for p in parts if p)


def _filter_note(level: str | None) -> str:
    return FILTER_NOTES[level or "standard"]


def character_prompt(req: CharacterRequest) -> str:
    genre = req.genre or DEFAULT_GENRE
    audience = req.audience or DEFAULT_AUDIENCE
    traits = req.key_traits or []
    related = req.related_characters or []
    return _lines(
        f"Create a character for a {genre} story appropriate for {audience} readers.",
        "",
        f"The character's name is {req.name}." if req.name else "Please provide a suitable name for the character.",
        f"The character should serve as a {req.role} in the narrative." if req.role else None,
        f"The character should be in the following age range: {req.age_range}." if req.age_range else None,
        f"The character should have the following key traits: {', '.join(traits)}." if traits else None,
        f"This character should have meaningful connections to the following characters: {', '.join(related)}."
        if related
        else None,
        f"This character has {req.narrative_importance or 'supporting'} importance to the overall narrative.",
        "",
        "This character should:",
        "1. Be well-rounded with strengths and flaws",
        "2. Have clear motivations that drive their actions",
        "3. Have a distinctive voice and personality",
        "4. Be relatable and believable",
        "5. Have potential for growth or change throughout the story",
        "",
        "Return the character in the following JSON format:",
        CHARACTER_JSON_SHAPE,
        "",
        f"Make sure all content is age-appropriate for {audience} readers and fits well with the {genre} genre.",
        _filter_note(req.filter_level),
    )


def plot_prompt(req: PlotRequest) -> str:
    points = req.plot_points or []
    characters = req.characters or []
    return _lines(
        f"Generate a plot for a {req.genre or DEFAULT_GENRE} story for {req.audience or DEFAULT_AUDIENCE} readers.",
        f"Build on these plot points: {'; '.join(points)}." if points else None,
        f"Involve these characters: {', '.join(characters)}." if characters else None,
        f"The story takes place in: {req.setting}." if req.setting else None,
        f"The central conflict is {req.conflict_type}." if req.conflict_type else None,
        f"Aim for a {req.desired_length} plot." if req.desired_length else None,
        _filter_note(req.filter_level),
    )


def setting_prompt(req: SettingRequest) -> str:
    features = req.key_features or []
    return _lines(
        f"Generate a setting for a {req.genre or DEFAULT_GENRE} story for {req.audience or DEFAULT_AUDIENCE} readers.",
        f"The setting is a {req.location_type}." if req.location_type else None,
        f"Time period: {req.time_period}." if req.time_period else None,
        f"The mood should feel {req.mood}." if req.mood else None,
        f"Include these features: {', '.join(features)}." if features else None,
        _filter_note(req.filter_level),
    )


def chapter_prompt(req: ChapterRequest) -> str:
    present = req.characters_present or []
    goals = req.goals or []
    return _lines(
        f"Generate a chapter for a {req.genre or DEFAULT_GENRE} story for {req.audience or DEFAULT_AUDIENCE} readers.",
        f"Chapter title: {req.title}." if req.title else None,
        f"Characters present: {', '.join(present)}." if present else None,
        f"Setting: {req.setting}." if req.setting else None,
        f"Previously: {req.previous_chapter_summary}" if req.previous_chapter_summary else None,
        f"The chapter should accomplish: {'; '.join(goals)}." if goals else None,
        f"Target length: about {req.word_count} words." if req.word_count else None,
        _filter_note(req.filter_level),
    )


def editorial_prompt(req: EditorialRequest) -> str:
    focus = req.focus_areas or []
    return _lines(
        f"Provide editorial feedback on the following content: {req.content}",
        f"Focus on: {', '.join(focus)}." if focus else None,
    )


BUILDERS = {
    "character": character_prompt,
    "plot": plot_prompt,
    "setting": setting_prompt,
    "chapter": chapter_prompt,
    "editorial": editorial_prompt,
}


def build_messages(req) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPTS[req.task]},
        {"role": "user", "content": BUILDERS[req.task](req)},
    ]
