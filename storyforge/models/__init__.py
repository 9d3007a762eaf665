from storyforge.models.ai import AIGeneration, GenerationMetadata, TokenUsage
from storyforge.models.base import Record
from storyforge.models.chapter import Chapter, ChapterEdit, word_count
from storyforge.models.character import Character, Relationship
from storyforge.models.export import Export, ExportConfiguration, ExportJob
from storyforge.models.plot import Plot, PlotElement
from storyforge.models.project import Collaborator, Project
from storyforge.models.setting import Setting
from storyforge.models.story_object import StoryObject
from storyforge.models.user import User, UserPreferences

__all__ = [
    "AIGeneration",
    "Chapter",
    "ChapterEdit",
    "Character",
    "Collaborator",
    "Export",
    "ExportConfiguration",
    "ExportJob",
    "GenerationMetadata",
    "Plot",
    "PlotElement",
    "Project",
    "Record",
    "Relationship",
    "Setting",
    "StoryObject",
    "TokenUsage",
    "User",
    "UserPreferences",
    "word_count",
]
