"""StoryForge backend: projects, characters, plots, chapters and AI-assisted writing."""

__version__ = "0.1.0"
