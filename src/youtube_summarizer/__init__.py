"""YouTube video summaries from metadata and captions, generated by Gemini."""

__version__ = "0.3.0"
