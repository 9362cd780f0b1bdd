"""AI Student Assistant backend: Gemini-backed study tools over a FastAPI JSON API."""

__version__ = "1.0.0"
