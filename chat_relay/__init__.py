"""Chat relay service: shared message board plus LLM provider relay."""

__version__ = "0.1.0"
