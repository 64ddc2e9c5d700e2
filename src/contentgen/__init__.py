"""Content generation over multiple LLM providers with prioritized fallback."""

__version__ = "0.1.0"
