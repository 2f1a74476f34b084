"""camel-leaked — catch hardcoded secrets in code changes before they merge."""

__version__ = "1.0.0"
