"""prepx — consolidate a Git repository into a single text file for LLM context."""

__version__ = "0.1.0"
