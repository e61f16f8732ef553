"""Virtual Advisor.

Chat core that routes each user message to one specialist agent, which
answers through an LLM provider or falls back to curated templates.
"""

__version__ = "1.0.0"
