"""
Job posting to Blogger publisher: LLM drafting, CLI and WhatsApp bot.
"""

__version__ = "0.1.0"
