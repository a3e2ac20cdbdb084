"""quizbank: a local question bank with a boolean search language."""

__version__ = "0.1.0"
