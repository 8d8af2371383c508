"""
lingua-cards: language-learning flashcards with per-exercise spaced repetition.
"""

__version__ = "1.0.0"
