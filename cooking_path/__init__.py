"""
Cooking Path - multi-recipe cooking timeline scheduler.
"""

__version__ = "1.0.0"
