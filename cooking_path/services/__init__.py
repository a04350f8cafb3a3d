"""
Services layer - scheduling, progress tracking and the Claude planner.

Pure Python with no web framework dependencies, so every service can be
tested on its own.
"""
