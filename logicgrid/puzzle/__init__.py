"""
Puzzle model and clue builders.
"""
