"""
Puzzle definitions: types, JSON storage and worked examples.
"""
