"""
Core types: categories, entity references and exceptions.
"""
