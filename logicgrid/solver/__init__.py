"""
Solver module for logic-grid puzzle models.

This module provides the PuLP-based ILP solver wrapper that takes a constraint
system and returns an assignment, and the decoder that turns it into a table.
"""
