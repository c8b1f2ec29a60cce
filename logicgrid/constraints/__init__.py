"""
Generic linear-constraint plumbing and x-vector indexing.
"""
