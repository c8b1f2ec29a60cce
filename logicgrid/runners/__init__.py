"""
End-to-end runners: kernel pipeline, diagnostics and CLI.
"""
