"""
HTTP surface for the follow-up engine.
"""
