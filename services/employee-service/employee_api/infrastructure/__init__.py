"""
Infrastructure layer - Upstream employee API access and retry policy.
"""
