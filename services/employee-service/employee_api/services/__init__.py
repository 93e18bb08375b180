"""
Service layer - Business logic orchestration.
"""
