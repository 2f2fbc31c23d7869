"""
Infrastructure adapters for the members bounded context.
"""
