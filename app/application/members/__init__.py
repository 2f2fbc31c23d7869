"""
Use cases for the members bounded context.
"""
