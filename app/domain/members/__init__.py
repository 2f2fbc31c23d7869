"""
Members bounded context: the Member entity and its repository port.
"""
