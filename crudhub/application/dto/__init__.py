"""
Data transfer objects for the application layer.
"""
