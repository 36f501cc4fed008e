"""
Use cases for the application layer.
Each use case orchestrates repositories and domain services for one operation.
"""
