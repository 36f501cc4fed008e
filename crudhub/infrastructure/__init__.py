"""
Infrastructure layer: persistence, mappers and the web adapter.
"""
