"""
crudhub - billing and catalog CRUD service.
"""

__version__ = "1.0.0"
