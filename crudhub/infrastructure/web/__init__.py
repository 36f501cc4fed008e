"""
Web adapter: FastAPI routers, dependencies and middleware.
"""
