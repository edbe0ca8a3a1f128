"""Session orchestration: the turn loop and side commands over one engine instance.

Kept free of FastAPI concerns so it can be driven by API routes, a CLI, or tests.
"""
