"""Core game rules: movement, apple placement, the calculator, and event records.

Kept free of FastAPI and Redis so it can be driven directly from tests.
"""
