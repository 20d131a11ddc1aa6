# src/services/api/__init__.py
"""
HTTP API Caloria AI (FastAPI).
"""
