"""
Gastrak Test Suite

Structure:
- unit/: configuration parsing, data snapshot reads, template values
- integration/: HTTP behavior of the FastAPI app through TestClient
"""
