"""
Shared helpers: value types, JSON logging setup, formatting utilities.
"""
