"""
Infrastructure services (storage).
"""
