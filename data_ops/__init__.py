"""
Data operations package: CSV loading and the in-memory car dataset.
"""
