"""
Core infrastructure for the travel history service: database, errors,
logging and request dependencies.
"""
