"""
Core infrastructure: settings, logging, domain errors and the city store.
"""
