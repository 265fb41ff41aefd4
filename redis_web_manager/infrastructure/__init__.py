"""
Infrastructure Module

Backend sessions and their registry, and the saved connection profile store.
"""
