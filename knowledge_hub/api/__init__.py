"""
HTTP API for the knowledge hub
"""
