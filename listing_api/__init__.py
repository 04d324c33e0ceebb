"""
HTTP front-end for the first organic listing engine.
"""
