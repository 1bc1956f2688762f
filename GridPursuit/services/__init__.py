"""
Services: layout files, JSON configuration and batch game analysis.
"""
