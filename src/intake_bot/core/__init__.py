"""
Core configuration, logging, constants and errors.
"""
