"""
Conversational intake bot that turns chat conversations into initiative tickets.
"""

__version__ = "1.0.0"
