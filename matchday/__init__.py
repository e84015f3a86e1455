"""Matchday squad engine

Balances match attendees into two squads laid out on formations, and turns
post-match peer ballots into player attribute changes.
Uses NumPy only for the injectable, reproducible shuffle and vector scoring.
"""

__version__ = "0.1.0"
