"""
Claim Player Rewards.

Players claim pending item rewards with a chat command; every claim is
recorded in an append-only ledger. Both tables live in JSON files.
"""

__version__ = "0.1.0"
