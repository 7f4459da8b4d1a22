"""
Sigil - Keys and transaction signing.
"""
