"""
Theurgy - Command implementations for Nuntius.

Each module corresponds to a top-level CLI command:
- keygen: Create the local signing wallet
- send:   Sign, submit and (optionally) wait for a transaction
- status: Point-in-time status of a transaction
- track:  Wait for an already-submitted transaction
"""
