"""
Revoked JWT ids. Lives in process memory, so a restart forgets logouts.
"""

BLOCKLIST = set()
