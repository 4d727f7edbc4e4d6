"""
Data access layer.

Design rules:
- Views call ONLY functions in this package.
- Reads go through service._fallback so a broken backend degrades to demo data.
- Writes take an explicit store and raise StoreError subclasses on failure.
- No env var reads here (config-only).
"""
