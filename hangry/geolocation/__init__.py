"""
Geolocation.

Responsibilities:
- Resolve an approximate user position for distance scoring.
- Bound every lookup with a timeout and degrade to the text location.
"""
