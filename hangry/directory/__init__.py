"""
Restaurant directory integration.

Responsibilities:
- Query the business directory for restaurants around a location.
- Convert raw listings into the canonical Candidate schema.
- Serve a fixed sample set whenever the directory is unavailable.
"""
