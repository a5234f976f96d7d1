"""
LLM explanation layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Build prompts from the taste profile and the ranked restaurants.
- Call Groq to write a short reason for each recommendation.
- Graceful fallback when the LLM is unavailable or returns invalid output.
"""
