"""
ResuMate - student/alumni mentorship and placement backend.

Architecture:
- MongoDB: users, alumni directory, mentor/student profiles, jobs, sessions
- n8n webhook: resume parsing (file -> structured JSON)
- AI provider (Anthropic / Groq / DeepSeek): matching and resume insights,
  with rule-based fallback scoring when it is unavailable
"""

__version__ = "1.0.0"
