"""
Services layer - business logic for report ingestion and moderation.

DESIGN PRINCIPLE:
- Services contain business logic, NOT routes
- AI moderation decisions are made here, never in a route handler
- Storage is reached only through ReportRepository
"""
