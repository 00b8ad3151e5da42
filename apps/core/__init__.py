"""
Core app - Shared infrastructure used by every other app.

Provides:
- i18n string tables (English / Swedish) for the client and print sheets
- Request logging middleware for the /api surface
- The `seed` management command for demo data
"""
