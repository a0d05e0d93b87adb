"""
Sincronizacion one-way de posts: esa -> DatoCMS.

Disparada por webhooks de esa o por un re-sync completo (CLI / endpoint).
"""

__version__ = "1.0.0"
