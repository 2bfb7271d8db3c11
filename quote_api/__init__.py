# =============================================================================
# QUOTE API
# =============================================================================
# File: __init__.py
# Description: User accounts and quote form storage over a pluggable
#              SQLite / Azure SQL / PostgreSQL data-access layer
# =============================================================================

__version__ = "1.0.0"
