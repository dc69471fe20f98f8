"""Admin-facing services."""

from newsel.services.config_service import ConfigPersistenceService

__all__ = ['ConfigPersistenceService']
