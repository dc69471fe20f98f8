"""Site configuration storage and usage statistics."""

from newsel.storage.persistence import ConfigFile
from newsel.storage.store import SiteConfigStore
from newsel.storage.usage import UsageTracker, confidence_for

__all__ = ['ConfigFile', 'SiteConfigStore', 'UsageTracker', 'confidence_for']
