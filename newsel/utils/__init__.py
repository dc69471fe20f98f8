"""Utility components for newsel."""

from newsel.utils.domains import absolute_url, match_length, normalize_domain
from newsel.utils.files import init_newsel
from newsel.utils.headers import HeaderGenerator, UserAgentRotator
from newsel.utils.retry import get_retryer, log_retry

__all__ = [
    'HeaderGenerator',
    'UserAgentRotator',
    'absolute_url',
    'get_retryer',
    'init_newsel',
    'log_retry',
    'match_length',
    'normalize_domain',
]
