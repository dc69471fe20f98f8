"""Custom exceptions for newsel."""


class NewselError(Exception):
    """Base class for all newsel exceptions."""

    pass


# ----------------------------------------------------------------------------
# Configuration-time errors
# ----------------------------------------------------------------------------


class ConfigError(NewselError):
    """Base class for errors raised while validating or storing site configs."""

    pass


class DuplicateDomainError(ConfigError):
    """Raised when a new config uses a domain that is already stored."""

    def __init__(self, domain: str, existing_name: str | None = None):
        """Initialize duplicate domain error.

        Args:
            domain: Normalized domain that already has a configuration
            existing_name: Name of the stored configuration, if known

        """
        self.domain = domain
        self.existing_name = existing_name
        suffix = f' ({existing_name})' if existing_name else ''
        super().__init__(f'A configuration already exists for domain: {domain}{suffix}')


class IncompleteSelectorsError(ConfigError):
    """Raised when a config has neither article title nor content selectors."""

    def __init__(self, domain: str):
        """Initialize incomplete selectors error.

        Args:
            domain: Domain of the rejected configuration

        """
        self.domain = domain
        super().__init__(f"Config for '{domain}' needs at least one article title or content selector")


class SelectorValidationFailedError(ConfigError):
    """Raised when a live test extraction against a test URL yields nothing."""

    def __init__(self, domain: str, test_url: str, reason: str, report: object | None = None):
        """Initialize selector validation error.

        Args:
            domain: Domain of the rejected configuration
            test_url: URL the selectors were tested against
            reason: Human readable explanation
            report: Optional SelectorTestResult with per-field details

        """
        self.domain = domain
        self.test_url = test_url
        self.reason = reason
        self.report = report
        super().__init__(f"Selectors for '{domain}' failed on {test_url}: {reason}")


class ConfigNotFoundError(ConfigError):
    """Raised when no configuration exists for a domain or URL."""

    def __init__(self, domain: str):
        """Initialize config not found error.

        Args:
            domain: Domain or URL that was looked up

        """
        self.domain = domain
        super().__init__(f'No site configuration found for: {domain}')


class ConfigLoadError(ConfigError):
    """Raised when the stored configuration file cannot be parsed."""

    pass


class ConfigSaveError(ConfigError):
    """Raised when the configuration file cannot be written."""

    pass


# ----------------------------------------------------------------------------
# Extraction-time errors
# ----------------------------------------------------------------------------


class ExtractionError(NewselError):
    """Raised when content cannot be extracted from a document."""

    pass


class InvalidSelectorError(ExtractionError):
    """Raised by the DOM query layer when a selector has invalid syntax."""

    def __init__(self, selector: str, detail: str):
        """Initialize invalid selector error.

        Args:
            selector: The CSS selector that failed to compile
            detail: Message from the selector engine

        """
        self.selector = selector
        self.detail = detail
        super().__init__(f'Invalid CSS selector "{selector}": {detail}')


class MissingRequiredFieldError(ExtractionError):
    """Raised when both title and content are empty after cleaning."""

    def __init__(self, url: str | None, fields: tuple[str, ...] = ('title', 'content')):
        """Initialize missing field error.

        Args:
            url: URL of the article page, if known
            fields: Fields that resolved to empty

        """
        self.url = url
        self.fields = fields
        where = f' on {url}' if url else ''
        super().__init__(f'Required fields empty{where}: {", ".join(fields)}')


# ----------------------------------------------------------------------------
# Fetch-time errors
# ----------------------------------------------------------------------------


class FetchError(NewselError):
    """Raised when a page cannot be fetched."""

    def __init__(self, url: str, reason: str):
        """Initialize fetch error.

        Args:
            url: URL that could not be fetched
            reason: Why the fetch failed

        """
        self.url = url
        self.reason = reason
        super().__init__(f'Failed to fetch {url}: {reason}')


class BotDetectionError(FetchError):
    """Raised when bot detection is triggered."""

    def __init__(self, url: str, status_code: int, indicators: list[str]):
        """Initialize bot detection error.

        Args:
            url: URL where bot detection was triggered
            status_code: HTTP status code received
            indicators: List of bot detection indicators found

        """
        self.status_code = status_code
        self.indicators = indicators
        super().__init__(url, f'bot detection (status={status_code}): {", ".join(indicators)}')
