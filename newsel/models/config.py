"""Pydantic models for stored site configurations.

A site configuration holds ordered CSS selector candidates for a news site's
listing page and article page, plus the text cleaning rules applied to what
those selectors extract. Every selector field is a list whose order is the
fallback order, so it must survive (de)serialization untouched.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer


def _as_selector_list(value: Any) -> list[str]:
    """Coerce a stored selector value into an ordered candidate list.

    Older config files store a single selector string instead of a list, and
    some omit the key entirely.
    """
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(item) for item in value if item is not None]


class ListingSelectors(BaseModel):
    """Selectors used on a listing (index) page.

    Attributes:
        container: Candidates for the repeated element wrapping one article teaser
        title: Candidates for the teaser title, relative to a container
        link: Candidates for the article link, relative to a container
        description: Candidates for the teaser summary, relative to a container

    """

    container: list[str] = Field(default_factory=list, description='Article teaser containers')
    title: list[str] = Field(default_factory=list, description='Teaser title inside a container')
    link: list[str] = Field(default_factory=list, description='Article link inside a container')
    description: list[str] = Field(default_factory=list, description='Teaser summary inside a container')

    @field_validator('container', 'title', 'link', 'description', mode='before')
    @classmethod
    def coerce_selectors(cls, value: Any) -> list[str]:
        return _as_selector_list(value)


class ArticleSelectors(BaseModel):
    """Selectors used on a single article page.

    Attributes:
        title: Candidates for the headline
        content: Candidates for the article body
        date: Candidates for the publication date
        author: Candidates for the byline
        images: Candidates for article images (all matches are collected)

    """

    title: list[str] = Field(default_factory=list, description='Headline')
    content: list[str] = Field(default_factory=list, description='Article body')
    date: list[str] = Field(default_factory=list, description='Publication date')
    author: list[str] = Field(default_factory=list, description='Byline')
    images: list[str] = Field(default_factory=list, description='Article images')

    @field_validator('title', 'content', 'date', 'author', 'images', mode='before')
    @classmethod
    def coerce_selectors(cls, value: Any) -> list[str]:
        return _as_selector_list(value)

    @property
    def is_usable(self) -> bool:
        """True if at least one non-blank title or content candidate exists."""
        return any(s.strip() for s in self.title) or any(s.strip() for s in self.content)


class SelectorSet(BaseModel):
    """Listing and article selectors for one site."""

    listing: ListingSelectors = Field(default_factory=ListingSelectors)
    article: ArticleSelectors = Field(default_factory=ArticleSelectors)


class CleaningRule(BaseModel):
    """A text transform applied to extracted title and content.

    Attributes:
        type: 'regex' removes every match, 'strip' removes exact substrings,
            'replace' substitutes regex matches with ``replacement``
        pattern: Regex (regex/replace) or literal substring (strip)
        description: Free text shown in the admin tooling
        replacement: Literal text used by 'replace' rules

    """

    model_config = ConfigDict(frozen=True)

    type: Literal['regex', 'strip', 'replace']
    pattern: str
    description: str = ''
    replacement: str = ''

    @model_serializer(mode='wrap')
    def serialize_rule(self, handler):
        data = handler(self)
        # replacement only means something for replace rules
        if self.type != 'replace':
            data.pop('replacement', None)
        return data


class SiteMetadata(BaseModel):
    """Encoding and language hints for a site."""

    encoding: str = 'utf-8'
    language: str | None = None


class SiteConfig(BaseModel):
    """Complete scraping configuration for one news site.

    Attributes:
        domain: Unique key; a hostname, optionally followed by a path segment
        name: Display name
        enabled: Soft on/off switch, configs are never deleted
        priority: Lower values are tried first when several configs match
        selectors: Listing and article selector candidates
        cleaning_rules: Rules applied in order to title and content
        metadata: Encoding and language hints

    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    domain: str
    name: str = ''
    enabled: bool = True
    priority: int = 1
    selectors: SelectorSet = Field(default_factory=SelectorSet)
    cleaning_rules: list[CleaningRule] = Field(default_factory=list, alias='cleaningRules')
    metadata: SiteMetadata = Field(default_factory=SiteMetadata)

    @field_validator('domain', mode='before')
    @classmethod
    def strip_domain(cls, value: Any) -> str:
        return str(value or '').strip()

    @field_validator('cleaning_rules', mode='before')
    @classmethod
    def rules_default(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def is_usable(self) -> bool:
        """True if the article selectors can produce a title or content."""
        return self.selectors.article.is_usable

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the stored JSON shape (camelCase keys, all selector arrays present)."""
        return self.model_dump(mode='json', by_alias=True)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'SiteConfig':
        """Build a config from its stored JSON shape."""
        return cls.model_validate(data)
