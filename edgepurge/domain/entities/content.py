"""Content entities as seen by the purge engine.

The content-management system owns storage; these are the read-only
shapes the content repository hands back. Only the fields tag
derivation and eligibility checks need are carried.
"""

from dataclasses import dataclass, field

from edgepurge.domain.enums import ObjectKind


@dataclass(frozen=True)
class PostEntity:
    """A post, page, attachment or custom post type item."""

    id: int
    post_type: str = "post"
    status: str = "publish"
    author_id: int = 0
    url: str | None = None

    kind = ObjectKind.POST

    @property
    def group(self) -> str:
        return self.post_type


@dataclass(frozen=True)
class TermEntity:
    """A taxonomy term (category, tag, custom taxonomy term)."""

    id: int
    taxonomy: str
    term_taxonomy_id: int = 0
    parent_id: int = 0
    url: str | None = None

    kind = ObjectKind.TERM

    @property
    def group(self) -> str:
        return self.taxonomy


@dataclass(frozen=True)
class UserEntity:
    """A user; only authors matter for tagging."""

    id: int
    roles: tuple[str, ...] = field(default_factory=tuple)
    url: str | None = None

    kind = ObjectKind.USER

    @property
    def group(self) -> str:
        return ":".join(self.roles)


ContentEntity = PostEntity | TermEntity | UserEntity


@dataclass(frozen=True)
class SiteInfo:
    """Identity of the site (tenant) the purge engine is serving.

    Attributes:
        url: Base URL of the site; its host is the default purge hostname.
        is_multisite: True when running under a multi-tenant install.
        site_id: Tenant (blog) identifier, used in the multisite tag segment.
        platform_name: Name of the content platform, for the User-Agent.
        platform_version: Version of the content platform.
    """

    url: str
    is_multisite: bool = False
    site_id: int = 1
    platform_name: str = "CMS"
    platform_version: str = "0"
