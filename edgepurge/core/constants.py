"""Core constants: tag codes, purge defaults, API paths and settings schema.

Single source of truth for tag structure and the purge settings schema.
"""

from typing import Any

# Tag structure: {site-prefix}-{code}-{value}
TAG_SEP = "-"
TAG_CODES: dict[str, str] = {
    "post": "p",
    "term": "t",
    "author": "a",
    "template": "tm",
    "multisite": "s",
}
ALL_TAG_SUFFIX = "all"

# Template tags aggregating arbitrary content; purged on every content change.
ALWAYS_PURGED_TEMPLATES: tuple[str, ...] = ("post", "home", "feed", "404")

# Eligibility allow-lists (filterable through the hook registry).
DEFAULT_PURGE_POST_TYPES: tuple[str, ...] = ("post", "page")
DEFAULT_PURGE_POST_STATUSES: tuple[str, ...] = ("publish", "trash", "future", "draft")
DEFAULT_CACHEABLE_TAXONOMIES: tuple[str, ...] = ("post_tag", "category")

# Event actions that trigger a purge.
DEFAULT_POST_ACTIONS: tuple[str, ...] = (
    "save_post",
    "deleted_post",
    "trashed_post",
    "delete_attachment",
    "future_to_publish",
)
DEFAULT_TERM_ACTIONS: tuple[str, ...] = ("edit_term", "delete_term")

# Context fallbacks when a purge setting is blank.
DEFAULT_PURGE_TYPE = "invalidate"
DEFAULT_PURGE_METHOD = "url"
DEFAULT_PURGE_NETWORK = "staging"

# Fast Purge v3 API
PURGE_PATH_TEMPLATE = "/ccu/v3/{purge_type}/{purge_method}/{purge_network}"
CREDENTIALS_CHECK_PATH = "/-/client-api/active-grants/implicit"

# Normalized error messages
ERR_API = "AKAMAI_API_ERROR: {message}."
ERR_HTTP = "HTTP_ERROR: {code} – {reason}."
ERR_BAD_CLIENT = "AKAMAI_PLUGIN_INTERNAL: bad auth client"
ERR_UNEXPECTED_RESPONSE = (
    "AKAMAI_PLUGIN_INTERNAL: error or invalid HTTP response returned"
)
ERR_URL_WITHOUT_HOSTNAME = (
    "AKAMAI_PLUGIN_INTERNAL: can not create URL purge request without hostname"
)

# Purge settings schema. get_settings() always returns every key below.
DEFAULT_OPTIONS: dict[str, Any] = {
    "unique-sitecode": "",
    "log-errors": 0,
    "log-purges": 0,
    "emit-cache-control": 0,
    "emit-cache-tags": 0,
    "cache-default-header": "",
    "cache-related-tags": 1,
    "purge-on-update": 0,
    "purge-network": "all",
    "purge-type": "invalidate",
    "purge-method": "tags",
    "purge-related": 1,
    "purge-default": 1,
    "purge-on-comment": 0,
    "purge-cpcodes": "",
    "version": "",
}
DEFAULT_CREDENTIALS: dict[str, str] = {
    "host": "",
    "access-token": "",
    "client-token": "",
    "client-secret": "",
}
CREDENTIALS_KEY = "credentials"
HOSTNAME_KEY = "hostname"

# Response headers
EDGE_CACHE_TAG_HEADER = "Edge-Cache-Tag"
CACHE_CONTROL_HEADER = "Cache-Control"
