"""In-memory content repository.

Stands in for the content-management system when none is wired in, and
backs the tests. Posts, terms and users are registered explicitly;
term assignments are kept per (post, taxonomy).
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence

from edgepurge.domain.entities.content import (
    PostEntity,
    SiteInfo,
    TermEntity,
    UserEntity,
)


class InMemoryContentRepository:
    """Dict-backed implementation of IContentRepository."""

    def __init__(self, site: SiteInfo, taxonomies: Iterable[str] = ("category", "post_tag")) -> None:
        self._site = site
        self._taxonomies = list(taxonomies)
        self._posts: dict[int, PostEntity] = {}
        self._terms: dict[int, TermEntity] = {}
        self._users: dict[int, UserEntity] = {}
        self._assignments: dict[tuple[int, str], list[int]] = defaultdict(list)

    # ---- registration ----

    def add_post(self, post: PostEntity) -> PostEntity:
        self._posts[post.id] = post
        return post

    def add_term(self, term: TermEntity) -> TermEntity:
        self._terms[term.id] = term
        if term.taxonomy not in self._taxonomies:
            self._taxonomies.append(term.taxonomy)
        return term

    def add_user(self, user: UserEntity) -> UserEntity:
        self._users[user.id] = user
        return user

    def assign_terms(self, post_id: int, taxonomy: str, term_ids: Iterable[int]) -> None:
        """Replace the post's terms in taxonomy."""
        self._assignments[(post_id, taxonomy)] = list(term_ids)

    # ---- IContentRepository ----

    def site_info(self) -> SiteInfo:
        return self._site

    def get_post(self, post_id: int) -> PostEntity | None:
        return self._posts.get(post_id)

    def get_term(self, term_id: int, taxonomy: str = "") -> TermEntity | None:
        term = self._terms.get(term_id)
        if term is None or (taxonomy and term.taxonomy != taxonomy):
            return None
        return term

    def get_user(self, user_id: int) -> UserEntity | None:
        return self._users.get(user_id)

    def get_taxonomies(self) -> list[str]:
        return list(self._taxonomies)

    def get_post_term_ids(self, post_id: int, taxonomy: str) -> list[int]:
        return list(self._assignments.get((post_id, taxonomy), ()))

    def get_term_post_ids(
        self,
        term_id: int,
        taxonomy: str,
        post_types: Sequence[str],
        post_statuses: Sequence[str],
    ) -> list[int]:
        post_ids = []
        for (post_id, assigned_taxonomy), term_ids in self._assignments.items():
            post = self._posts.get(post_id)
            if (
                assigned_taxonomy == taxonomy
                and term_id in term_ids
                and post is not None
                and post.post_type in post_types
                and post.status in post_statuses
            ):
                post_ids.append(post_id)
        return sorted(post_ids)

    def get_term_ancestor_ids(self, term_id: int, taxonomy: str) -> list[int]:
        """Walk parent links nearest-first; stops on cycles or missing parents."""
        ancestors: list[int] = []
        term = self.get_term(term_id, taxonomy)
        while term is not None and term.parent_id and term.parent_id not in ancestors:
            if term.parent_id == term_id:
                break
            ancestors.append(term.parent_id)
            term = self.get_term(term.parent_id, taxonomy)
        return ancestors
