"""Resolve ``@mentions`` written in free text to user ids."""

from __future__ import annotations

import re
import unicodedata
from collections import defaultdict
from collections.abc import Iterable, Sequence

from sqlalchemy.orm import Session

from app.domain.entities import User
from app.infrastructure.repositories import UserRepository

# ``@`` at the start, after whitespace or after an opening bracket. Word runs
# may be joined by ``.`` or ``-``; anything else ends the token.
MENTION_PATTERN = re.compile(r"(?<![^\s(\[{])@(\w+(?:[.\-]\w+)*)", re.UNICODE)


def normalize_mention_token(value: str | None) -> str:
    """Return ``value`` without diacritics, lowercased and identifier-safe."""

    if not value:
        return ""
    decomposed = unicodedata.normalize("NFKD", value)
    stripped = "".join(char for char in decomposed if not unicodedata.combining(char))
    return re.sub(r"[^a-z0-9]+", "_", stripped.lower()).strip("_")


def _strip_accents(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(char for char in decomposed if not unicodedata.combining(char)).lower()


def _build_lookup(users: Iterable[User]) -> dict[str, set[int]]:
    lookup: dict[str, set[int]] = defaultdict(set)
    for user in users:
        if not user.id or not user.is_eligible_recipient():
            continue
        for alias in (user.name, user.first_name, user.email_local_part):
            key = normalize_mention_token(alias)
            if key:
                lookup[key].add(user.id)
    return lookup


def _multi_word_matches(
    text: str, users: Sequence[User], lookup: dict[str, set[int]]
) -> list[int]:
    """Find ``@First Last`` mentions of users whose name has several words.

    A name is skipped when its normalized form is an alias of any other user
    in ``lookup``.
    """

    names: dict[str, int] = {}
    for user in users:
        if not user.id or not user.is_eligible_recipient():
            continue
        key = normalize_mention_token(user.name)
        if "_" not in key or lookup.get(key) != {user.id}:
            continue
        names[key] = user.id

    haystack = _strip_accents(text)
    found: list[tuple[int, int]] = []
    for key, user_id in names.items():
        words = key.split("_")
        pattern = r"(?<![^\s(\[{])@" + r"[\s_.\-]+".join(map(re.escape, words)) + r"(?!\w)"
        match = re.search(pattern, haystack)
        if match:
            found.append((match.start(), user_id))
    return [user_id for _, user_id in sorted(found)]


def extract_mentions(
    text: str | None,
    users: Sequence[User],
    explicit_ids: Iterable[int | None] = (),
) -> list[int]:
    """Return the distinct ids mentioned in ``text``.

    A token resolves only when it maps to exactly one eligible user; tokens
    matching nobody or several users are ignored. ``explicit_ids`` are always
    appended.
    """

    resolved: list[int] = []
    if text:
        lookup = _build_lookup(users)
        for match in MENTION_PATTERN.finditer(text):
            candidates = lookup.get(normalize_mention_token(match.group(1)), set())
            if len(candidates) == 1:
                resolved.append(next(iter(candidates)))
        resolved.extend(_multi_word_matches(text, users, lookup))
    resolved.extend(user_id for user_id in explicit_ids if user_id)

    seen: set[int] = set()
    ordered: list[int] = []
    for user_id in resolved:
        if user_id not in seen:
            seen.add(user_id)
            ordered.append(user_id)
    return ordered


def resolve_mentions(
    session: Session,
    text: str | None,
    explicit_ids: Iterable[int | None] = (),
) -> list[int]:
    """Resolve mentions in ``text`` against the active users in the store."""

    users: Sequence[User] = []
    if text and "@" in text:
        users = UserRepository(session).list_active()
    return extract_mentions(text, users, explicit_ids)


__all__ = [
    "MENTION_PATTERN",
    "extract_mentions",
    "normalize_mention_token",
    "resolve_mentions",
]
