"""Derivation and validation of notification dedupe keys.

A dedupe key scopes uniqueness per recipient: the store keeps at most one
notification for each ``(recipient_id, dedupe_key)`` pair.

``build_dedupe_key`` percent-encodes every component before joining them with
``:`` and writes a missing component as ``-``, so two different component
tuples never produce the same key and keys never contain whitespace.
"""

from __future__ import annotations

from urllib.parse import quote

MAX_DEDUPE_KEY_LENGTH = 255

_SEPARATOR = ":"
_MISSING = "-"


def _escape(component: object) -> str:
    if component is None:
        return _MISSING
    encoded = quote(str(component), safe="")
    return "%2D" if encoded == _MISSING else encoded


def build_dedupe_key(
    event_key: str, entity_type: str, entity_id: str | int, actor_id: int | None
) -> str:
    """Return the key identifying one occurrence of ``event_key`` on an entity."""

    return _SEPARATOR.join(
        _escape(part) for part in (event_key, entity_type, entity_id, actor_id)
    )


def scoped_dedupe_key(event_key: str, *tokens: str | int | None) -> str:
    """Return ``<event_key>:<token>[:<token>...]`` for callers owning unique tokens."""

    if not tokens:
        raise ValueError("At least one dedupe token is required")
    return _SEPARATOR.join([_escape(event_key), *(_escape(token) for token in tokens)])


def validate_dedupe_key(key: str | None) -> str | None:
    """Return an error message when ``key`` is unusable, ``None`` otherwise."""

    if not key:
        return "A chave de deduplicação é obrigatória"
    if len(key) > MAX_DEDUPE_KEY_LENGTH:
        return "A chave de deduplicação excede 255 caracteres"
    if any(char.isspace() or not char.isprintable() for char in key):
        return "A chave de deduplicação contém espaços ou caracteres de controle"
    return None


__all__ = [
    "MAX_DEDUPE_KEY_LENGTH",
    "build_dedupe_key",
    "scoped_dedupe_key",
    "validate_dedupe_key",
]
