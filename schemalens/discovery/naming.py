"""Relationship naming conventions."""

import re

_WORD_SPLIT = re.compile(r"[_\-\s]+")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def to_camel_case(name: str) -> str:
    """Convert ``user_profile`` / ``UserProfile`` / ``user-profile`` to ``userProfile``."""
    words = []
    for chunk in _WORD_SPLIT.split(name.strip()):
        words.extend(w for w in _CAMEL_BOUNDARY.split(chunk) if w)
    if not words:
        return ""
    return words[0].lower() + "".join(word[:1].upper() + word[1:].lower() for word in words[1:])


def pluralize(word: str) -> str:
    """Naive English pluralization; leaves already-plural ``...s`` words alone."""
    if not word:
        return word
    lower = word.lower()
    if lower.endswith("y") and not lower.endswith(("ay", "ey", "iy", "oy", "uy")):
        return word[:-1] + "ies"
    if lower.endswith(("ss", "sh", "ch", "x", "z")):
        return word + "es"
    if lower.endswith("s"):
        return word
    return word + "s"


def relationship_name(column: str, referenced_table: str) -> str:
    """Forward (to-one) relationship name from a foreign key column.

    ``author_id`` -> ``author``, ``parentId`` -> ``parent``. When stripping
    the key suffix leaves nothing (a column called ``id``), the referenced
    table name is used instead.
    """
    name = column
    if name.lower().endswith("_id"):
        name = name[:-3]
    elif name.endswith("Id") and len(name) > 2:
        name = name[:-2]
    if not name or name.lower() == "id":
        name = referenced_table
    return to_camel_case(name)


def reverse_relationship_name(table: str, column: str, qualify: bool = False) -> str:
    """Reverse (to-many) relationship name: the owning table, pluralized.

    With ``qualify`` the forward name of the column is prefixed, so that two
    foreign keys from ``messages`` to ``users`` become ``senderMessages``
    and ``recipientMessages`` rather than colliding on ``messages``.
    """
    name = pluralize(to_camel_case(table))
    if not qualify:
        return name
    prefix = relationship_name(column, table)
    return prefix + name[:1].upper() + name[1:]
