"""User id derivation."""

import re

_UNSAFE_ID_CHARS = re.compile(r"[^a-zA-Z0-9_-]")


def derive_user_id(email: str) -> str:
    """
    Derive the cross-system user id from an email address.

    Every character outside ``[A-Za-z0-9_-]`` becomes ``_``, so
    ``a.b@x.com`` maps to ``a_b_x_com``. Pure and deterministic: the same
    email always yields the same id, in Stream and in the database.
    """
    return _UNSAFE_ID_CHARS.sub("_", email)
