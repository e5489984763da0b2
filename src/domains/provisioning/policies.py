# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Identifier and initial-password policies for new accounts.

Teacher handles are derived from the surname plus a random three digit
suffix (``"okafor"`` + ``"417"`` -> ``"okafor417"``). Collisions are not
checked up front; the identity provider rejects duplicates and the
provisioner asks the policy for a fresh handle.

Initial passwords come from one of two policies:

- ``role_default``: the well-known role name (``"teacher"`` / ``"student"``),
  to be changed on first login
- ``random``: a per-account temporary password
"""

import re
import secrets
import string
from collections.abc import Callable
from typing import Literal

from src.domains.errors import ValidationError

PasswordPolicyName = Literal["role_default", "random"]

SUFFIX_MIN = 100
SUFFIX_MAX = 999

_NON_ALNUM = re.compile(r"[^a-z0-9]")

# Avoids characters that are easy to misread when handed out on paper
_RANDOM_ALPHABET = "".join(
    c for c in string.ascii_letters + string.digits if c not in "0O1lI"
)


def extract_surname(display_name: str) -> str:
    """Return the lowercase alphanumeric surname of a display name.

    The surname is the last whitespace-separated token. Tokens that are
    empty after stripping punctuation are skipped.

    Raises:
        ValidationError: If no usable surname can be found.
    """
    for token in reversed(display_name.split()):
        surname = _NON_ALNUM.sub("", token.lower())
        if surname:
            return surname
    raise ValidationError(
        "display_name must contain at least one letter or digit",
        details={"field": "display_name"},
    )


def _random_suffix() -> int:
    return SUFFIX_MIN + secrets.randbelow(SUFFIX_MAX - SUFFIX_MIN + 1)


class TeacherHandlePolicy:
    """Builds teacher login handles as surname plus random suffix."""

    def __init__(self, suffix_source: Callable[[], int] | None = None) -> None:
        """Initialize the policy.

        Args:
            suffix_source: Callable returning a suffix in [100, 999].
                Defaults to a cryptographically random source.
        """
        self._suffix_source = suffix_source or _random_suffix

    def generate(self, display_name: str) -> str:
        """Generate a handle for a display name."""
        suffix = self._suffix_source()
        if not SUFFIX_MIN <= suffix <= SUFFIX_MAX:
            raise ValueError(f"Handle suffix {suffix} outside [{SUFFIX_MIN}, {SUFFIX_MAX}]")
        return f"{extract_surname(display_name)}{suffix}"


class PasswordPolicy:
    """Chooses the initial password of a new account."""

    def __init__(self, name: PasswordPolicyName = "role_default", length: int = 12) -> None:
        if name not in ("role_default", "random"):
            raise ValueError(f"Unknown password policy: {name}")
        if length < 8:
            raise ValueError("Random passwords must be at least 8 characters")
        self.name = name
        self.length = length

    def initial_password(self, role: str) -> str:
        """Return the initial password for an account of ``role``."""
        if self.name == "role_default":
            return role
        return "".join(secrets.choice(_RANDOM_ALPHABET) for _ in range(self.length))
