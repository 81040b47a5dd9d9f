"""Matching configuration.

MatchConfig is a frozen dataclass, immutable after creation and safe to share
across threads.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class MatchConfig:
    """Conventions applied while binding captures. Immutable after creation.

    All fields have defaults. Override what you need::

        config = MatchConfig(allow_empty_field=True)
    """

    # Field placeholders: an empty capture binds "" when True, fails with NoMatch when False
    allow_empty_field: bool = False

    # FieldList placeholders: an empty capture leaves the field unset when True, binds [] when False
    empty_list_as_absent: bool = False


DEFAULT_CONFIG = MatchConfig()
