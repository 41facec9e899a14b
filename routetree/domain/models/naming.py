"""Display-name scheme shared by every identified entity.

Internal identifiers are 0-based; names in routing files are the
type prefix followed by a 1-based number, e.g. layer 0 is ``M1`` and
net 41 is ``N42``.
"""
import re
from typing import ClassVar

from ...shared.exceptions import NameParseError

_NUMBER = re.compile(r'[0-9]+')


class Named:
    """Mixin giving a type its prefixed name <-> id conversion.

    Subclasses only set ``PREFIX``. The prefix characters of a parsed name
    are skipped, not checked; routing a name to the right type is the
    caller's job.
    """

    PREFIX: ClassVar[str] = ""

    @classmethod
    def to_name(cls, ident: int) -> str:
        """Convert a 0-based identifier to its display name."""
        return f"{cls.PREFIX}{ident + 1}"

    @classmethod
    def from_name(cls, name: str) -> int:
        """Convert a display name back to its 0-based identifier.

        Raises:
            NameParseError: If the part after the prefix is not a positive
                decimal integer.
        """
        suffix = name[len(cls.PREFIX):]
        if not _NUMBER.fullmatch(suffix):
            raise NameParseError(
                f"Invalid {cls.__name__} name {name!r}: expected {cls.PREFIX}<number>",
                name=name, prefix=cls.PREFIX
            )

        number = int(suffix)
        if number == 0:
            raise NameParseError(
                f"Invalid {cls.__name__} name {name!r}: numbering starts at 1",
                name=name, prefix=cls.PREFIX
            )
        return number - 1

    @property
    def name(self) -> str:
        """Display name of this instance."""
        return self.to_name(self.id)
