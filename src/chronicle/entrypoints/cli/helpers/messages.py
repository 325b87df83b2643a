"""Terminal message helpers for the CHRONICLE CLI.

Messages go to stderr so stdout stays machine-readable (Alembic output, SQL
from ``--sql``). Glyphs fall back to ASCII on terminals that cannot encode
them.
"""

import click

CAUTION = ("⚠️", "[!]")  # pragma: no mutate
SUCCESS = ("✅", "[OK]")  # pragma: no mutate
ERROR = ("❌", "[X]")  # pragma: no mutate


def _supports_character(character: str) -> bool:
    """Return True if *character* can be encoded on stderr."""

    stream = click.get_text_stream("stderr")  # pragma: no mutate
    encoding = getattr(stream, "encoding", None) or "ascii"
    try:
        character.encode(encoding)
    except UnicodeEncodeError:
        return False
    return True


def glyph(choice: tuple[str, str]) -> str:
    """Pick the emoji of an ``(emoji, fallback)`` pair if stderr can show it."""
    emoji, fallback = choice
    return emoji if _supports_character(emoji) else fallback


def warn(msg: str) -> None:
    """Emit a yellow, bold warning line to stderr.

    Example:
        ``⚠️  This will modify your database.``
    """
    click.secho(f"{glyph(CAUTION)}  {msg}", fg="yellow", bold=True, err=True)


def success(msg: str) -> None:
    """Emit a green, bold success line to stderr.

    Example:
        ``✅  Upgrade complete!``
    """
    click.secho(f"{glyph(SUCCESS)}  {msg}", fg="green", bold=True, err=True)


def error(msg: str) -> None:
    """Emit a red, bold error line to stderr.

    Example:
        ``❌  Cannot connect to database``
    """
    click.secho(f"{glyph(ERROR)}  {msg}", fg="red", bold=True, err=True)
