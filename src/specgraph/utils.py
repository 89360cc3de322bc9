import logging
import os
import re
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY_RE = re.compile(r"([A-Z])")


def to_snake_case(name: str) -> str:
    """Convert a PascalCase or camelCase name to snake_case.

    An underscore is inserted before every uppercase letter, so acronyms are
    split letter by letter (``APIKey`` → ``a_p_i_key``).
    """
    return _CAMEL_BOUNDARY_RE.sub(r"_\1", name).lower().lstrip("_")


def pluralize(word: str) -> str:
    """Pluralize an English word with simple suffix heuristics.

    - trailing ``y`` → ``ies``
    - trailing ``s``, ``x``, ``ch`` or ``sh`` → append ``es``
    - otherwise append ``s``

    This is not a full English pluralizer (``person`` → ``persons``).
    """
    if word.endswith("y"):
        return word[:-1] + "ies"
    if word.endswith(("s", "x", "ch", "sh")):
        return word + "es"
    return word + "s"


def entity_to_table_name(entity_name: str) -> str:
    """Convert an entity name to its table name.

    Examples:
        entity_to_table_name("User")         # "users"
        entity_to_table_name("Category")     # "categories"
        entity_to_table_name("UserProfile")  # "user_profiles"
    """
    return pluralize(to_snake_case(entity_name))


def field_to_column_name(field_name: str) -> str:
    """Convert a camelCase field name to a snake_case column name."""
    return to_snake_case(field_name)


def escape_single_quotes(value: str) -> str:
    """Escape single quotes for embedding in SQL string literals.

    SQL uses doubled single quotes (``''``) for escaping inside
    single-quoted strings.
    """
    return value.replace("'", "''")


def content_hash(content: str) -> str:
    """Non-cryptographic 32-bit fingerprint of ``content``.

    Used to detect drift between a recorded migration and its file, not for
    security. The string is hashed as UTF-16 code units, so characters outside
    the Basic Multilingual Plane contribute their surrogate pair. Returns 8
    lowercase hex characters.
    """
    data = content.encode("utf-16-le")
    value = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        value = ((value << 5) - value + unit) & 0xFFFFFFFF
    # Reinterpret as a signed 32-bit integer and keep the magnitude
    if value & 0x80000000:
        value = (1 << 32) - value
    return f"{value:08x}"


def atomic_write_text(path: Path | str, content: str, overwrite: bool = True) -> None:
    """Write ``content`` to ``path`` through a temporary file and rename.

    The temporary file lives in the destination directory so the final
    ``os.replace`` stays on one filesystem. Readers see either the old file
    or the complete new one.

    With ``overwrite=False`` the temporary file is hard-linked into place
    instead, which fails with ``FileExistsError`` if ``path`` already exists.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
        if overwrite:
            os.replace(tmp_name, path)
        else:
            os.link(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    if not overwrite:
        Path(tmp_name).unlink(missing_ok=True)
    logger.debug(f"Wrote {len(content)} chars to {path}")
