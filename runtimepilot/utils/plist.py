"""Property list parsing for macOS tool output.

`/usr/libexec/java_home -X` prints an XML property list describing every
registered JVM. These helpers turn that output into plain Python
structures. plistlib reads both the XML and the binary ('bplist') format.
"""

import plistlib
from typing import Any, Optional, Union


class PlistError(Exception):
    """Raised when plist data cannot be parsed."""
    pass


def parse_plist(data: Union[bytes, str]) -> Any:
    """Parse plist data (binary or XML).

    Args:
        data: Raw plist payload; text is encoded as UTF-8 first

    Returns:
        The decoded top-level object (dict or list)

    Raises:
        PlistError: If the payload is empty or not a valid plist
    """
    if isinstance(data, str):
        data = data.encode('utf-8')

    if not data or not data.strip():
        raise PlistError("Empty plist payload")

    try:
        return plistlib.loads(data)
    except plistlib.InvalidFileException as e:
        raise PlistError(f"Invalid plist format: {e}")
    except Exception as e:
        raise PlistError(f"Could not parse plist: {e}")


def parse_plist_safe(data: Union[bytes, str, None]) -> tuple[Optional[Any], Optional[str]]:
    """Parse plist data, returning an error message instead of raising.

    Args:
        data: Raw plist payload, or None when the producing command failed

    Returns:
        Tuple of (data, error_message) - data is None if error
    """
    if data is None:
        return None, "No plist data"
    try:
        return parse_plist(data), None
    except PlistError as e:
        return None, str(e)


def records_from_plist(data: Any, required_keys: tuple[str, ...]) -> list[dict[str, Any]]:
    """Select the dictionaries of a plist array that carry all required keys.

    Entries that are not dictionaries, or that miss one of the keys or
    hold a non-string value for it, are skipped.

    Args:
        data: Decoded top-level plist object
        required_keys: Keys every returned entry must have as strings

    Returns:
        List of matching dictionaries, in input order
    """
    if not isinstance(data, list):
        return []

    records = []
    for entry in data:
        if not isinstance(entry, dict):
            continue
        if all(isinstance(entry.get(key), str) for key in required_keys):
            records.append(entry)
    return records
