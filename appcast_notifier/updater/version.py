"""Version string comparison for Appcast Notifier.

Compares loosely structured version strings such as "1.2", "1.2.0",
"1.2rc1" or "2.0 beta 3" without requiring them to follow any scheme.

A version is split into components, each a continuous run of characters
of the same kind: a number, a period or a string fragment ("beta" etc.).
"1.20rc3" becomes ["1", ".", "20", "rc", "3"]. Components are then
compared pairwise:

- numbers compare numerically, strings compare ordinally;
- a string fragment sorts below a number or period, so "1.2rc1" < "1.2.0";
- a trailing string fragment lowers precedence, so "1.5b3" < "1.5";
- a trailing number raises it, so "1.5" < "1.5.1".
"""

from enum import Enum
from typing import List


class ComponentType(Enum):
    """Classification of a version component."""
    NUMBER = "number"
    PERIOD = "period"
    STRING = "string"


def classify_char(c: str) -> ComponentType:
    """Classify a single character of a version string."""
    if c == ".":
        return ComponentType.PERIOD
    if "0" <= c <= "9":
        return ComponentType.NUMBER
    return ComponentType.STRING


def split_version(version: str) -> List[str]:
    """
    Split a version string into its components.

    A period always starts a new component, so ".." yields two separate
    period components. Joining the result gives back the input.

    Args:
        version: Version string to split

    Returns:
        List of components (empty for an empty string)
    """
    parts: List[str] = []
    if not version:
        return parts

    current = version[0]
    prev_type = classify_char(version[0])

    for c in version[1:]:
        new_type = classify_char(c)
        if new_type != prev_type or prev_type == ComponentType.PERIOD:
            parts.append(current)
            current = c
        else:
            current += c
        prev_type = new_type

    parts.append(current)
    return parts


def _compare_numbers(a: str, b: str) -> int:
    # Digit runs can be arbitrarily long, so compare them as text.
    a = a.lstrip("0")
    b = b.lstrip("0")
    if len(a) != len(b):
        return 1 if len(a) > len(b) else -1
    if a != b:
        return 1 if a > b else -1
    return 0


def compare_versions(ver_a: str, ver_b: str) -> int:
    """
    Compare two version strings.

    Args:
        ver_a: First version
        ver_b: Second version

    Returns:
        1 if ver_a is newer, -1 if ver_b is newer, 0 if they are equal
    """
    parts_a = split_version(ver_a)
    parts_b = split_version(ver_b)

    n = min(len(parts_a), len(parts_b))
    for a, b in zip(parts_a[:n], parts_b[:n]):
        type_a = classify_char(a[0])
        type_b = classify_char(b[0])

        if type_a == type_b:
            if type_a == ComponentType.STRING:
                if a != b:
                    return 1 if a > b else -1
            elif type_a == ComponentType.NUMBER:
                result = _compare_numbers(a, b)
                if result:
                    return result
        elif type_b == ComponentType.STRING:
            # 1.2.0 > 1.2rc1
            return 1
        elif type_a == ComponentType.STRING:
            # 1.2rc1 < 1.2.0
            return -1
        else:
            # Number against period; the dangling period sorts lower.
            return 1 if type_a == ComponentType.NUMBER else -1

    if len(parts_a) == len(parts_b):
        return 0

    if len(parts_a) > len(parts_b):
        missing_type = classify_char(parts_a[n][0])
        shorter_result, longer_result = -1, 1
    else:
        missing_type = classify_char(parts_b[n][0])
        shorter_result, longer_result = 1, -1

    if missing_type == ComponentType.STRING:
        # 1.5 > 1.5b3
        return shorter_result
    # 1.5.1 > 1.5
    return longer_result


def is_newer(candidate: str, current: str) -> bool:
    """True if candidate is a newer version than current."""
    return compare_versions(candidate, current) > 0
