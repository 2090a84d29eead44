"""
Diagnostic panels for the interaction views.

Only meant for development. Nothing here restricts who gets to see the
output, so switch the panels off (configuration 'debug') where that matters.
"""
from pprint import pformat

from markupsafe import Markup
from markupsafe import escape

SEPARATOR = Markup("<br/>")
ASSIGN = Markup(": ")


def is_empty(value):
    # numbers and booleans count as empty
    if value is None or isinstance(value, (bool, int, float)):
        return True
    if isinstance(value, (str, bytes, list, tuple, dict, set, frozenset)):
        return len(value) == 0
    return False


def _emphasize(text, seen):
    if text in seen:
        return Markup("<strong>{}</strong>").format(text)
    return escape(text)


def debug(record, seen=None):
    """
    Render a record as 'key: value' lines.

    Every key is added to `seen` before anything is rendered, so keys and
    values that name a key of this or an earlier panel sharing the same set
    are emphasized. Items with empty values, numbers and booleans included, are left out.

    :param record: A dictionary or something with a to_dict method
    :param seen: Keys seen so far during this page render
    :return: HTML safe Markup
    """
    if seen is None:
        seen = set()

    if hasattr(record, "to_dict"):
        record = record.to_dict()

    seen.update(str(k) for k in record.keys())

    lines = []
    for key, value in record.items():
        if is_empty(value):
            continue
        lines.append(ASSIGN.join([_emphasize(str(key), seen), _emphasize(pformat(value), seen)]))

    return SEPARATOR.join(lines)
