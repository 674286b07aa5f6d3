"""Unique project names."""

import re
from typing import Iterable

# A trailing " (N)" counter. Literal titles ending in this pattern are
# indistinguishable from counters and get renumbered as well.
COUNTER_SUFFIX = re.compile(r' \(([0-9]+)\)$')


def unique_name(candidate: str, existing_names: Iterable[str]) -> str:
    """Return ``candidate`` or a counter-suffixed variant absent from ``existing_names``.

    >>> unique_name('Board', ['Board'])
    'Board (1)'
    >>> unique_name('Board (1)', ['Board (1)'])
    'Board (2)'
    """
    taken = set(existing_names)
    name = candidate

    while name in taken:
        match = COUNTER_SUFFIX.search(name)
        number = int(match.group(1)) + 1 if match else 1
        name = f'{COUNTER_SUFFIX.sub("", name)} ({number})'

    return name
