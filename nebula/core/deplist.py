"""
Parsers for dependency listings.

Two shapes are handled:

`dnf deplist` output for several packages at once:

    package: firefox-120.0-1.fc39.x86_64
      dependency: libc.so.6()(64bit)
       provider: glibc-2.38-14.fc39.x86_64
    package: vim-enhanced-2:9.0.2120-1.fc39.x86_64
      ...

and the one-requirement-per-line output of a single package query
(`dnf repoquery --requires`, `rpm -qR`).
"""

import re
from typing import Dict, List, Set

from .names import is_noise_line, normalize

PACKAGE_LINE_RE = re.compile(r'^package:\s*(.+)')
PROVIDER_LINE_RE = re.compile(r'^\s+provider:\s*(.+)')

NONE_MARKERS = ('none', '(none)')


def parse_multi(text: str) -> Dict[str, List[str]]:
    """Parse a multi-package deplist into {package: sorted dependencies}.

    Every package header gets an entry, even without providers. Provider
    lines seen before any header are dropped, as are providers that
    normalize to the package itself.
    """
    current = ''
    deps_map: Dict[str, Set[str]] = {}

    for line in text.splitlines():
        match = PACKAGE_LINE_RE.match(line)
        if match:
            current = normalize(match.group(1))
            if current:
                deps_map.setdefault(current, set())
            continue

        match = PROVIDER_LINE_RE.match(line)
        if match and current:
            dep = normalize(match.group(1))
            if dep and dep != current:
                deps_map[current].add(dep)

    return {name: sorted(deps) for name, deps in deps_map.items()}


def parse_single(text: str, owner: str) -> List[str]:
    """Parse the requirement lines of one package.

    Args:
        text: One requirement or provider per line
        owner: Package the requirements belong to (excluded from result)

    Returns:
        Sorted unique base names
    """
    deps: Set[str] = set()
    for line in text.splitlines():
        line = line.strip()
        if not line or is_noise_line(line):
            continue
        if line.lower() in NONE_MARKERS:
            continue
        dep = normalize(line)
        if dep and dep != owner:
            deps.add(dep)
    return sorted(deps)
