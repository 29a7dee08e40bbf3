"""
Package identifier normalization.

dnf and rpm print packages and requirements in several shapes:

    firefox-120.0-1.fc39.x86_64        NEVRA
    shadow-utils-2:4.14.0-2.fc39       epoch-qualified
    libc.so.6()(64bit)                 soname capability
    rpmlib(PayloadIsZstd) <= 5.4.18-1  rpmlib capability
    /usr/bin/sh                        file requirement
    perl(File::Temp)                   perl module capability

normalize() reduces each of them to the base name used as the package key.
"""

import posixpath
import re
from typing import Set

# Leading package name, optionally followed by a -<digit>... version run
# (epoch, release and arch included), ending at whitespace or end of string
NAME_RE = re.compile(r'^([A-Za-z0-9][A-Za-z0-9._+-]*?)(?:-[0-9]\S*)?(?=\s|$)')

# perl module capabilities are identifiers in their own right
PRESERVED_PREFIXES = ('perl(',)

# Informational lines dnf prints around query results
NOISE_PREFIXES = (
    'Last metadata expiration check',
    'Updating and loading repositories',
    'Repositories loaded',
)


def normalize(raw: str) -> str:
    """Return the canonical base name for one package/capability token.

    Args:
        raw: NEVRA, capability expression or absolute file path

    Returns:
        Base name, or '' if raw is empty or whitespace (callers discard it)
    """
    spec = raw.strip()
    if not spec:
        return ''

    if spec.startswith('/'):
        return posixpath.basename(spec.rstrip('/')) or spec

    if '(' in spec:
        if spec.startswith(PRESERVED_PREFIXES):
            return spec
        return spec.split('(', 1)[0].strip()

    match = NAME_RE.match(spec)
    if match:
        return match.group(1)
    return spec


def is_noise_line(line: str) -> bool:
    """Check if a line is a dnf informational message rather than data."""
    return line.strip().startswith(NOISE_PREFIXES)


def listing_names(text: str) -> Set[str]:
    """Collect normalized names from a one-package-per-line listing."""
    names = set()
    for line in text.splitlines():
        if not line.strip() or is_noise_line(line):
            continue
        name = normalize(line)
        if name:
            names.add(name)
    return names
