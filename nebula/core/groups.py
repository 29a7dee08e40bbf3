"""
Category classification from rpm group strings.

rpm groups are free text ("Applications/Multimedia", "System Environment/Base",
"Unspecified"). Rules are checked most specific first; the first match wins.
The result is a best-effort hint, not an authoritative taxonomy.
"""

from .models import Category

UNKNOWN_MARKERS = ('not installed', 'no such file')
DESKTOP_KEYWORDS = ('desktop environment', 'desktops', 'xfce', 'kde', 'gnome')
SYSTEM_PREFIXES = ('system environment/base', 'system environment/kernel')
MULTIMEDIA_KEYWORDS = ('multimedia', 'sound', 'video')
OFFICE_KEYWORDS = ('office', 'productivity')
NETWORK_KEYWORDS = ('network', 'web', 'mail')
SECURITY_KEYWORDS = ('security', 'firewall')


def _contains_any(group: str, keywords) -> bool:
    return any(k in group for k in keywords)


def classify(raw_group: str) -> Category:
    """Map an rpm group string to a Category. Never raises."""
    group = (raw_group or '').strip().lower()

    if not group or _contains_any(group, UNKNOWN_MARKERS):
        return Category.UNKNOWN
    if _contains_any(group, DESKTOP_KEYWORDS):
        return Category.DESKTOP_ENVIRONMENT
    if group.startswith(SYSTEM_PREFIXES) or group == 'system environment':
        return Category.SYSTEM
    if 'games' in group:
        return Category.GAMES
    if _contains_any(group, MULTIMEDIA_KEYWORDS):
        return Category.MULTIMEDIA
    if _contains_any(group, OFFICE_KEYWORDS):
        return Category.OFFICE
    if _contains_any(group, NETWORK_KEYWORDS):
        return Category.NETWORK
    if _contains_any(group, SECURITY_KEYWORDS):
        return Category.SECURITY

    if group.startswith('applications/'):
        if 'development' in group or 'debugging' in group:
            return Category.DEVELOPMENT
        if 'utilities' in group:
            return Category.UTILITY
        return Category.OTHER_APPLICATION
    if group.startswith('development/'):
        return Category.DEVELOPMENT
    if 'libraries' in group or group.endswith('lib'):
        return Category.LIBRARY

    # Unclassified groups outside System Environment are assumed user-facing
    if not group.startswith('system environment/'):
        return Category.MANUAL
    return Category.UNKNOWN
