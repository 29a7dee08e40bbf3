"""
nebula - Package overview for dnf-based systems

Aggregates what dnf and rpm know about installed packages:
- Separates user-installed packages from pulled-in dependencies
- One-level dependency sets and functional categories
- Cached results with safe/forced/dry-run removal and updates
"""

__version__ = "0.3.0"
__author__ = "nebula-dnf contributors"
