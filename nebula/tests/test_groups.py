"""Tests for rpm group classification"""

import pytest

from nebula.core.groups import classify
from nebula.core.models import Category


class TestClassify:
    """Keyword rules, in priority order."""

    @pytest.mark.parametrize("group", [
        "",
        "   ",
        "package foo is not installed",
        "error: open of /tmp/x failed: No such file or directory",
    ])
    def test_unknown(self, group):
        assert classify(group) == Category.UNKNOWN

    @pytest.mark.parametrize("group", [
        "User Interface/Desktops",
        "Desktop Environment",
        "xfce",
        "KDE/Applications",
        "gnome-shell extensions",
    ])
    def test_desktop_environment(self, group):
        assert classify(group) == Category.DESKTOP_ENVIRONMENT

    @pytest.mark.parametrize("group", [
        "System Environment/Base",
        "System Environment/Kernel",
        "System Environment",
    ])
    def test_system(self, group):
        assert classify(group) == Category.SYSTEM

    def test_games(self):
        assert classify("Amusements/Games") == Category.GAMES
        assert classify("APPLICATIONS/GAMES") == Category.GAMES

    def test_multimedia_before_applications(self):
        assert classify("Applications/Multimedia") == Category.MULTIMEDIA
        assert classify("System Environment/Sound") == Category.MULTIMEDIA

    def test_office(self):
        assert classify("Applications/Productivity") == Category.OFFICE
        assert classify("Applications/Office") == Category.OFFICE

    def test_network(self):
        assert classify("System Environment/Network") == Category.NETWORK
        assert classify("Applications/Mail") == Category.NETWORK

    def test_security(self):
        assert classify("System Environment/Security") == Category.SECURITY
        assert classify("Applications/Firewall") == Category.SECURITY

    def test_applications(self):
        assert classify("Development/Debuggers") == Category.DEVELOPMENT
        assert classify("Applications/Development Tools") == Category.DEVELOPMENT
        assert classify("Applications/Debugging") == Category.DEVELOPMENT
        assert classify("Applications/Utilities") == Category.UTILITY
        assert classify("Applications/Editors") == Category.OTHER_APPLICATION
        assert classify("Applications/Internet") == Category.OTHER_APPLICATION

    def test_development_before_libraries(self):
        assert classify("Development/Languages") == Category.DEVELOPMENT
        assert classify("Development/Libraries") == Category.DEVELOPMENT

    def test_library(self):
        assert classify("System Environment/Libraries") == Category.LIBRARY
        assert classify("System/Lib") == Category.LIBRARY

    def test_other_system_environment_is_unknown(self):
        assert classify("System Environment/Daemons") == Category.UNKNOWN

    def test_unclassified_is_manual(self):
        assert classify("Unspecified") == Category.MANUAL
        assert classify("Documentation") == Category.MANUAL

    @pytest.mark.parametrize("group", [
        "(none)", "Applications/", "/", "????", "\x00", "a" * 5000, "Système/Bureau",
    ])
    def test_total(self, group):
        assert isinstance(classify(group), Category)

    def test_none_input(self):
        assert classify(None) == Category.UNKNOWN
