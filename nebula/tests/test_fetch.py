"""Tests for the bounded-concurrency fetch orchestrator"""

import threading
import time

import pytest

from nebula.core.cache import CacheStore
from nebula.core.errors import ExternalToolError, ExternalToolNonZeroExit
from nebula.core.fetch import FetchOrchestrator
from nebula.core.models import AggregatedPackage, Category


class InFlightTracker:
    """Query stub that records how many calls overlap."""

    def __init__(self, reply: str = "", delay: float = 0.02):
        self.reply = reply
        self.delay = delay
        self.lock = threading.Lock()
        self.in_flight = 0
        self.max_in_flight = 0
        self.calls = 0

    def __call__(self, name: str) -> str:
        with self.lock:
            self.in_flight += 1
            self.calls += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            time.sleep(self.delay)
            return self.reply
        finally:
            with self.lock:
                self.in_flight -= 1


class SharedTracker:
    """Two query callables counting against the same in-flight total."""

    def __init__(self):
        self.tracker = InFlightTracker()

    def dependencies(self, name):
        self.tracker(name)
        return "glibc-2.38-14.fc39.x86_64\n"

    def category(self, name):
        self.tracker(name)
        return "Applications/Editors"


class TestRefresh:
    """Assembling records from per-package queries."""

    def test_records(self):
        deps = {
            "firefox": "glibc-2.38-14.fc39.x86_64\ngtk3-3.24.38-2.fc39.x86_64\nfirefox-120.0-1.fc39.x86_64\n",
            "htop": "ncurses-libs-6.4-7.fc39.x86_64\n",
        }
        groups = {"firefox": "Applications/Internet", "htop": "Applications/System"}
        result = FetchOrchestrator().refresh({"htop", "firefox"}, deps.__getitem__, groups.__getitem__)
        assert result == [
            AggregatedPackage("firefox", Category.OTHER_APPLICATION, ("glibc", "gtk3")),
            AggregatedPackage("htop", Category.OTHER_APPLICATION, ("ncurses-libs",)),
        ]

    def test_duplicates_collapse(self):
        result = FetchOrchestrator().refresh(
            ["b", "a", "b", "a", "c"], lambda n: "", lambda n: "Unspecified"
        )
        assert [p.name for p in result] == ["a", "b", "c"]

    def test_empty_candidates(self, cache):
        assert FetchOrchestrator(cache).refresh(set(), str, str) == []
        assert cache.load() == []

    def test_persists_result(self, cache):
        result = FetchOrchestrator(cache).refresh(
            {"vim-enhanced", "tmux"}, lambda n: "libevent-2.1.12-9.fc39.x86_64", lambda n: "Unspecified"
        )
        assert cache.load() == result

    def test_cache_write_failure_keeps_result(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        orchestrator = FetchOrchestrator(CacheStore(blocker / "cache.json"))
        result = orchestrator.refresh({"tmux"}, lambda n: "", lambda n: "Unspecified")
        assert result == [AggregatedPackage("tmux", Category.MANUAL, ())]

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            FetchOrchestrator().refresh({"a"}, str, str, concurrency_limit=0)


class TestFailures:
    """Per-package failures degrade instead of aborting."""

    def test_dependency_query_failure(self):
        def deps(name):
            if name == "broken":
                raise ExternalToolNonZeroExit("dnf repoquery --requires broken", 1)
            return "zlib-1.2.13-4.fc39.x86_64"

        result = FetchOrchestrator().refresh({"broken", "ok"}, deps, lambda n: "Unspecified")
        assert result == [
            AggregatedPackage("broken", Category.MANUAL, ()),
            AggregatedPackage("ok", Category.MANUAL, ("zlib",)),
        ]

    def test_category_query_failure(self):
        def group(name):
            raise ExternalToolError("rpm", "command not found")

        result = FetchOrchestrator().refresh({"foo"}, lambda n: "bar-1.0-1.noarch", group)
        assert result == [AggregatedPackage("foo", Category.UNKNOWN, ("bar",))]

    def test_crashed_task_excluded(self, caplog):
        def deps(name):
            if name == "crash":
                raise RuntimeError("boom")
            return ""

        result = FetchOrchestrator().refresh({"crash", "fine"}, deps, lambda n: "Unspecified")
        assert [p.name for p in result] == ["fine"]
        assert "crash" in caplog.text


class TestConcurrency:
    """Permit pool bounds the number of queries in flight."""

    @pytest.mark.parametrize("limit", [1, 2, 5])
    def test_bound_respected(self, limit):
        shared = SharedTracker()
        names = {f"pkg{i:02d}" for i in range(20)}
        result = FetchOrchestrator().refresh(
            names, shared.dependencies, shared.category, concurrency_limit=limit
        )
        assert shared.tracker.max_in_flight <= limit
        assert shared.tracker.calls == 40
        assert len(result) == 20
        assert [p.name for p in result] == sorted(names)

    def test_limit_one_is_sequential(self):
        tracker = InFlightTracker()
        FetchOrchestrator().refresh({f"p{i}" for i in range(6)}, tracker, tracker, concurrency_limit=1)
        assert tracker.max_in_flight == 1

    def test_parallelism_used(self):
        tracker = InFlightTracker(delay=0.1)
        FetchOrchestrator().refresh({f"p{i}" for i in range(8)}, tracker, tracker, concurrency_limit=4)
        assert tracker.max_in_flight > 1


class TestRefreshFromDeplist:
    """Batched dependency source."""

    DEPLIST = ("package: firefox-120.0-1.fc39.x86_64\n"
               "  dependency: libc.so.6()(64bit)\n"
               "   provider: glibc-2.38-14.fc39.x86_64\n"
               "package: htop-3.2.2-4.fc39.x86_64\n"
               "  dependency: libncursesw.so.6()(64bit)\n"
               "   provider: ncurses-libs-6.4-7.fc39.x86_64\n")

    def test_records(self, cache):
        groups = {"firefox": "Applications/Internet", "htop": "Unspecified", "tmux": "Unspecified"}
        result = FetchOrchestrator(cache).refresh_from_deplist(
            {"firefox", "htop", "tmux"}, self.DEPLIST, groups.__getitem__
        )
        assert result == [
            AggregatedPackage("firefox", Category.OTHER_APPLICATION, ("glibc",)),
            AggregatedPackage("htop", Category.MANUAL, ("ncurses-libs",)),
            AggregatedPackage("tmux", Category.MANUAL, ()),
        ]
        assert cache.load() == result

    def test_empty_deplist(self):
        result = FetchOrchestrator().refresh_from_deplist({"foo"}, "", lambda n: "Unspecified")
        assert result == [AggregatedPackage("foo", Category.MANUAL, ())]
