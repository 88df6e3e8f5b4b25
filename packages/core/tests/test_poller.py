"""Tests for the poll cycle: fetch, load, diff, notify, persist."""

from __future__ import annotations

import json
import os

import pytest

from prnotify_core.errors import FetchFailure, NotifyFailure
from prnotify_core.models import PullRequest
from prnotify_core.notifiers.base import BaseNotifier
from prnotify_core.poller import run_cycle
from prnotify_core.sources.base import BasePRSource
from prnotify_store.errors import PersistFailure
from prnotify_store.json_file import JsonFileStore
from prnotify_store.models import APPROVED, CHANGES_REQUESTED, REVIEW_REQUIRED, PullRequestKey


def _pr(repo="org/repo", number=1, title="Fix bug"):
    return PullRequest(repo=repo, number=number, title=title, url=f"https://github.com/{repo}/pull/{number}")


class StubSource(BasePRSource):
    """In-memory source: decisions maps "repo#n" to a decision or an exception."""

    def __init__(self, prs, decisions, list_error=None):
        self.prs = prs
        self.decisions = decisions
        self.list_error = list_error
        self.lookups = []

    def list_open_prs(self):
        if self.list_error is not None:
            raise self.list_error
        return list(self.prs)

    def fetch_review_decision(self, repo, number):
        self.lookups.append(f"{repo}#{number}")
        decision = self.decisions[f"{repo}#{number}"]
        if isinstance(decision, Exception):
            raise decision
        return decision


class RecordingNotifier(BaseNotifier):
    name = "recording"

    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    def deliver(self, title, subtitle, body, url=None, sound=None):
        self.sent.append({"title": title, "subtitle": subtitle, "body": body, "url": url})
        if self.fail:
            raise NotifyFailure("channel down")


def _write_state(path, mapping):
    path.write_text(json.dumps(mapping))


def _read_state(path):
    return json.loads(path.read_text())


@pytest.fixture
def state_path(tmp_path):
    return tmp_path / "state.json"


@pytest.fixture
def store(state_path):
    return JsonFileStore(state_path)


class TestRunCycle:
    def test_notifies_new_approval_and_persists(self, store, state_path):
        _write_state(state_path, {"org/repo#1": REVIEW_REQUIRED})
        source = StubSource([_pr(number=1, title="Add login")], {"org/repo#1": APPROVED})
        notifier = RecordingNotifier()

        summary = run_cycle(store, source, [notifier])

        assert summary.ok
        assert summary.total_prs == 1
        assert summary.new_approvals == 1
        assert summary.approved == ["org/repo#1"]
        assert notifier.sent == [
            {
                "title": "PR Approved",
                "subtitle": "org/repo#1",
                "body": "Add login",
                "url": "https://github.com/org/repo/pull/1",
            }
        ]
        assert _read_state(state_path) == {"org/repo#1": APPROVED}

    def test_second_cycle_does_not_renotify(self, store):
        source = StubSource([_pr(number=1)], {"org/repo#1": APPROVED})
        notifier = RecordingNotifier()

        run_cycle(store, source, [notifier])
        summary = run_cycle(store, source, [notifier])

        assert summary.new_approvals == 0
        assert len(notifier.sent) == 1

    def test_first_run_notifies_already_approved(self, store):
        source = StubSource([_pr(number=5), _pr(number=6)], {"org/repo#5": APPROVED, "org/repo#6": REVIEW_REQUIRED})
        notifier = RecordingNotifier()

        summary = run_cycle(store, source, [notifier])

        assert summary.approved == ["org/repo#5"]

    def test_first_sighting_disabled_records_without_notifying(self, store, state_path):
        source = StubSource([_pr(number=5)], {"org/repo#5": APPROVED})
        notifier = RecordingNotifier()

        summary = run_cycle(store, source, [notifier], notify_first_sighting=False)

        assert summary.new_approvals == 0
        assert notifier.sent == []
        assert _read_state(state_path) == {"org/repo#5": APPROVED}

    def test_dispatch_order_is_sorted_by_key(self, store):
        prs = [_pr("z/z", 1), _pr("a/a", 2), _pr("m/m", 3)]
        source = StubSource(prs, {"z/z#1": APPROVED, "a/a#2": APPROVED, "m/m#3": APPROVED})
        notifier = RecordingNotifier()

        run_cycle(store, source, [notifier])

        assert [m["subtitle"] for m in notifier.sent] == ["a/a#2", "m/m#3", "z/z#1"]

    def test_closed_prs_drop_out_of_snapshot(self, store, state_path):
        _write_state(state_path, {"org/repo#1": APPROVED, "org/repo#2": REVIEW_REQUIRED})
        source = StubSource([_pr(number=2)], {"org/repo#2": CHANGES_REQUESTED})

        summary = run_cycle(store, source, [])

        assert summary.ok
        assert _read_state(state_path) == {"org/repo#2": CHANGES_REQUESTED}

    def test_listing_failure_aborts_without_touching_state(self, store, state_path):
        _write_state(state_path, {"org/repo#1": REVIEW_REQUIRED})
        before = state_path.read_bytes()
        source = StubSource([], {}, list_error=FetchFailure("gh search prs: exit status 1"))
        notifier = RecordingNotifier()

        summary = run_cycle(store, source, [notifier])

        assert not summary.ok
        assert "gh search prs" in summary.error
        assert notifier.sent == []
        assert state_path.read_bytes() == before

    def test_corrupt_state_aborts_without_notifying(self, store, state_path):
        state_path.write_text("{garbage")
        source = StubSource([_pr(number=1)], {"org/repo#1": APPROVED})
        notifier = RecordingNotifier()

        summary = run_cycle(store, source, [notifier])

        assert not summary.ok
        assert summary.error.startswith("load:")
        assert notifier.sent == []
        assert state_path.read_text() == "{garbage"
        assert source.lookups == []

    def test_failed_lookup_is_skipped_and_excluded(self, store, state_path):
        _write_state(state_path, {"org/repo#1": REVIEW_REQUIRED, "org/repo#2": REVIEW_REQUIRED})
        source = StubSource(
            [_pr(number=1), _pr(number=2)],
            {"org/repo#1": FetchFailure("timeout"), "org/repo#2": APPROVED},
        )
        notifier = RecordingNotifier()

        summary = run_cycle(store, source, [notifier])

        assert summary.ok
        assert summary.total_prs == 2
        assert summary.approved == ["org/repo#2"]
        assert _read_state(state_path) == {"org/repo#2": APPROVED}

    def test_key_missing_after_failed_lookup_is_notified_when_back(self, store, state_path):
        _write_state(state_path, {"org/repo#1": APPROVED})
        failing = StubSource([_pr(number=1)], {"org/repo#1": FetchFailure("boom")})
        run_cycle(store, failing, [])
        assert _read_state(state_path) == {}

        # Absent from the previous snapshot means "not previously approved".
        notifier = RecordingNotifier()
        run_cycle(store, StubSource([_pr(number=1)], {"org/repo#1": APPROVED}), [notifier])
        assert len(notifier.sent) == 1

    def test_notifier_failure_does_not_abort_or_retry(self, store, state_path):
        source = StubSource([_pr(number=1)], {"org/repo#1": APPROVED})
        broken = RecordingNotifier(fail=True)
        working = RecordingNotifier()

        summary = run_cycle(store, source, [broken, working])

        assert summary.ok
        assert summary.failed_notifications == 1
        assert len(working.sent) == 1
        assert _read_state(state_path) == {"org/repo#1": APPROVED}

        run_cycle(store, source, [broken, working])
        assert len(broken.sent) == 1

    def test_unexpected_notifier_error_still_saves_state(self, store, state_path):
        class CrashingNotifier(BaseNotifier):
            name = "crashing"

            def deliver(self, title, subtitle, body, url=None, sound=None):
                raise PermissionError(13, "Permission denied", "osascript")

        source = StubSource([_pr(number=1)], {"org/repo#1": APPROVED})
        after = RecordingNotifier()

        summary = run_cycle(store, source, [CrashingNotifier(), after])

        assert summary.ok
        assert summary.failed_notifications == 1
        assert len(after.sent) == 1
        assert _read_state(state_path) == {"org/repo#1": APPROVED}

        second = run_cycle(store, source, [CrashingNotifier(), after])
        assert second.new_approvals == 0
        assert len(after.sent) == 1

    def test_unrunnable_osascript_still_saves_state(self, store, state_path, mocker):
        from prnotify_core.notifiers.macos import MacOSNotifier

        mocker.patch(
            "prnotify_core.notifiers.macos.subprocess.run",
            side_effect=PermissionError(13, "Permission denied", "osascript"),
        )
        source = StubSource([_pr(number=1)], {"org/repo#1": APPROVED})

        summary = run_cycle(store, source, [MacOSNotifier()])

        assert summary.ok
        assert summary.failed_notifications == 1
        assert _read_state(state_path) == {"org/repo#1": APPROVED}

    def test_persist_failure_reported_after_notifying(self, store, state_path, mocker):
        source = StubSource([_pr(number=1)], {"org/repo#1": APPROVED})
        notifier = RecordingNotifier()
        mocker.patch.object(store, "save", side_effect=PersistFailure("read-only filesystem"))

        summary = run_cycle(store, source, [notifier])

        assert not summary.ok
        assert "read-only filesystem" in summary.error
        assert summary.new_approvals == 1
        assert len(notifier.sent) == 1
        assert not state_path.exists()

    def test_no_temp_files_after_cycle(self, store, state_path):
        run_cycle(store, StubSource([_pr(number=1)], {"org/repo#1": APPROVED}), [])
        assert os.listdir(state_path.parent) == ["state.json"]

    def test_snapshot_keys_are_pull_request_keys(self, store):
        run_cycle(store, StubSource([_pr(number=3)], {"org/repo#3": ""}), [])
        assert store.load() == {PullRequestKey("org/repo", 3): ""}
