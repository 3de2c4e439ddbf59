from __future__ import annotations

from newswatch.models import NewsEntry, Snapshot
from newswatch.services.reconciler import reconcile


def entry(entry_id: str, title: str | None = None) -> NewsEntry:
    return NewsEntry(id=entry_id, title=title or f"Title {entry_id}", url=entry_id)


def test_reports_only_unseen_entries() -> None:
    previous = Snapshot(entries=[entry("u1")])
    candidates = [entry("u1"), entry("u2")]

    assert reconcile(previous, candidates) == [entry("u2")]


def test_cold_start_reports_every_candidate() -> None:
    candidates = [entry("a"), entry("b")]

    assert reconcile(Snapshot(), candidates) == candidates


def test_keeps_candidate_order() -> None:
    previous = Snapshot(entries=[entry("b"), entry("d")])
    candidates = [entry("e"), entry("d"), entry("a"), entry("b"), entry("c")]

    result = reconcile(previous, candidates)

    assert [item.id for item in result] == ["e", "a", "c"]


def test_removed_entries_are_not_reported() -> None:
    previous = Snapshot(entries=[entry("a"), entry("b"), entry("c")])

    assert reconcile(previous, [entry("b")]) == []


def test_identity_is_by_id_not_content() -> None:
    previous = Snapshot(entries=[entry("a", title="Old headline")])

    assert reconcile(previous, [entry("a", title="Edited headline")]) == []


def test_is_pure() -> None:
    previous = Snapshot(entries=[entry("a")])
    candidates = [entry("a"), entry("b")]

    first = reconcile(previous, candidates)
    second = reconcile(previous, candidates)

    assert first == second == [entry("b")]
    assert [item.id for item in previous.entries] == ["a"]
    assert [item.id for item in candidates] == ["a", "b"]
