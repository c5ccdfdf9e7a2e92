from __future__ import annotations

import random

import pytest

from namelist.changes import apply_changes
from namelist.store import Record, UpdateChange, compute_changes


def _records(*pairs: tuple[int, str]) -> list[Record]:
    return [Record(id=record_id, text=text, subtext="") for record_id, text in pairs]


def test_insert_in_middle() -> None:
    old = _records((1, "Anna"), (3, "Cara"))
    new = _records((1, "Anna"), (2, "Beth"), (3, "Cara"))

    change = compute_changes(old, new)

    assert (change.deletions, change.insertions, change.modifications) == ([], [1], [])
    assert apply_changes(old, change, new) == new


def test_delete_uses_old_indices() -> None:
    old = _records((1, "Anna"), (2, "Beth"), (3, "Cara"))
    new = _records((1, "Anna"), (3, "Cara"))

    change = compute_changes(old, new)

    assert (change.deletions, change.insertions, change.modifications) == ([1], [], [])
    assert apply_changes(old, change, new) == new


def test_content_change_in_place_is_a_modification() -> None:
    old = _records((1, "Anna"), (2, "Beth"))
    new = [old[0], Record(id=2, text="Beth", subtext="updated")]

    change = compute_changes(old, new)

    assert (change.deletions, change.insertions, change.modifications) == ([], [], [1])
    assert apply_changes(old, change, new) == new


def test_no_change_is_empty() -> None:
    old = _records((1, "Anna"))

    assert compute_changes(old, list(old)).is_empty


def test_mixed_batch_with_overlapping_indices() -> None:
    # Deletion at old index 1 and insertion at new index 1 refer to different rows.
    old = _records((1, "Anna"), (2, "Beth"), (3, "Cara"), (4, "Dora"))
    new = [
        Record(id=1, text="Anna", subtext="edited"),
        Record(id=5, text="Bea", subtext=""),
        Record(id=3, text="Cara", subtext=""),
        Record(id=6, text="Cleo", subtext=""),
    ]

    change = compute_changes(old, new)

    assert change.deletions == [1, 3]
    assert change.insertions == [1, 3]
    assert change.modifications == [0]
    assert apply_changes(old, change, new) == new


def test_applying_every_diff_reproduces_the_new_snapshot() -> None:
    rng = random.Random(20190304)
    next_id = 1
    rows: list[Record] = []
    for _ in range(300):
        new = list(rows)
        for _ in range(rng.randint(0, 3)):
            if new and rng.random() < 0.5:
                del new[rng.randrange(len(new))]
        for _ in range(rng.randint(0, 3)):
            new.append(Record(id=next_id, text=f"n{rng.randint(0, 50):02d}", subtext=""))
            next_id += 1
        if new and rng.random() < 0.5:
            index = rng.randrange(len(new))
            target = new[index]
            new[index] = Record(id=target.id, text=f"n{rng.randint(0, 50):02d}", subtext="e")
        new.sort(key=lambda record: (record.text, record.id))

        change = compute_changes(rows, new)

        assert apply_changes(rows, change, new) == new
        rows = new


def test_apply_rejects_out_of_range_deletion() -> None:
    old = _records((1, "Anna"))
    change = UpdateChange(results=[], deletions=[3])

    with pytest.raises(ValueError, match="deletion"):
        apply_changes(old, change, [])


def test_apply_rejects_diff_that_does_not_match_snapshot() -> None:
    old = _records((1, "Anna"))
    new = _records((1, "Anna"), (2, "Beth"))
    change = UpdateChange(results=new)

    with pytest.raises(ValueError, match="does not match"):
        apply_changes(old, change, new)
