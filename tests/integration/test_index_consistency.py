"""Index consistency tests.

Runs seeded random mutation sequences against IndexedList and a plain list
model, checking after every step that:
1. The collection matches the model
2. Every Index Map equals a brute-force scan (holes never indexed,
   positions ascending)
3. A forced rebuild reproduces the incrementally maintained maps
"""

import random

import pytest

from indexed_list import SELF_INDEX, IndexConfig, IndexedList
from indexed_list.core.types import IdentityKey

KEYS = ["name", "id", SELF_INDEX]
NAMES = ["George", "Lisa", "Mia", None]


def expected_buckets(records, key):
    """Scan records the slow way, grouping positions per value."""
    buckets = {}
    for position, record in enumerate(records):
        if record is None:
            continue
        if key is SELF_INDEX:
            value = IdentityKey(record)
        elif key not in record:
            continue
        else:
            value = record[key]
        buckets.setdefault(value, []).append(position)
    return buckets


def snapshot(result):
    return {key: result._registry.lookup(key).as_dict() for key in KEYS}


def assert_consistent(result, model):
    assert list(result) == model
    assert len(result) == len(model)
    for key in KEYS:
        assert result._registry.lookup(key).as_dict() == expected_buckets(model, key), key


def make_record(rng):
    record = {"id": rng.randrange(5)}
    name = rng.choice(NAMES + ["<missing>"])
    if name != "<missing>":
        record["name"] = name
    return record


def random_step(rng, result, model):
    """Apply one random mutation to both the IndexedList and the model."""
    length = len(model)
    op = rng.choice(
        [
            "append", "prepend", "pop", "popleft", "splice", "set_at", "delete",
            "patch", "resize", "reverse", "copy_within", "fill",
        ]
    )

    if op == "append":
        record = make_record(rng)
        result.append(record)
        model.append(record)
    elif op == "prepend":
        records = [make_record(rng) for _ in range(rng.randrange(3))]
        result.prepend(*records)
        model[0:0] = records
    elif op == "pop" and length:
        assert result.pop() is model.pop()
    elif op == "popleft" and length:
        assert result.popleft() is model.pop(0)
    elif op == "splice":
        start = rng.randrange(length + 1)
        delete_count = rng.randrange(length - start + 2)
        records = [make_record(rng) for _ in range(rng.randrange(4))]
        result.splice(start, delete_count, *records)
        model[start:start + delete_count] = records
    elif op == "set_at":
        position = rng.randrange(length + 3)
        record = make_record(rng) if rng.random() > 0.2 else None
        result.set_at(position, record)
        if position >= length:
            model.extend([None] * (position - length + 1))
        model[position] = record
    elif op == "delete" and length:
        position = rng.randrange(length)
        result.delete(position)
        model[position] = None
    elif op == "patch" and length:
        position = rng.randrange(length)
        if model[position] is not None:
            # records are shared with the model, so the patch shows up in both
            result.patch(position, rng.choice(["name", "id"]), rng.choice(NAMES))
    elif op == "resize":
        new_length = rng.randrange(length + 3)
        result.resize(new_length)
        del model[new_length:]
        model.extend([None] * (new_length - len(model)))
    elif op == "reverse":
        result.reverse()
        model.reverse()
    elif op == "copy_within" and length:
        target, start, end = (rng.randrange(length + 1) for _ in range(3))
        result.copy_within(target, start, end)
        count = min(end - start, length - target)
        if count > 0:
            model[target:target + count] = model[start:start + count]
    elif op == "fill":
        record = make_record(rng)
        start, end = sorted(rng.randrange(length + 1) for _ in range(2))
        result.fill(record, start, end)
        for position in range(start, end):
            model[position] = record


@pytest.mark.parametrize("threshold", [0.0, 0.5, 1.0])
@pytest.mark.parametrize("seed", range(8))
def test_random_mutations_keep_index_consistent(seed, threshold):
    rng = random.Random(seed)
    model = [make_record(rng) for _ in range(6)]
    result = IndexedList(model, config=IndexConfig(rebuild_threshold=threshold)).add_index(*KEYS)

    for _ in range(150):
        random_step(rng, result, model)
        assert_consistent(result, model)


@pytest.mark.parametrize("seed", range(4))
def test_rebuild_equivalence(seed):
    """Incremental maintenance and a forced rebuild produce identical maps."""
    rng = random.Random(seed)
    model = [make_record(rng) for _ in range(10)]
    result = IndexedList(model, config=IndexConfig(rebuild_threshold=1.0)).add_index(*KEYS)

    for _ in range(100):
        random_step(rng, result, model)
        incremental = snapshot(result)
        result.rebuild_index()
        assert snapshot(result) == incremental


@pytest.mark.parametrize("seed", range(4))
def test_batch_while_disabled(seed):
    """Mutations made while disabled are all reflected after enable."""
    rng = random.Random(seed)
    model = [make_record(rng) for _ in range(8)]
    result = IndexedList(model).add_index(*KEYS)

    result.disable_index()
    for _ in range(50):
        random_step(rng, result, model)
    result.enable_index()

    assert_consistent(result, model)


def test_round_trip_lookup():
    """Every value present is found exactly at the positions it occupies."""
    rng = random.Random(42)
    model = [make_record(rng) if rng.random() > 0.1 else None for _ in range(50)]
    result = IndexedList(model).add_index("name")

    for value, positions in expected_buckets(model, "name").items():
        assert result.all_indexes_of(value) == positions
        assert result.index_of(value) == positions[0]


def test_negative_from_index_equivalence():
    rng = random.Random(7)
    model = [make_record(rng) for _ in range(20)]
    result = IndexedList(model).add_index("name")

    for value in NAMES:
        for offset in range(1, 25):
            assert result.index_of(value, from_index=-offset) == result.index_of(
                value, from_index=max(0, len(model) - offset)
            )


# Concrete scenarios


@pytest.fixture
def people():
    return IndexedList(
        [{"id": 1, "name": "George"}, {"id": 2, "name": "Lisa"}, {"id": 3, "name": "George"}]
    ).add_index("name")


def test_scenario_lookup(people):
    assert people.all_indexes_of("George") == [0, 2]


def test_scenario_patch(people):
    people.patch(0, "name", "Kevin")
    assert people.all_indexes_of("George") == [2]
    assert people.all_indexes_of("Kevin") == [0]


def test_scenario_remove_head(people):
    people.popleft()
    assert people.all_indexes_of("George") == [1]


def test_scenario_splice_insert(people):
    people.splice(1, 0, {"id": 9, "name": "Mia"}, {"id": 10, "name": "Mia"}, {"id": 11, "name": "George"})
    assert people.all_indexes_of("George") == [0, 3, 5]


def test_scenario_reverse():
    result = IndexedList(
        [{"name": "Lisa"}, {"name": "George"}, {"name": "Mia"}, {"name": "George"}]
    ).add_index("name")
    result.reverse()
    assert result.all_indexes_of("George") == [0, 2]


def test_scenario_truncate(people):
    people.resize(2)
    assert people.all_indexes_of("George") == [0]
