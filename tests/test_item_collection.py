from operator import itemgetter

from cursorhub import ItemCollection


def test_items_are_ordered_newest_first():
    collection = ItemCollection()

    collection.add_all([8, 10, 9])

    assert collection.items == [10, 9, 8]


def test_duplicates_collapse_and_first_inserted_wins():
    collection = ItemCollection(key=itemgetter("id"))

    assert collection.add({"id": 1, "text": "first"})
    assert not collection.add({"id": 1, "text": "second"})

    assert collection.items == [{"id": 1, "text": "first"}]
    assert len(collection) == 1


def test_add_all_is_idempotent():
    collection = ItemCollection()

    assert collection.add_all([3, 2]) == 2
    assert collection.add_all([3, 2]) == 0

    assert collection.items == [3, 2]


def test_contains_uses_item_key():
    collection = ItemCollection(key=itemgetter("id"))
    collection.add({"id": 5})

    assert {"id": 5, "other": True} in collection
    assert {"id": 6} not in collection
    assert "no id" not in collection


def test_clear():
    collection = ItemCollection()
    collection.add_all([1, 2])

    collection.clear()

    assert collection.items == []
    assert len(collection) == 0


def test_mapping_items_are_keyed_by_id_by_default():
    collection = ItemCollection()

    collection.add_all([{"id": 1, "text": "old"}, {"id": 2}, {"id": 1, "text": "again"}])

    assert collection.items == [{"id": 2}, {"id": 1, "text": "old"}]
    assert {"id": 2, "text": "other"} in collection
