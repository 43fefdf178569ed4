from pool_tags.engine.dedup import DeduplicationStore


def test_deduplication_store():
    store = DeduplicationStore()

    result = store.check_and_store("0x01")
    assert not result.is_duplicate

    duplicate = store.check_and_store("0x01")
    assert duplicate.is_duplicate
    assert duplicate.identifier == "0x01"

    assert store.seen_count == 1


def test_filter_preserves_order_and_drops_repeats(make_pool):
    store = DeduplicationStore()
    first_page = [make_pool(3), make_pool(1), make_pool(3), make_pool(2)]
    kept = store.filter(first_page)
    assert [record.id for record in kept] == [make_pool(3).id, make_pool(1).id, make_pool(2).id]

    second_page = [make_pool(2), make_pool(4)]
    assert [record.id for record in store.filter(second_page)] == [make_pool(4).id]
    assert store.seen_count == 4


def test_separate_stores_do_not_share_identifiers(make_pool):
    first, second = DeduplicationStore(), DeduplicationStore()
    first.filter([make_pool(1)])
    assert len(second.filter([make_pool(1)])) == 1
