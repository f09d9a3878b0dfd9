import random
import threading

import pytest

from hearthweb.memory_pool import MemoryPool, MultiLevelMemoryPool

BLOCK_SIZES = [8, 16, 32, 64, 128, 256, 512, 1024]
MAX_ALLOCATION_SIZE = 1024
MAX_TEST_SIZE = 4096


@pytest.fixture
def pool():
    return MultiLevelMemoryPool()


def test_memory_pool_preallocates_first_block():
    pool = MemoryPool(list, block_size=16)
    assert pool.block_count == 1
    assert pool.free_count == 16


def test_memory_pool_reuses_released_slot():
    pool = MemoryPool(dict, block_size=4)
    slot = pool.allocate()
    pool.deallocate(slot)
    assert pool.allocate() is slot


def test_memory_pool_grows_when_exhausted():
    pool = MemoryPool(object, block_size=4)
    slots = [pool.allocate() for _ in range(5)]
    assert len({id(slot) for slot in slots}) == 5
    assert pool.block_count == 2
    assert pool.free_count == 3


def test_memory_pool_ignores_none():
    pool = MemoryPool(list, block_size=2)
    pool.deallocate(None)
    assert pool.free_count == 2


def test_memory_pool_rejects_empty_blocks():
    with pytest.raises(ValueError):
        MemoryPool(list, block_size=0)


def test_memory_pool_stress_keeps_slots_distinct():
    pool = MemoryPool(bytearray, block_size=64)
    rng = random.Random(1234)
    held = []
    for _ in range(2000):
        if not held or rng.random() < 0.5:
            held.append(pool.allocate())
        else:
            pool.deallocate(held.pop(rng.randrange(len(held))))
        assert len({id(slot) for slot in held}) == len(held)
    for slot in held:
        pool.deallocate(slot)
    assert pool.free_count == pool.block_count * pool.block_size


@pytest.mark.parametrize("size", BLOCK_SIZES)
def test_allocation_at_level(pool, size):
    blocks = []
    for _ in range(10):
        block = pool.allocate(size)
        assert len(block) >= size
        block[:size] = b"\xcd" * size
        assert block[:size] == b"\xcd" * size
        blocks.append(block)
    assert len({id(b) for b in blocks}) == 10
    for block in blocks:
        pool.deallocate(block)
    level = pool.find_pool_level(size)
    assert pool.free_count(level) == 10
    again = [pool.allocate(size) for _ in range(10)]
    assert pool.block_count(level) == 10
    assert {id(b) for b in again} == {id(b) for b in blocks}


def test_cross_level_allocation(pool):
    allocations = []
    for size in BLOCK_SIZES:
        block = pool.allocate(size)
        block[:size] = b"\xef" * size
        allocations.append((block, size))
    random.Random(7).shuffle(allocations)
    for block, _ in allocations:
        pool.deallocate(block)
    for size in BLOCK_SIZES:
        assert pool.free_count(pool.find_pool_level(size)) == 1


def test_level_block_sizes(pool):
    assert [pool.level_block_size(level) for level in range(pool.level_count)] == BLOCK_SIZES


@pytest.mark.parametrize(
    "size, level",
    [(0, 0), (1, 0), (8, 0), (9, 1), (100, 4), (1024, 7), (1025, None)],
)
def test_find_pool_level(pool, size, level):
    assert pool.find_pool_level(size) == level


def test_negative_size_is_rejected(pool):
    with pytest.raises(ValueError):
        pool.allocate(-1)


def test_oversized_allocation_is_not_pooled(pool):
    block = pool.allocate(MAX_TEST_SIZE)
    assert len(block) == MAX_TEST_SIZE
    pool.deallocate(block)
    assert all(pool.free_count(level) == 0 for level in range(pool.level_count))
    assert pool.allocate(MAX_TEST_SIZE) is not block


def test_same_level_block_is_reused(pool):
    block = pool.allocate(100)
    pool.deallocate(block)
    assert pool.allocate(120) is block


def test_deallocate_none_is_ignored(pool):
    pool.deallocate(None)
    assert pool.free_count(0) == 0


def test_stress_random_sizes(pool):
    rng = random.Random(42)
    held = []
    for _ in range(2000):
        if not held or rng.random() < 0.5:
            size = rng.randint(1, MAX_ALLOCATION_SIZE)
            block = pool.allocate(size)
            assert len(block) >= size
            block[:size] = b"\xab" * size
            held.append(block)
        else:
            pool.deallocate(held.pop(rng.randrange(len(held))))
        assert len({id(b) for b in held}) == len(held)
    for block in held:
        pool.deallocate(block)
    for level in range(pool.level_count):
        assert pool.free_count(level) == pool.block_count(level)


def test_allocate_release_cycle_up_to_max_size(pool):
    rng = random.Random(3)
    for _ in range(1000):
        size = rng.randint(1, MAX_TEST_SIZE)
        block = pool.allocate(size)
        assert len(block) >= size
        pool.deallocate(block)
    assert all(pool.block_count(level) <= 1 for level in range(pool.level_count))


def test_concurrent_use_never_shares_a_block(pool):
    iterations = 300
    thread_count = 8
    seen = {}
    lock = threading.Lock()

    def work(seed):
        rng = random.Random(seed)
        readings = []
        for _ in range(iterations):
            block = pool.allocate(rng.randint(1, 256))
            block[:8] = bytes([seed]) * 8
            readings.append(bytes(block[:8]))
            pool.deallocate(block)
        with lock:
            seen[seed] = readings

    threads = [threading.Thread(target=work, args=(i,)) for i in range(thread_count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert seen == {i: [bytes([i]) * 8] * iterations for i in range(thread_count)}
    for level in range(pool.level_count):
        assert pool.free_count(level) == pool.block_count(level)