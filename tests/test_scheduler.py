import asyncio

import pytest

from az_doc_scraper.scheduler import BoundedPool, ConcurrencyScheduler


def test_pool_size_must_be_positive():
    with pytest.raises(ValueError):
        BoundedPool(0)


def test_default_bounds():
    scheduler = ConcurrencyScheduler()
    assert scheduler.fetch_pool.size == 2
    assert scheduler.subtree_pool.size == 1


@pytest.mark.asyncio
async def test_pool_bounds_concurrency_and_runs_everything():
    pool = BoundedPool(2)
    peak = 0

    async def work(value):
        nonlocal peak
        peak = max(peak, pool.active)
        await asyncio.sleep(0.01)
        return value * 2

    results = await asyncio.gather(*[pool.run(work, i) for i in range(6)])

    assert results == [0, 2, 4, 6, 8, 10]
    assert peak == 2
    assert pool.active == 0


@pytest.mark.asyncio
async def test_single_slot_pool_runs_in_submission_order():
    pool = BoundedPool(1)
    started = []

    async def work(value):
        started.append(value)
        await asyncio.sleep(0)

    await asyncio.gather(*[pool.run(work, i) for i in range(5)])

    assert started == [0, 1, 2, 3, 4]


@pytest.mark.asyncio
async def test_pool_releases_slot_on_error():
    pool = BoundedPool(1)

    async def fail():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        await pool.run(fail)
    assert pool.active == 0
    assert await pool.run(asyncio.sleep, 0, result="ok") == "ok"
