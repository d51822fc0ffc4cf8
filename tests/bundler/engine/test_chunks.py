"""
Unit tests for the bounded parallel runner.

Tests the concurrency bound, chunk barriers and failure propagation.
"""

import asyncio

import pytest

from bundler.engine.chunks import run_in_chunks


class TestRunInChunks:
    """Test suite for run_in_chunks."""
    
    @pytest.mark.asyncio
    async def test_concurrency_never_exceeds_chunk_size(self):
        """Test that at most chunk_size operations are in flight."""
        in_flight = 0
        max_in_flight = 0
        processed = []
        
        async def callback(item):
            nonlocal in_flight, max_in_flight
            in_flight += 1
            max_in_flight = max(max_in_flight, in_flight)
            await asyncio.sleep(0.01)
            processed.append(item)
            in_flight -= 1
        
        await run_in_chunks(list(range(5)), 2, 0, callback)
        
        assert max_in_flight == 2
        assert sorted(processed) == [0, 1, 2, 3, 4]
    
    @pytest.mark.asyncio
    async def test_chunk_settles_before_next_starts(self):
        """Test that no operation of chunk k+1 starts before chunk k settles."""
        events = []
        
        async def callback(item):
            events.append(("start", item))
            # Later items of a chunk finish first
            await asyncio.sleep(0.01 * (3 - item % 3))
            events.append(("end", item))
        
        await run_in_chunks(list(range(6)), 3, 0, callback)
        
        last_end_of_first_chunk = max(
            i for i, (kind, item) in enumerate(events) if kind == "end" and item < 3
        )
        first_start_of_second_chunk = min(
            i for i, (kind, item) in enumerate(events) if kind == "start" and item >= 3
        )
        assert last_end_of_first_chunk < first_start_of_second_chunk
    
    @pytest.mark.asyncio
    async def test_chunk_index_skips_earlier_chunks(self):
        """Test starting at a later chunk."""
        processed = []
        
        async def callback(item):
            processed.append(item)
        
        await run_in_chunks(["a", "b", "c", "d", "e"], 2, 1, callback)
        
        assert processed == ["c", "d", "e"]
    
    @pytest.mark.asyncio
    async def test_empty_items(self):
        """Test that no callback runs for an empty list."""
        async def callback(item):
            raise AssertionError("should not be called")
        
        await run_in_chunks([], 4, 0, callback)
    
    @pytest.mark.asyncio
    async def test_chunk_size_larger_than_items(self):
        """Test a single chunk holding all items."""
        processed = []
        
        async def callback(item):
            processed.append(item)
        
        await run_in_chunks([1, 2, 3], 128, 0, callback)
        
        assert sorted(processed) == [1, 2, 3]
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize("chunk_size", [0, -1])
    async def test_invalid_chunk_size(self, chunk_size):
        """Test that a chunk size below 1 is rejected."""
        async def callback(item):
            pass
        
        with pytest.raises(ValueError, match="chunk_size"):
            await run_in_chunks([1], chunk_size, 0, callback)
    
    @pytest.mark.asyncio
    async def test_failure_lets_chunk_settle_and_stops_later_chunks(self):
        """Test that a failure is raised after its chunk settles."""
        completed = []
        
        async def callback(item):
            if item == 0:
                raise RuntimeError("item 0 failed")
            await asyncio.sleep(0.01)
            completed.append(item)
        
        with pytest.raises(RuntimeError, match="item 0 failed"):
            await run_in_chunks([0, 1, 2, 3], 2, 0, callback)
        
        assert completed == [1]
    
    @pytest.mark.asyncio
    async def test_first_failure_in_item_order_is_raised(self):
        """Test that the earliest failing item wins when several fail."""
        async def callback(item):
            await asyncio.sleep(0.01 * (3 - item))
            raise RuntimeError(f"item {item} failed")
        
        with pytest.raises(RuntimeError, match="item 0 failed"):
            await run_in_chunks([0, 1, 2], 3, 0, callback)
