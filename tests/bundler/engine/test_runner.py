"""
Unit tests for the loader pipeline.

Tests ordering, awaitable results, None results and error wrapping.
"""

import asyncio

import pytest

from bundler.engine.context import FileContext
from bundler.engine.runner import run_loaders
from bundler.errors import LoaderExecutionError
from bundler.rules.loaders import LoaderDescriptor


def upper(context, options):
    return context.content.upper()


def append(context, options):
    return context.content + options.get("suffix", "!")


def keep(context, options):
    return None


async def async_append(context, options):
    await asyncio.sleep(0)
    return context.content + options["suffix"]


def fail(context, options):
    raise RuntimeError("boom")


async def async_fail(context, options):
    await asyncio.sleep(0)
    raise ValueError("async boom")


class TestRunLoaders:
    """Test suite for run_loaders."""
    
    @pytest.mark.asyncio
    async def test_loaders_run_in_order(self):
        """Test that each loader sees the previous loader's output."""
        context = FileContext(content="hello", file_path="src/index.js")
        loaders = [
            LoaderDescriptor("upper", upper),
            LoaderDescriptor("append", append, {"suffix": "?"}),
        ]
        
        content = await run_loaders(loaders, context)
        
        assert content == "HELLO?"
        assert context.content == "HELLO?"
    
    @pytest.mark.asyncio
    async def test_order_matters(self):
        """Test that reversing the chain changes the result."""
        context = FileContext(content="hello", file_path="src/index.js")
        loaders = [
            LoaderDescriptor("append", append, {"suffix": "?"}),
            LoaderDescriptor("async-append", async_append, {"suffix": "x"}),
        ]
        
        assert await run_loaders(loaders, context) == "hello?x"
    
    @pytest.mark.asyncio
    async def test_awaitable_result_is_resolved(self):
        """Test that awaitable results are awaited before the next loader."""
        context = FileContext(content="a", file_path="a.txt")
        loaders = [
            LoaderDescriptor("async-append", async_append, {"suffix": "b"}),
            LoaderDescriptor("upper", upper),
        ]
        
        assert await run_loaders(loaders, context) == "AB"
    
    @pytest.mark.asyncio
    async def test_none_result_keeps_content(self):
        """Test that a None result leaves the content untouched."""
        context = FileContext(content="same", file_path="a.txt")
        
        assert await run_loaders([LoaderDescriptor("keep", keep)], context) == "same"
    
    @pytest.mark.asyncio
    async def test_first_loader_index_skips_loaders(self):
        """Test starting the chain at a later index."""
        context = FileContext(content="hello", file_path="a.txt")
        loaders = [
            LoaderDescriptor("upper", upper),
            LoaderDescriptor("append", append),
        ]
        
        assert await run_loaders(loaders, context, first_loader_index=1) == "hello!"
    
    @pytest.mark.asyncio
    async def test_empty_chain_returns_content(self):
        """Test that an empty chain returns the original content."""
        context = FileContext(content="hello", file_path="a.txt")
        
        assert await run_loaders([], context) == "hello"
    
    @pytest.mark.asyncio
    async def test_options_are_passed_as_copy(self):
        """Test that loaders cannot mutate their configured options."""
        seen = []
        
        def mutate(context, options):
            seen.append(dict(options))
            options["suffix"] = "changed"
            return None
        
        loader = LoaderDescriptor("mutate", mutate, {"suffix": "original"})
        context = FileContext(content="x", file_path="a.txt")
        
        await run_loaders([loader, loader], context)
        
        assert seen == [{"suffix": "original"}, {"suffix": "original"}]
    
    @pytest.mark.asyncio
    async def test_sync_error_is_wrapped(self):
        """Test that a raising loader aborts the chain with LoaderExecutionError."""
        calls = []
        
        def record(context, options):
            calls.append(context.content)
        
        context = FileContext(content="hello", file_path="src/index.js")
        loaders = [
            LoaderDescriptor("upper", upper),
            LoaderDescriptor("fail", fail),
            LoaderDescriptor("record", record),
        ]
        
        with pytest.raises(LoaderExecutionError) as exc_info:
            await run_loaders(loaders, context)
        
        error = exc_info.value
        assert str(error) == "Loader 'fail' failed: boom"
        assert error.loader == "fail"
        assert error.file_path == "src/index.js"
        assert isinstance(error.original_error, RuntimeError)
        assert error.__cause__ is error.original_error
        assert calls == []
        assert context.content == "HELLO"
    
    @pytest.mark.asyncio
    async def test_async_error_is_wrapped(self):
        """Test that a failing awaitable is wrapped the same way."""
        context = FileContext(content="hello", file_path="a.txt")
        
        with pytest.raises(LoaderExecutionError, match="Loader 'async-fail' failed: async boom"):
            await run_loaders([LoaderDescriptor("async-fail", async_fail)], context)
