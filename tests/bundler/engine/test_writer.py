"""
Unit tests for the result writer.

Tests destination path computation, source prefix stripping, extra
artifacts and diagnostics.
"""

import pytest

from bundler.config.schema import BundlerConfig
from bundler.engine.context import FileContext, MessageLevel
from bundler.engine.writer import LOG_SOURCE, ResultWriter, strip_source_dir
from bundler.packages import PackageDescriptor, get_dest_dir
from bundler.project import Project


class TestStripSourceDir:
    """Test suite for strip_source_dir."""
    
    def test_strips_matching_source(self):
        assert strip_source_dir("src/a/b.js", ["src"]) == "a/b.js"
    
    def test_first_matching_source_wins(self):
        assert strip_source_dir("lib/x.js", ["src", "lib"]) == "x.js"
    
    def test_no_match_returns_path_unchanged(self):
        assert strip_source_dir("other/x.js", ["src"]) == "other/x.js"
    
    def test_prefix_must_be_a_whole_directory(self):
        """Test that 'src' does not strip from 'srcs/...'."""
        assert strip_source_dir("srcs/x.js", ["src"]) == "srcs/x.js"
    
    def test_nested_source(self):
        assert strip_source_dir("src/main/resources/a.js", ["src/main/resources"]) == "a.js"
    
    def test_current_directory_source_is_ignored(self):
        assert strip_source_dir("a.js", ["."]) == "a.js"


class TestResultWriter:
    """Test suite for ResultWriter."""
    
    @pytest.fixture(autouse=True)
    def setup_project(self, tmp_path):
        self.project = Project(tmp_path, BundlerConfig(sources=["src"]))
        self.root_pkg = PackageDescriptor.create("my-app", "1.0.0", str(tmp_path), is_root=True)
        self.root_dest = self.root_pkg.clone(dir=get_dest_dir(self.project, self.root_pkg))
        self.dep_pkg = PackageDescriptor.create(
            "@scope/dep", "2.0.0", str(tmp_path / "node_modules" / "@scope" / "dep")
        )
        self.dep_dest = self.dep_pkg.clone(dir=get_dest_dir(self.project, self.dep_pkg))
        self.writer = ResultWriter(self.project)
        self.build_dir = tmp_path / "build"
    
    def test_dest_file_path_for_root_strips_source(self):
        """Test that root package files lose their source directory prefix."""
        dest = self.writer.dest_file_path(self.root_pkg, self.root_dest, "src/a/b.js")
        
        assert dest == str(self.build_dir / "a" / "b.js")
    
    def test_dest_file_path_for_dependency_keeps_layout(self):
        """Test that dependency files keep their package-relative path."""
        dest = self.writer.dest_file_path(
            self.dep_pkg, self.dep_dest, "node_modules/@scope/dep/src/index.js"
        )
        
        expected = self.build_dir / "node_modules" / "@scope%2Fdep@2.0.0" / "src" / "index.js"
        assert dest == str(expected)
    
    @pytest.mark.asyncio
    async def test_write_content(self):
        """Test that the final content is written to the destination file."""
        context = FileContext(content="HELLO", file_path="src/index.js")
        
        result = await self.writer.write(self.root_pkg, self.root_dest, context)
        
        assert (self.build_dir / "index.js").read_text(encoding="utf-8") == "HELLO"
        assert result.output_path == str(self.build_dir / "index.js")
        assert result.artifact_paths == []
        assert len(context.log) == 0
    
    @pytest.mark.asyncio
    async def test_none_content_is_not_written(self):
        """Test that None content produces no main output file."""
        context = FileContext(content=None, file_path="src/index.js")
        
        result = await self.writer.write(self.root_pkg, self.root_dest, context)
        
        assert result.output_path is None
        assert not (self.build_dir / "index.js").exists()
    
    @pytest.mark.asyncio
    async def test_empty_content_is_written(self):
        """Test that an empty string is still written."""
        context = FileContext(content="", file_path="src/empty.js")
        
        await self.writer.write(self.root_pkg, self.root_dest, context)
        
        assert (self.build_dir / "empty.js").read_text(encoding="utf-8") == ""
    
    @pytest.mark.asyncio
    async def test_extra_artifacts_are_written_and_logged(self):
        """Test extra artifacts are written next to the output with a diagnostic each."""
        context = FileContext(
            content="{}",
            file_path="src/data.json",
            extra_artifacts={
                "src/data.json.js": "module.exports = {};\n",
                "src/skipped.js": None,
            },
        )
        
        result = await self.writer.write(self.root_pkg, self.root_dest, context)
        
        assert (self.build_dir / "data.json.js").read_text(encoding="utf-8") == "module.exports = {};\n"
        assert not (self.build_dir / "skipped.js").exists()
        assert result.artifact_paths == [str(self.build_dir / "data.json.js")]
        
        messages = context.log.messages
        assert len(messages) == 1
        assert messages[0].source == LOG_SOURCE
        assert messages[0].level == MessageLevel.INFO
        assert messages[0].text == "Rules generated extra artifact: src/data.json.js"
    
    @pytest.mark.asyncio
    async def test_artifact_written_even_without_content(self):
        """Test that artifacts do not depend on the main content."""
        context = FileContext(
            content=None,
            file_path="src/style.css",
            extra_artifacts={"src/style.css.js": "inject();"},
        )
        
        await self.writer.write(self.root_pkg, self.root_dest, context)
        
        assert not (self.build_dir / "style.css").exists()
        assert (self.build_dir / "style.css.js").exists()
    
    @pytest.mark.asyncio
    async def test_dependency_file_written_under_node_modules(self):
        """Test that dependency outputs land in the encoded package directory."""
        context = FileContext(content="dep", file_path="node_modules/@scope/dep/lib/main.js")
        
        await self.writer.write(self.dep_pkg, self.dep_dest, context)
        
        dest = self.build_dir / "node_modules" / "@scope%2Fdep@2.0.0" / "lib" / "main.js"
        assert dest.read_text(encoding="utf-8") == "dep"
    
    @pytest.mark.asyncio
    async def test_existing_file_is_overwritten(self):
        """Test that previous build output is replaced."""
        self.build_dir.mkdir()
        (self.build_dir / "index.js").write_text("old", encoding="utf-8")
        context = FileContext(content="new", file_path="src/index.js")
        
        await self.writer.write(self.root_pkg, self.root_dest, context)
        
        assert (self.build_dir / "index.js").read_text(encoding="utf-8") == "new"
