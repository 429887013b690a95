import os
import shutil
import stat
import tempfile
import threading
from pathlib import Path
from unittest.mock import Mock

import pytest

from infrastructure.file_system_tool_cache import FileSystemToolCache, default_cache_dir


class TestFileSystemToolCache:
    @pytest.fixture
    def temp_cache_dir(self):
        temp_dir = tempfile.mkdtemp()
        yield Path(temp_dir)
        shutil.rmtree(temp_dir)

    @pytest.fixture
    def cache(self, temp_cache_dir):
        return FileSystemToolCache(temp_cache_dir, "x86_64")

    @pytest.fixture
    def binary(self, tmp_path):
        path = tmp_path / "cs-download"
        path.write_bytes(b"#!/bin/sh\necho cs\n")
        path.chmod(0o755)
        return path

    def test_initialization_creates_directory(self, tmp_path):
        cache_dir = tmp_path / "nested" / "cache"
        FileSystemToolCache(cache_dir, "x86_64")

        assert cache_dir.is_dir()

    def test_find_returns_none_for_missing_entry(self, cache):
        assert cache.find("cs", "2.1.0") is None

    def test_find_requires_tool_and_version(self, cache):
        with pytest.raises(ValueError):
            cache.find("cs", "")

    def test_cache_file_creates_entry_and_marker(self, cache, temp_cache_dir, binary):
        entry_dir = cache.cache_file(binary, "cs", "cs", "2.1.0")

        assert entry_dir == temp_cache_dir / "cs" / "2.1.0" / "x86_64"
        assert (entry_dir / "cs").read_bytes() == b"#!/bin/sh\necho cs\n"
        assert (temp_cache_dir / "cs" / "2.1.0" / "x86_64.complete").is_file()

    def test_cache_file_keeps_executable_bit(self, cache, binary):
        entry_dir = cache.cache_file(binary, "cs", "cs", "2.1.0")

        mode = os.stat(entry_dir / "cs").st_mode
        assert mode & stat.S_IXUSR

    def test_find_returns_cached_entry(self, cache, binary):
        entry_dir = cache.cache_file(binary, "cs", "cs", "2.1.0")

        assert cache.find("cs", "2.1.0") == entry_dir
        assert cache.find("cs", "2.0.0") is None

    def test_find_ignores_entry_without_marker(self, cache, temp_cache_dir):
        entry_dir = temp_cache_dir / "cs" / "2.1.0" / "x86_64"
        entry_dir.mkdir(parents=True)
        (entry_dir / "cs").write_bytes(b"partial")

        assert cache.find("cs", "2.1.0") is None

    def test_cache_file_replaces_incomplete_entry(self, cache, temp_cache_dir, binary):
        entry_dir = temp_cache_dir / "cs" / "2.1.0" / "x86_64"
        entry_dir.mkdir(parents=True)
        (entry_dir / "leftover").write_bytes(b"old")

        cache.cache_file(binary, "cs", "cs", "2.1.0")

        assert not (entry_dir / "leftover").exists()
        assert (entry_dir / "cs").exists()

    def test_cache_file_rejects_missing_source(self, cache, tmp_path):
        with pytest.raises(IOError):
            cache.cache_file(tmp_path / "missing", "cs", "cs", "2.1.0")

    def test_entries_are_separated_by_arch(self, temp_cache_dir, binary):
        x86 = FileSystemToolCache(temp_cache_dir, "x86_64")
        arm = FileSystemToolCache(temp_cache_dir, "aarch64")

        x86.cache_file(binary, "cs", "cs", "2.1.0")

        assert x86.find("cs", "2.1.0") is not None
        assert arm.find("cs", "2.1.0") is None

    def test_get_or_install_installs_on_miss(self, cache, binary):
        install = Mock(return_value=(binary, "cs"))

        entry_dir, cache_hit = cache.get_or_install("cs", "2.1.0", install)

        assert cache_hit is False
        install.assert_called_once_with()
        assert (entry_dir / "cs").exists()

    def test_get_or_install_skips_install_on_hit(self, cache, binary):
        first_dir, _ = cache.get_or_install("cs", "2.1.0", Mock(return_value=(binary, "cs")))
        install = Mock()

        entry_dir, cache_hit = cache.get_or_install("cs", "2.1.0", install)

        assert cache_hit is True
        assert entry_dir == first_dir
        install.assert_not_called()

    def test_get_or_install_propagates_install_failure(self, cache):
        install = Mock(side_effect=IOError("disk full"))

        with pytest.raises(IOError):
            cache.get_or_install("cs", "2.1.0", install)

        assert cache.find("cs", "2.1.0") is None

    def test_concurrent_get_or_install_installs_once(self, cache, binary):
        calls = []

        def install():
            calls.append(1)
            return binary, "cs"

        results = []

        def worker():
            results.append(cache.get_or_install("cs", "2.1.0", install))

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(calls) == 1
        assert len({entry_dir for entry_dir, _ in results}) == 1
        assert sorted(hit for _, hit in results) == [False, True, True, True, True]


class TestDefaultCacheDir:
    def test_uses_runner_tool_cache(self, monkeypatch, tmp_path):
        monkeypatch.setenv("RUNNER_TOOL_CACHE", str(tmp_path))

        assert default_cache_dir() == tmp_path

    def test_falls_back_to_home(self, monkeypatch, tmp_path):
        monkeypatch.delenv("RUNNER_TOOL_CACHE", raising=False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)

        assert default_cache_dir() == tmp_path / ".cache" / "setup-coursier"
