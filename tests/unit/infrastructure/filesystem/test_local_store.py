import os
from pathlib import Path

import pytest

from cacheserde.domain.models.common import CacheKey
from cacheserde.infrastructure.filesystem.local_store import LocalFileStore


@pytest.mark.asyncio
async def test_ensure_namespace_is_idempotent(store: LocalFileStore, cache_root: Path):
    key = CacheKey(str(cache_root / "nested" / "deeper"))

    await store.ensure_namespace(key)
    await store.ensure_namespace(key)

    assert (cache_root / "nested" / "deeper").is_dir()


@pytest.mark.asyncio
async def test_exists_is_false_for_missing_entry(store: LocalFileStore, cache_root: Path):
    assert await store.exists(CacheKey(str(cache_root / "missing"))) is False


@pytest.mark.asyncio
async def test_exists_is_false_when_namespace_is_a_file(store: LocalFileStore, cache_root: Path):
    (cache_root / "file").write_text("x")
    assert await store.exists(CacheKey(str(cache_root / "file"))) is False


@pytest.mark.asyncio
async def test_write_then_read(store: LocalFileStore, cache_root: Path):
    key = CacheKey(str(cache_root / "entry"))
    await store.ensure_namespace(key)

    await store.write(key, b'{"a": 1}')

    assert await store.exists(key) is True
    assert await store.read(key) == b'{"a": 1}'
    assert (cache_root / "entry" / "data.json").read_bytes() == b'{"a": 1}'
    assert [p.name for p in (cache_root / "entry").iterdir()] == ["data.json"]


@pytest.mark.asyncio
async def test_write_overwrites(store: LocalFileStore, cache_root: Path):
    key = CacheKey(str(cache_root / "entry"))
    await store.ensure_namespace(key)

    await store.write(key, b"1")
    await store.write(key, b"2")

    assert await store.read(key) == b"2"


@pytest.mark.asyncio
async def test_failed_write_leaves_no_temp_file(store: LocalFileStore, cache_root: Path):
    key = CacheKey(str(cache_root / "entry"))
    await store.ensure_namespace(key)
    (cache_root / "entry" / "data.json").mkdir()

    with pytest.raises(OSError):
        await store.write(key, b"1")

    assert [p.name for p in (cache_root / "entry").iterdir()] == ["data.json"]


@pytest.mark.asyncio
async def test_age_uses_modification_time(cache_root: Path):
    store = LocalFileStore(clock=lambda: 5_000.0)
    key = CacheKey(str(cache_root / "entry"))
    path = cache_root / "entry" / "data.json"
    path.parent.mkdir()
    path.write_text("1")
    os.utime(path, (4_000.0, 4_000.0))

    assert await store.age(key) == pytest.approx(1_000.0)


@pytest.mark.asyncio
async def test_custom_entry_filename(cache_root: Path):
    store = LocalFileStore(entry_filename="payload.bin")
    key = CacheKey(str(cache_root / "entry"))
    await store.ensure_namespace(key)

    await store.write(key, b"data")

    assert (cache_root / "entry" / "payload.bin").read_bytes() == b"data"
    assert store.entry_path(key) == str(cache_root / "entry" / "payload.bin")


@pytest.mark.parametrize("name", ["", "a/b"])
def test_invalid_entry_filename(name):
    with pytest.raises(ValueError):
        LocalFileStore(entry_filename=name)


@pytest.mark.asyncio
async def test_delete(store: LocalFileStore, cache_root: Path):
    key = CacheKey(str(cache_root / "entry"))
    await store.ensure_namespace(key)
    await store.write(key, b"1")

    await store.delete(key)
    await store.delete(key)

    assert await store.exists(key) is False
