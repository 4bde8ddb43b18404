from pathlib import Path
from everpak.tools.naming import packed_path, unpacked_path


def test_unpacked_name():
    assert unpacked_path("game/data.pak") == Path("game/data_decompressed.pak")


def test_packed_name():
    assert packed_path("game/data_decompressed.pak") == Path("game/data.pak")


def test_directories_are_not_rewritten():
    assert unpacked_path("my.pack.dir/data.pak") == Path("my.pack.dir/data_decompressed.pak")


def test_missing_marker_never_returns_input():
    assert unpacked_path("archive.bin") == Path("archive.bin.unpacked")
    assert packed_path("payload.bin") == Path("payload.bin.packed")
