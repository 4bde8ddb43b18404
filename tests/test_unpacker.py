import io
import struct
import zlib
import pytest
from conftest import make_payload, pack_bytes
from everpak.errors import BadSectionCount, DecodeError
from everpak.format.section_table import HEADER_SIZE, MAX_SECTION_COUNT, SECTION_SIZE, decode_table
from everpak.config import config
from everpak.unpacker import Unpacker


def _unpack(packed, **kwargs):
    out = io.BytesIO()
    Unpacker(**kwargs).unpack_stream(packed, out)
    return out.getvalue()


@pytest.mark.parametrize("size", [1, 0x9000, SECTION_SIZE * 3 + 0x123])
def test_round_trip(size):
    data = make_payload(size)
    assert _unpack(pack_bytes(data)) == data


def test_round_trip_every_level(payload):
    for level in (0, 1, 6, 9):
        assert _unpack(pack_bytes(payload, compression_level=level)) == payload


def test_unpack_summary(payload):
    packed = pack_bytes(payload)
    result = Unpacker().unpack_stream(packed, io.BytesIO())
    assert result == {
        'section_count': 4,
        'packed_size': len(packed.getvalue()),
        'unpacked_size': len(payload),
    }


def test_unpack_twice_is_identical(payload):
    packed = pack_bytes(payload)
    before = packed.getvalue()
    first = _unpack(packed)
    second = _unpack(packed)
    assert first == second == payload
    assert packed.getvalue() == before


@pytest.mark.parametrize("count", [0, MAX_SECTION_COUNT + 1])
def test_bad_count_fails_before_decompressing(monkeypatch, payload, count):
    blob = bytearray(pack_bytes(payload).getvalue())
    blob[:8] = struct.pack('<Q', count)

    def boom(*args, **kwargs):
        raise AssertionError("decompression attempted")

    monkeypatch.setattr(zlib, "decompress", boom)
    out = io.BytesIO()
    with pytest.raises(BadSectionCount):
        Unpacker().unpack_stream(io.BytesIO(bytes(blob)), out)
    assert out.getvalue() == b''


def test_corrupt_section_reports_index(payload):
    packed = pack_bytes(payload)
    sections = decode_table(packed)
    blob = bytearray(packed.getvalue())
    blob[sections[2].offset:sections[2].offset + 2] = b'\0\0'

    with pytest.raises(DecodeError) as exc:
        _unpack(io.BytesIO(bytes(blob)))
    assert exc.value.index == 2
    assert exc.value.reason


def test_truncated_last_section_fails(payload):
    blob = pack_bytes(payload).getvalue()
    with pytest.raises(DecodeError) as exc:
        _unpack(io.BytesIO(blob[:-4]))
    assert exc.value.index == 3


def test_progress_reported_per_section(payload):
    calls = []
    Unpacker().unpack_stream(pack_bytes(payload), io.BytesIO(), on_progress=lambda d, t: calls.append((d, t)))
    assert calls == [(1, 4), (2, 4), (3, 4), (4, 4)]


def test_read_section_random_access(payload):
    packed = pack_bytes(payload)
    unpacker = Unpacker()
    assert unpacker.read_section(packed, 2) == payload[2 * SECTION_SIZE:3 * SECTION_SIZE]
    assert unpacker.read_section(packed, 3) == payload[3 * SECTION_SIZE:]
    with pytest.raises(IndexError):
        unpacker.read_section(packed, 4)


def test_iter_sections(payload):
    chunks = list(Unpacker().iter_sections(pack_bytes(payload)))
    assert [len(c) for c in chunks] == [SECTION_SIZE] * 3 + [0x123]
    assert b''.join(chunks) == payload


@pytest.mark.parametrize("batch_size", [1, 3, 64])
def test_parallel_unpack_matches_sequential(payload, batch_size):
    packed = pack_bytes(payload)
    assert _unpack(packed, workers=4, batch_size=batch_size) == payload


def test_parallel_unpack_propagates_decode_error(payload):
    packed = pack_bytes(payload)
    blob = bytearray(packed.getvalue())
    blob[HEADER_SIZE:HEADER_SIZE + 2] = b'\0\0'
    with pytest.raises(DecodeError) as exc:
        _unpack(io.BytesIO(bytes(blob)), workers=3, batch_size=2)
    assert exc.value.index == 0


def test_unpack_file(tmp_path, payload):
    archive = tmp_path / "data.pak"
    archive.write_bytes(pack_bytes(payload).getvalue())
    out = tmp_path / "data_decompressed.pak"

    result = Unpacker().unpack(str(archive), str(out))

    assert result['success']
    assert result['output_path'] == str(out)
    assert out.read_bytes() == payload


def test_unpack_file_failure_discards_output(tmp_path):
    archive = tmp_path / "bad.pak"
    archive.write_bytes(bytes(64))
    out = tmp_path / "bad_decompressed.pak"

    with pytest.raises(BadSectionCount):
        Unpacker().unpack(str(archive), str(out))

    assert sorted(p.name for p in tmp_path.iterdir()) == ["bad.pak"]


@pytest.mark.parametrize("batch_size", [-1, -64])
def test_invalid_batch_size(batch_size):
    with pytest.raises(ValueError):
        Unpacker(workers=2, batch_size=batch_size)


def test_zero_batch_size_from_config(monkeypatch):
    monkeypatch.setattr(config, "_config", {"compression": {"workers": 2, "batch_size": 0}})
    with pytest.raises(ValueError):
        Unpacker()
