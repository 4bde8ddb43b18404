import json
from everpak.config import DEFAULTS, PakConfig, config
from everpak.packager import Packager


def test_defaults_without_file(tmp_path):
    cfg = PakConfig(str(tmp_path / "missing.json"))
    assert cfg.compression_level == 1
    assert cfg.workers == 1
    assert cfg.batch_size == 64
    assert cfg.progress_enabled is True
    assert cfg.packed_marker == ".p"
    assert cfg.unpacked_marker == "_decompressed.p"


def test_file_merges_over_defaults(tmp_path):
    path = tmp_path / "everpak.config.json"
    path.write_text(json.dumps({"compression": {"workers": 4}}), encoding="utf-8")
    cfg = PakConfig(str(path))
    assert cfg.workers == 4
    assert cfg.compression_level == 1
    assert DEFAULTS["compression"]["workers"] == 1


def test_invalid_json_falls_back(tmp_path):
    path = tmp_path / "everpak.config.json"
    path.write_text("{not json", encoding="utf-8")
    assert PakConfig(str(path)).get("compression", "level") == 1


def test_get_set_save(tmp_path):
    cfg = PakConfig(str(tmp_path / "cfg.json"))
    cfg.set("compression", "level", 9)
    assert cfg.get("compression", "level") == 9
    assert cfg.get("nope", "missing", default="x") == "x"
    cfg.save()
    assert PakConfig(str(tmp_path / "cfg.json")).compression_level == 9


def test_packager_takes_config_defaults(monkeypatch):
    monkeypatch.setattr(config, "_config", {"compression": {"level": 6, "workers": 2, "batch_size": 8}})
    packager = Packager()
    assert packager.compression_level == 6
    assert packager.workers == 2
    assert packager.batch_size == 8
