import json
import os
import sys
from pathlib import Path

import pytest
from PIL import Image

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from atlaspack import cli

PLUGIN_SOURCE = '''
from pathlib import Path


class Reverse:
    name = "reverse"

    def on_pack_pre(self, sprites, args, ctx):
        return list(reversed(sprites))

    def on_pack_post(self, png_path, json_path, args, ctx):
        Path("post_hook.txt").write_text(png_path + "\\n" + json_path, encoding="utf-8")


PLUGIN = Reverse()
'''


@pytest.fixture(autouse=True)
def workspace(tmp_path, monkeypatch):
    for var in list(os.environ):
        if var.startswith("ATLASPACK_"):
            monkeypatch.delenv(var)
    monkeypatch.chdir(tmp_path)
    (tmp_path / "input").mkdir()
    return tmp_path


def _add_sprite(workspace: Path, name: str, color=(255, 0, 0, 255), size=(2, 2)) -> None:
    Image.new("RGBA", size, color).save(workspace / "input" / name)


def _manifest(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


def test_defaults_pack_input_into_packed(workspace):
    _add_sprite(workspace, "a.png")
    _add_sprite(workspace, "b.png", color=(0, 0, 255, 255))

    assert cli.main([]) == 0

    payload = _manifest(workspace / "packed.json")
    assert payload["frames"]["a.png"]["frame"] == {"X": 1, "Y": 1, "W": 2, "H": 2}
    assert payload["frames"]["b.png"]["frame"] == {"X": 5, "Y": 1, "W": 2, "H": 2}
    assert payload["meta"]["protocol"] == "atlaspack/1.0"
    with Image.open(workspace / "packed.png") as atlas:
        assert atlas.size == (1024, 32)
        assert atlas.convert("RGBA").getpixel((5, 1)) == (0, 0, 255, 255)


def test_empty_input_writes_blank_atlas(workspace):
    assert cli.main([]) == 0

    assert _manifest(workspace / "packed.json")["frames"] == {}
    with Image.open(workspace / "packed.png") as atlas:
        assert atlas.size == (1024, 32)


def test_undecodable_file_aborts_before_output(workspace):
    _add_sprite(workspace, "a.png")
    (workspace / "input" / "notes.txt").write_text("not an image", encoding="utf-8")

    assert cli.main([]) == 1

    assert not (workspace / "packed.png").exists()
    assert not (workspace / "packed.json").exists()


def test_missing_input_directory_fails(workspace):
    assert cli.main(["--input", "nowhere"]) == 1
    assert not (workspace / "packed.json").exists()


def test_flags_override_defaults(workspace):
    _add_sprite(workspace, "a.png", size=(3, 3))
    _add_sprite(workspace, "b.png")

    code = cli.main(["--output", "out/atlas", "--padding", "0", "--width", "64", "--height", "16"])

    assert code == 0
    payload = _manifest(workspace / "out" / "atlas.json")
    assert payload["frames"]["a.png"]["frame"] == {"X": 0, "Y": 0, "W": 3, "H": 3}
    assert payload["frames"]["b.png"]["frame"] == {"X": 3, "Y": 0, "W": 2, "H": 2}
    assert payload["meta"]["size"] == {"w": 64, "h": 16}
    with Image.open(workspace / "out" / "atlas.png") as atlas:
        assert atlas.size == (64, 16)


def test_environment_feeds_settings(workspace, monkeypatch):
    _add_sprite(workspace, "a.png")
    monkeypatch.setenv("ATLASPACK_EXTRUDE", "2")
    monkeypatch.setenv("ATLASPACK_OUTPUT", "from_env")

    assert cli.main([]) == 0
    assert _manifest(workspace / "from_env.json")["frames"]["a.png"]["frame"]["X"] == 2


def test_overflow_error_policy_fails_without_output(workspace):
    for name in ("a.png", "b.png", "c.png"):
        _add_sprite(workspace, name)

    assert cli.main(["--width", "8", "--overflow", "error"]) == 1
    assert not (workspace / "packed.png").exists()

    assert cli.main(["--width", "8"]) == 0
    assert _manifest(workspace / "packed.json")["frames"]["c.png"]["frame"]["X"] == 9


def test_negative_extrude_is_rejected(workspace):
    assert cli.main(["--extrude", "-1"]) == 1


def test_local_plugins_run_around_packing(workspace):
    _add_sprite(workspace, "a.png")
    _add_sprite(workspace, "b.png")
    plugin_dir = workspace / "plugins" / "reverse"
    plugin_dir.mkdir(parents=True)
    (plugin_dir / "plugin.py").write_text(PLUGIN_SOURCE, encoding="utf-8")

    assert cli.main([]) == 0

    frames = _manifest(workspace / "packed.json")["frames"]
    assert frames["b.png"]["frame"]["X"] == 1
    assert frames["a.png"]["frame"]["X"] == 5
    assert (workspace / "post_hook.txt").read_text(encoding="utf-8").splitlines() == ["packed.png", "packed.json"]


def test_no_plugins_flag_skips_hooks(workspace):
    _add_sprite(workspace, "a.png")
    _add_sprite(workspace, "b.png")
    plugin_dir = workspace / "plugins" / "reverse"
    plugin_dir.mkdir(parents=True)
    (plugin_dir / "plugin.py").write_text(PLUGIN_SOURCE, encoding="utf-8")

    assert cli.main(["--no-plugins"]) == 0

    assert _manifest(workspace / "packed.json")["frames"]["a.png"]["frame"]["X"] == 1
    assert not (workspace / "post_hook.txt").exists()


def test_broken_plugin_is_skipped(workspace):
    _add_sprite(workspace, "a.png")
    plugin_dir = workspace / "plugins" / "broken"
    plugin_dir.mkdir(parents=True)
    (plugin_dir / "plugin.py").write_text("raise RuntimeError('boom')\n", encoding="utf-8")

    assert cli.main([]) == 0
    assert (workspace / "packed.json").exists()


def test_dataclass_plugin_is_loaded(workspace):
    _add_sprite(workspace, "a.png")
    plugin_dir = workspace / "plugins" / "marker"
    plugin_dir.mkdir(parents=True)
    (plugin_dir / "plugin.py").write_text(
        "from dataclasses import dataclass\n"
        "from pathlib import Path\n"
        "\n"
        "\n"
        "@dataclass\n"
        "class Marker:\n"
        "    name: str = 'marker'\n"
        "\n"
        "    def on_pack_post(self, png_path, json_path, args, ctx):\n"
        "        Path('marker.txt').write_text(json_path, encoding='utf-8')\n"
        "\n"
        "\n"
        "PLUGIN = Marker()\n",
        encoding="utf-8",
    )

    assert cli.main([]) == 0
    assert (workspace / "marker.txt").read_text(encoding="utf-8") == "packed.json"


def test_unknown_log_level_is_rejected_by_parser(workspace):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--log-level", "basic_format"])
    assert excinfo.value.code == 2


def test_log_level_is_case_insensitive(workspace):
    assert cli.main(["--log-level", "warning"]) == 0
