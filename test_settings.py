import json

from settings import load_settings, save_settings


def test_defaults_when_missing(tmp_path):
    settings = load_settings(str(tmp_path / "absent.json"))
    assert settings["locale"] == "en_US"
    assert settings["selection_mode"] == "single"
    assert settings["months_shown"] == 3


def test_round_trip(tmp_path):
    path = str(tmp_path / "settings.json")
    settings = load_settings(path)
    settings.update(locale="de_CH", selection_mode="range", months_before=2,
                    months_after=6, months_shown=2)
    save_settings(settings, path)

    reloaded = load_settings(path)
    assert reloaded == settings


def test_bad_values_fall_back(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({
        "locale": "xx_XX",
        "selection_mode": "everything",
        "months_before": -1,
        "months_after": True,
        "months_shown": 40,
    }), encoding="utf-8")
    assert load_settings(str(path)) == load_settings(str(tmp_path / "absent.json"))


def test_corrupt_file(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_settings(str(path))["locale"] == "en_US"
    path.write_text("[1, 2]", encoding="utf-8")
    assert load_settings(str(path))["months_after"] == 12
