from unittest.mock import patch

import pytest

import main


def test_filters_from_cli(sample_csv_path, capsys):
    assert main.main(["--data", str(sample_csv_path), "--borough", "Queens"]) == 0
    out = capsys.readouterr().out
    assert "2 spots found" in out
    assert "Queens Hall" in out
    assert "Bryant Park" not in out


def test_zip_search_from_cli(sample_csv_path, capsys):
    assert main.main(["--data", str(sample_csv_path), "--search", "10001", "--radius", "0.5"]) == 0
    out = capsys.readouterr().out
    assert "Chelsea Kiosk" in out
    assert "mi away" in out
    assert "Brooklyn Library" not in out


def test_near_from_cli(sample_csv_path, capsys):
    assert main.main(["--data", str(sample_csv_path), "--near", "40.7536,-73.9832", "--radius", "0.1"]) == 0
    out = capsys.readouterr().out
    assert "1 spots found" in out
    assert "Bryant Park" in out


def test_missing_dataset(tmp_path, capsys):
    assert main.main(["--data", str(tmp_path / "missing.csv")]) == 1
    assert "Error loading WiFi spots data" in capsys.readouterr().out


def test_list_filters(sample_csv_path, capsys):
    assert main.main(["--data", str(sample_csv_path), "--list-filters"]) == 0
    out = capsys.readouterr().out
    assert "Brooklyn, Manhattan, Queens" in out
    assert "Free, Limited Free" in out


def test_map_output(sample_csv_path, tmp_path, capsys):
    out_file = tmp_path / "map.html"
    with patch("map_visualization.webbrowser.open") as mock_open:
        assert main.main(["--data", str(sample_csv_path), "--map", str(out_file)]) == 0
    mock_open.assert_not_called()
    assert out_file.is_file()
    assert "Bryant Park" in out_file.read_text(encoding="utf-8")


def test_focus_on_spot(sample_csv_path, tmp_path):
    out_file = tmp_path / "focus.html"
    with patch("main.create_spots_map", wraps=main.create_spots_map) as mock_map:
        assert main.main(["--data", str(sample_csv_path), "--map", str(out_file), "--focus", "2"]) == 0
    focus = mock_map.call_args.kwargs["focus"]
    assert focus.name == "Chelsea Kiosk"
    assert out_file.is_file()


def test_focus_unknown_id_falls_back_to_full_map(sample_csv_path, tmp_path, capsys):
    out_file = tmp_path / "map.html"
    with patch("main.create_spots_map", wraps=main.create_spots_map) as mock_map:
        assert main.main(["--data", str(sample_csv_path), "--map", str(out_file), "--focus", "99"]) == 0
    assert mock_map.call_args.kwargs["focus"] is None
    assert "No spot with id 99" in capsys.readouterr().out


def test_focus_requires_map(sample_csv_path):
    with pytest.raises(SystemExit) as exc:
        main.main(["--data", str(sample_csv_path), "--focus", "2"])
    assert exc.value.code == 2


@pytest.mark.parametrize(
    "extra",
    [
        ["--search", "10001", "--borough", "Queens"],
        ["--near", "40.7536,-73.9832", "--type", "Free"],
        ["--search", "Bryant Park", "--text", "library"],
    ],
)
def test_filters_rejected_with_search_or_near(sample_csv_path, extra, capsys):
    with pytest.raises(SystemExit) as exc:
        main.main(["--data", str(sample_csv_path)] + extra)
    assert exc.value.code == 2
    assert "cannot be combined" in capsys.readouterr().err
