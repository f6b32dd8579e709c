import json

from handreplay.cli import main


def test_parse_lists_hands_oldest_first(history_file, capsys):
    assert main(["parse", str(history_file)]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0].startswith("0: #2001 bb=100 players=2")
    assert out[1].startswith("1: #2002 bb=100 players=6 board=7s Jd 2c Kc winners=dave 1810")


def test_parse_json(history_file, capsys):
    assert main(["parse", str(history_file), "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert [h["hand_id"] for h in payload] == ["2001", "2002"]


def test_check_clean_file(history_file, capsys):
    assert main(["check", str(history_file)]) == 0
    assert "No inconsistencies in 2 hands." in capsys.readouterr().out


def test_replay_steps_until_applied(history_file, capsys):
    assert main(["replay", str(history_file), "--hand", "0"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[1] == "preflop:-1 pot=1.50 BB next=A"
    assert out[-1] == "flop:-1 pot=4.00 BB award[applied]=A 400"


def test_replay_limited_steps(history_file, capsys):
    assert main(["replay", str(history_file), "--steps", "1"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert len(out) == 3
    assert out[2].startswith("preflop:2 pot=4.00 BB")


def test_replay_autoplay(history_file, capsys, monkeypatch):
    monkeypatch.setenv("HANDREPLAY_AUTOPLAY_INTERVAL_MS", "5")
    assert main(["replay", str(history_file), "--autoplay"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[-1].startswith("flop:-1 pot=4.00 BB award[show]=A 400")


def test_replay_hand_out_of_range(history_file, capsys):
    assert main(["replay", str(history_file), "--hand", "7"]) == 2
    assert "out of range" in capsys.readouterr().err


def test_missing_file_returns_error(tmp_path, capsys):
    assert main(["parse", str(tmp_path / "nope.txt")]) == 1
    assert "Could not read file" in capsys.readouterr().err


def test_file_without_hands_returns_error(tmp_path, capsys):
    empty = tmp_path / "empty.txt"
    empty.write_text("\n\n", encoding="utf-8")
    assert main(["check", str(empty)]) == 1
    assert "No hands found" in capsys.readouterr().err
