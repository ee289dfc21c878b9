"""Tests for the command line entry point."""

import app


def test_rejects_small_boards(capsys):
    assert app.main(["3"]) == 2
    assert "at least 4" in capsys.readouterr().out


def test_rejects_invalid_genetic_settings(capsys):
    assert app.main(["8", "--mode", "genetic", "--parents", "8"]) == 2
    assert "Invalid configuration" in capsys.readouterr().out


def test_hill_climbing_run(capsys):
    code = app.main(["4", "--seed", "7", "--max-attempts", "5000"])
    out = capsys.readouterr().out
    assert code in (0, 1)
    assert "Queens: [" in out
    if code == 0:
        assert "SOLVED!" in out


def test_genetic_run(capsys):
    code = app.main(["6", "--mode", "genetic", "--seed", "3", "--generations", "3"])
    out = capsys.readouterr().out
    assert code in (0, 1)
    assert "Config | n=6" in out


def test_repeats_summary(capsys):
    app.main(["4", "--seed", "1", "--repeats", "3", "--max-attempts", "5000"])
    assert "Repeated 3 runs" in capsys.readouterr().out
