import json
import logging

from apeisland.__main__ import main


def test_cli_runs_steps_and_saves(tmp_path, capsys):
    save = tmp_path / "ape.json"
    try:
        main([
            "--steps", "12", "--speed", "0", "--seed", "3", "--policy", "tabular",
            "--config", str(tmp_path / "none.yaml"), "--save", str(save),
            "--log-dir", str(tmp_path / "runs"), "--advice", "go north",
        ])
    finally:
        logger = logging.getLogger("apeisland")
        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)

    out = capsys.readouterr().out
    assert "Ape: Rule saved: go north." in out
    assert "ended after 12 steps" in out
    record = json.loads(save.read_text())
    assert record["policy"]["kind"] == "tabular" and record["age"] == 12
    assert (tmp_path / "runs" / "latest.log").exists()
