from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path


def _run(tmp_path, *args, check=True):
    repo_root = Path(__file__).resolve().parents[2]
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(
        filter(None, [str(repo_root), env.get("PYTHONPATH")])
    )
    cmd = [sys.executable, "-m", "wp_palette.main", "build", *args]
    return subprocess.run(
        cmd, cwd=tmp_path, env=env, check=check, capture_output=True, text=True
    )


def test_cli_build_smoke(tmp_path):
    styles = tmp_path / "styles"
    styles.mkdir()
    (styles / "app.scss").write_text(
        "$brand: #0ea5e9;\n$colors: (brand: $brand, ink: #111111, none: inherit);\n",
        encoding="utf-8",
    )
    (tmp_path / "theme.json").write_text(
        json.dumps({"version": 2, "styles": {"spacing": {"blockGap": "1rem"}}}),
        encoding="utf-8",
    )

    completed = _run(
        tmp_path,
        "--sass-path",
        "styles",
        "--sass-file",
        "app.scss",
        "--variable",
        "$colors",
        "--color",
        "accent=#f59e0b",
    )

    assert completed.returncode == 0
    payload = json.loads((tmp_path / "theme.json").read_text(encoding="utf-8"))
    assert payload["styles"] == {"spacing": {"blockGap": "1rem"}}
    assert [c["name"] for c in payload["settings"]["color"]["palette"]] == [
        "Accent",
        "Brand",
        "Ink",
    ]


def test_cli_flat_stdout(tmp_path):
    completed = _run(tmp_path, "--flat", "--stdout", "--color", "brand-primary=red")

    assert json.loads(completed.stdout) == [
        {"name": "Brand Primary", "slug": "brand-primary", "color": "red"}
    ]
    assert not (tmp_path / "theme.json").exists()


def test_cli_malformed_document_exits_with_error(tmp_path):
    (tmp_path / "theme.json").write_text("{oops", encoding="utf-8")

    completed = _run(tmp_path, "--color", "brand=#f00", check=False)

    assert completed.returncode == 1
    assert "not valid JSON" in completed.stderr
    assert (tmp_path / "theme.json").read_text(encoding="utf-8") == "{oops"
