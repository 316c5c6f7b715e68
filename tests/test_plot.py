from pathlib import Path

import pytest
from PIL import Image

from number_maker.plot import render_coverage


def test_render_coverage_headless(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv("DISPLAY", raising=False)
    monkeypatch.delenv("MPLBACKEND", raising=False)

    target = tmp_path / "coverage.png"
    path = render_coverage({0: "1-1", 2: "1+1"}, 25, path=str(target))
    assert Path(path) == target
    with Image.open(path) as img:
        assert img.format == "PNG"
        assert img.size[0] > 0

    import matplotlib

    assert matplotlib.get_backend().lower() in {"agg", "tkagg"}


def test_render_coverage_temp_file(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("DISPLAY", raising=False)
    path = render_coverage({}, 300, title="Nothing yet")
    try:
        assert Path(path).is_file()
        assert path.endswith(".png")
    finally:
        Path(path).unlink(missing_ok=True)
