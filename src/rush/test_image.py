"""Tests for the image operations: tessellate, resize, reorient and summary."""
from __future__ import annotations

import threading
from pathlib import Path

import pytest
from PIL import Image

from rush.errors import InvalidArgumentError


# ── helpers ──────────────────────────────────────────────────────────────────


def _make_image(path: Path, width: int = 100, height: int = 100, channels: int = 3) -> None:
    """Write a small gradient image for testing."""
    mode = {1: "L", 3: "RGB", 4: "RGBA"}[channels]
    img = Image.new(mode, (width, height))
    img.putdata([((x * 7 + y * 3) % 256,) * channels if channels > 1 else (x * 7 + y * 3) % 256
                 for y in range(height) for x in range(width)])
    img.save(path)


def _names(directory: Path):
    return sorted(p.name for p in directory.iterdir() if p.is_file())


# ── tile naming / emission ───────────────────────────────────────────────────

def test_tile_filename_uses_absolute_bounds():
    from rush.image.tessellate import tile_filename
    from rush.partition import Range, Tile

    tile = Tile(index=5, vertical=Range(3, 5), horizontal=Range(7, 10))
    assert tile_filename("img", tile, ".png") == "img_id5_w7-10_h3-5.png"


def test_emit_tiles_crops_each_region():
    from rush.image.tessellate import emit_tiles

    img = Image.new("RGB", (10, 7))
    img.putpixel((7, 3), (255, 0, 0))

    tiles = emit_tiles(img, 3, 3)

    assert [t.index for t, _ in tiles] == list(range(9))
    assert [patch.size for _, patch in tiles] == [
        (4, 3), (3, 3), (3, 3),
        (4, 2), (3, 2), (3, 2),
        (4, 2), (3, 2), (3, 2),
    ]
    # pixel (x=7, y=3) lands at the top-left of tile 5 (row 1, column 2)
    assert tiles[5][1].getpixel((0, 0)) == (255, 0, 0)


# ── image tessellate ─────────────────────────────────────────────────────────

def test_tessellate_file_success(tmp_path):
    from rush.image.tessellate import TessellateOperation

    input_path = tmp_path / "input.png"
    _make_image(input_path, 100, 100)
    output_path = tmp_path / "output"

    summary = TessellateOperation(2, 2).run(input_path, output_path, jobs=1)

    assert summary.ok
    assert _names(output_path) == [
        "input_id0_w0-50_h0-50.png",
        "input_id1_w50-100_h0-50.png",
        "input_id2_w0-50_h50-100.png",
        "input_id3_w50-100_h50-100.png",
    ]
    assert [p.name for p in summary.outputs] == [
        "input_id0_w0-50_h0-50.png",
        "input_id1_w50-100_h0-50.png",
        "input_id2_w0-50_h50-100.png",
        "input_id3_w50-100_h50-100.png",
    ]
    assert input_path.exists()


def test_tessellate_uneven_image(tmp_path):
    from rush.image.tessellate import TessellateOperation

    input_path = tmp_path / "odd.png"
    _make_image(input_path, width=10, height=7)
    out = tmp_path / "out"

    TessellateOperation(3, 3).run(input_path, out, jobs=1)

    assert (out / "odd_id0_w0-4_h0-3.png").exists()
    assert (out / "odd_id5_w7-10_h3-5.png").exists()
    assert (out / "odd_id8_w7-10_h5-7.png").exists()
    with Image.open(out / "odd_id3_w0-4_h3-5.png") as tile:
        assert tile.size == (4, 2)


def test_tessellate_keeps_source_suffix(tmp_path):
    from rush.image.tessellate import TessellateOperation

    input_path = tmp_path / "photo.JPG"
    Image.new("RGB", (20, 20), (10, 20, 30)).save(input_path, format="JPEG")
    out = tmp_path / "out"

    TessellateOperation(1, 2).run(input_path, out, jobs=1)
    assert _names(out) == ["photo_id0_w0-10_h0-20.JPG", "photo_id1_w10-20_h0-20.JPG"]


def test_tessellate_directory_success(tmp_path):
    from rush.image.tessellate import TessellateOperation

    input_dir = tmp_path / "input"
    (input_dir / "nested").mkdir(parents=True)
    _make_image(input_dir / "test1.png", 100, 100, channels=1)
    _make_image(input_dir / "nested" / "test2.png", 200, 200)
    (input_dir / "notes.txt").write_text("ignored")
    output_dir = tmp_path / "output"

    summary = TessellateOperation(2, 2).run(input_dir, output_dir, jobs=4)

    assert summary.ok
    assert _names(output_dir) == [
        "test1_id0_w0-50_h0-50.png",
        "test1_id1_w50-100_h0-50.png",
        "test1_id2_w0-50_h50-100.png",
        "test1_id3_w50-100_h50-100.png",
    ]
    assert _names(output_dir / "nested") == [
        "test2_id0_w0-100_h0-100.png",
        "test2_id1_w100-200_h0-100.png",
        "test2_id2_w0-100_h100-200.png",
        "test2_id3_w100-200_h100-200.png",
    ]


def test_tessellate_with_delete_original(tmp_path):
    from rush.image.tessellate import TessellateOperation

    input_path = tmp_path / "input.png"
    _make_image(input_path)
    output_path = tmp_path / "output"

    summary = TessellateOperation(2, 2, delete_original=True).run(input_path, output_path)

    assert summary.ok
    assert len(_names(output_path)) == 4
    assert not input_path.exists()


@pytest.mark.parametrize("n_vertical,n_horizontal", [(0, 2), (2, 0), (-1, 1)])
def test_tessellate_rejects_non_positive_counts(tmp_path, n_vertical, n_horizontal):
    from rush.image.tessellate import TessellateOperation

    input_path = tmp_path / "input.png"
    _make_image(input_path)

    with pytest.raises(InvalidArgumentError):
        TessellateOperation(n_vertical, n_horizontal).run(input_path, tmp_path / "out")
    assert not (tmp_path / "out").exists()


def test_tessellate_rejects_grid_finer_than_image(tmp_path):
    from rush.image.tessellate import TessellateOperation

    input_path = tmp_path / "tiny.png"
    _make_image(input_path, width=3, height=3)
    out = tmp_path / "out"

    summary = TessellateOperation(4, 1).run(input_path, out, jobs=1)

    assert not summary.ok
    assert "InvalidArgumentError" in summary.failed[0].error
    assert _names(out) == []


def test_tessellate_reports_broken_file_and_keeps_going(tmp_path):
    from rush.image.tessellate import TessellateOperation

    input_dir = tmp_path / "input"
    input_dir.mkdir()
    _make_image(input_dir / "good.png", 10, 10)
    (input_dir / "bad.png").write_bytes(b"\x89PNG not really")
    out = tmp_path / "out"

    summary = TessellateOperation(1, 2).run(input_dir, out, jobs=2)

    assert [r.input.name for r in summary.failed] == ["bad.png"]
    assert _names(out) == ["good_id0_w0-5_h0-10.png", "good_id1_w5-10_h0-10.png"]


def test_concurrent_tessellate_into_shared_output(tmp_path):
    from rush.image.tessellate import TessellateOperation

    for name in ("a", "b"):
        (tmp_path / name / "shared" / "deep").mkdir(parents=True)
        for i in range(4):
            _make_image(tmp_path / name / "shared" / "deep" / f"{name}{i}.png", 20, 20)
    out = tmp_path / "out"
    summaries = []

    def _run(src):
        summaries.append(TessellateOperation(2, 2).run(src, out, jobs=4))

    threads = [threading.Thread(target=_run, args=(tmp_path / n,)) for n in ("a", "b")]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(summaries) == 2
    assert all(s.ok for s in summaries)
    assert len(_names(out / "shared" / "deep")) == 8 * 4


# ── image resize / orientation ───────────────────────────────────────────────

def test_resize_single_file(tmp_path):
    from rush.image.resize import ResizeOperation

    src = tmp_path / "in.png"
    _make_image(src, width=100, height=50)
    dst = tmp_path / "out.png"

    summary = ResizeOperation(height=20, width=10).run(src, dst, jobs=1)

    assert summary.ok
    with Image.open(dst) as img:
        assert img.size == (10, 20)


def test_resize_refuses_in_place_without_overwrite(tmp_path):
    from rush.image.resize import ResizeOperation

    src = tmp_path / "in.png"
    _make_image(src, width=40, height=40)

    summary = ResizeOperation(10, 10).run(src, src, jobs=1)
    assert not summary.ok
    with Image.open(src) as img:
        assert img.size == (40, 40)


def test_to_landscape_rotates_portrait_images(tmp_path):
    from rush.image.orient import OrientOperation

    input_dir = tmp_path / "in"
    input_dir.mkdir()
    _make_image(input_dir / "tall.png", width=50, height=100)
    _make_image(input_dir / "wide.png", width=100, height=50)
    out = tmp_path / "out"

    summary = OrientOperation("landscape").run(input_dir, out, jobs=2)

    assert summary.ok
    for name in ("tall.png", "wide.png"):
        with Image.open(out / name) as img:
            assert img.size == (100, 50)


def test_to_portrait_rotates_clockwise(tmp_path):
    from rush.image.orient import OrientOperation

    src = tmp_path / "wide.png"
    img = Image.new("RGB", (4, 2))
    img.putpixel((0, 0), (255, 0, 0))
    img.save(src)
    out = tmp_path / "out"

    OrientOperation("portrait").run(src, out, jobs=1)

    with Image.open(out / "wide.png") as rotated:
        assert rotated.size == (2, 4)
        # clockwise: the top-left corner moves to the top-right
        assert rotated.getpixel((1, 0)) == (255, 0, 0)


def test_orient_rejects_unknown_orientation(tmp_path):
    from rush.image.orient import OrientOperation

    src = tmp_path / "in.png"
    _make_image(src, 10, 10)
    with pytest.raises(InvalidArgumentError):
        OrientOperation("diagonal").run(src, tmp_path / "out")


# ── image summary ────────────────────────────────────────────────────────────

def test_image_summary(tmp_path):
    from rush.image.summary import format_summary, summarize

    _make_image(tmp_path / "a.png", 10, 20)
    _make_image(tmp_path / "b.png", 10, 20)
    (tmp_path / "sub").mkdir()
    _make_image(tmp_path / "sub" / "c.png", 30, 5)

    summary = summarize(tmp_path, jobs=2)

    assert len(summary.shapes) == 3
    assert summary.unique_shapes == {(20, 10), (5, 30)}
    assert "Total files: 3" in format_summary(summary)


def test_image_summary_without_images(tmp_path):
    from rush.image.summary import summarize

    (tmp_path / "x.txt").write_text("nothing")
    with pytest.raises(InvalidArgumentError):
        summarize(tmp_path)


def test_image_summary_rejects_zero_jobs(tmp_path):
    from rush.image.summary import summarize

    _make_image(tmp_path / "a.png", 10, 10)
    with pytest.raises(InvalidArgumentError):
        summarize(tmp_path, jobs=0)
