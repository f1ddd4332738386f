import numpy as np
from click.testing import CliRunner
from PIL import Image

from bracket_fusion.cli import main


def test_plan_defaults():
    result = CliRunner().invoke(main, ["plan"])
    assert result.exit_code == 0
    assert result.output.splitlines() == ["-3\t-1.00 EV", "+0\t+0.00 EV", "+3\t+1.00 EV"]


def test_plan_even_shots_with_custom_device():
    result = CliRunner().invoke(main, ["plan", "--shots", "4", "--step", "0.5", "--range", "-4", "4"])
    assert result.exit_code == 0
    assert [line.split("\t")[0] for line in result.output.splitlines()] == ["-3", "-1", "+1", "+3"]


def test_plan_rejects_out_of_range_shot_count():
    assert CliRunner().invoke(main, ["plan", "--shots", "8"]).exit_code == 2


def test_plan_rejects_inverted_range():
    assert CliRunner().invoke(main, ["plan", "--range", "5", "-5"]).exit_code == 2


def test_plan_without_compensation_support():
    result = CliRunner().invoke(main, ["plan", "--range", "0", "0"])
    assert result.exit_code == 0
    assert "not supported" in result.output


def test_fuse_files(tmp_path, make_frame, write_image):
    a = write_image("a.png", make_frame(0))
    b = write_image("b.png", make_frame(200))
    out = tmp_path / "fused.png"

    result = CliRunner().invoke(main, ["fuse", a, b, "-o", str(out)])

    assert result.exit_code == 0, result.output
    assert np.all(np.asarray(Image.open(out)) == 100)


def test_fuse_directory_into_timestamped_file(tmp_path, make_frame, write_image):
    src = tmp_path / "bracket"
    write_image("0.png", make_frame(0), directory=src)
    write_image("1.png", make_frame(90), directory=src)
    out_dir = tmp_path / "out"
    out_dir.mkdir()

    result = CliRunner().invoke(main, ["fuse", str(src), "-o", str(out_dir), "--strategy", "well-exposedness"])

    assert result.exit_code == 0, result.output
    names = [p.name for p in out_dir.iterdir()]
    assert len(names) == 1 and names[0].startswith("HDR_Output_") and names[0].endswith(".jpg")


def test_fuse_single_file_fails(tmp_path, make_frame, write_image):
    a = write_image("a.png", make_frame(0))
    result = CliRunner().invoke(main, ["fuse", a, "-o", str(tmp_path / "x.jpg")])
    assert result.exit_code == 1
    assert "at least 2 frames" in result.output


def test_fuse_only_offers_implemented_strategies(tmp_path, make_frame, write_image):
    a = write_image("a.png", make_frame(0))
    b = write_image("b.png", make_frame(1))
    result = CliRunner().invoke(main, ["fuse", a, b, "-o", str(tmp_path / "x.jpg"), "--strategy", "laplacian-pyramid"])
    assert result.exit_code == 2


def test_fuse_batch_groups_output_under_batch_id(tmp_path, make_frame, write_image):
    batch = tmp_path / "batch"
    for name in ("one", "two"):
        write_image("0.png", make_frame(0), directory=batch / name)
        write_image("1.png", make_frame(200), directory=batch / name)
    out_dir = tmp_path / "out"

    result = CliRunner().invoke(
        main, ["fuse", str(batch), "-o", str(out_dir), "--format", "png", "--jobs", "1", "--batch-id", "session_1"]
    )

    assert result.exit_code == 0, result.output
    assert sorted(p.name for p in (out_dir / "HDR_session_1").iterdir()) == ["one.png", "two.png"]
