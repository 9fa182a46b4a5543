import pytest
import numpy as np
import h5py as h5

from umatSOM.render_umatrix import load_codebook, parse_args, main

rows = 3
cols = 4


@pytest.fixture
def lattice():
    return np.random.rand(rows * cols, 5)


@pytest.fixture
def lattice_file(tmp_path, lattice):
    file_path = tmp_path / "lattice.npy"
    np.save(file_path, lattice)
    return file_path


def test_parse_args():
    args = parse_args(["--lattice_path", "l.npy", "--rows", "3", "--cols", "4"])
    assert args.lattice_path == "l.npy"
    assert args.rows == 3
    assert args.cols == 4
    assert args.topology == "rectangle"
    assert args.title == "U-Matrix"
    assert args.output is None
    assert args.scale == 20.0
    assert args.offset == 10.0
    assert args.radius == pytest.approx(np.sqrt(2) * 1.01)
    assert args.isolated == "max"


def test_parse_args_rejects_topology():
    with pytest.raises(SystemExit):
        parse_args(
            ["--lattice_path", "l.npy", "--rows", "3", "--cols", "4", "--topology", "ring"]
        )


def test_load_codebook_npy(lattice_file, lattice):
    assert np.array_equal(load_codebook(str(lattice_file)), lattice)


def test_load_codebook_h5(tmp_path, lattice):
    file_path = tmp_path / "lattice.h5"
    with h5.File(file_path, "w") as f5:
        f5.create_dataset("weights", data=lattice)

    assert np.array_equal(load_codebook(str(file_path), dataset="weights"), lattice)


def test_load_codebook_unsupported(tmp_path):
    with pytest.raises(ValueError):
        load_codebook(str(tmp_path / "lattice.csv"))


def test_main_writes_svg(tmp_path, lattice_file):
    output = tmp_path / "umat.svg"
    main(
        [
            "--lattice_path",
            str(lattice_file),
            "--rows",
            str(rows),
            "--cols",
            str(cols),
            "--topology",
            "hexagon",
            "--title",
            "test map",
            "--output",
            str(output),
        ]
    )

    document = output.read_text(encoding="utf-8")
    assert document.startswith("<h1>test map</h1>")
    assert document.count("<polygon ") == rows * cols


def test_main_stdout(capsys, lattice_file):
    main(["--lattice_path", str(lattice_file), "--rows", str(rows), "--cols", str(cols)])

    captured = capsys.readouterr()
    assert captured.out.count("<polygon ") == rows * cols
    assert "Lattice loaded" in captured.err


def test_main_exits_on_bad_dims(tmp_path, lattice_file):
    output = tmp_path / "umat.svg"
    with pytest.raises(SystemExit):
        main(
            [
                "--lattice_path",
                str(lattice_file),
                "--rows",
                str(rows + 1),
                "--cols",
                str(cols),
                "--output",
                str(output),
            ]
        )
    assert not output.exists()


def test_load_codebook_missing_file(tmp_path):
    with pytest.raises(ValueError):
        load_codebook(str(tmp_path / "missing.npy"))
    with pytest.raises(ValueError):
        load_codebook(str(tmp_path / "missing.h5"))


def test_load_codebook_missing_dataset(tmp_path, lattice):
    file_path = tmp_path / "lattice.h5"
    with h5.File(file_path, "w") as f5:
        f5.create_dataset("weights", data=lattice)

    with pytest.raises(ValueError):
        load_codebook(str(file_path), dataset="lattice")


def test_main_exits_on_missing_lattice(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(
            [
                "--lattice_path",
                str(tmp_path / "missing.npy"),
                "--rows",
                str(rows),
                "--cols",
                str(cols),
            ]
        )
    assert "missing.npy" in str(excinfo.value.code)


def test_main_exits_on_bad_offset(lattice_file):
    with pytest.raises(SystemExit):
        main(
            [
                "--lattice_path",
                str(lattice_file),
                "--rows",
                str(rows),
                "--cols",
                str(cols),
                "--scale",
                "40",
                "--offset",
                "10",
            ]
        )


if __name__ == "__main__":
    pytest.main()
