import pytest
import numpy as np

from umatSOM import (
    Metric,
    Topology,
    UnknownMetricError,
    UnsupportedTopologyError,
    distance_matrix,
    point_distance,
    grid_coordinates,
)

rows = 4
cols = 5
rng = np.random.default_rng(42)
data = rng.random((rows * cols, 3))


def test_metric_from_name():
    assert Metric.from_name("euclidean") is Metric.EUCLIDEAN
    assert Metric.from_name("Manhattan") is Metric.MANHATTAN
    assert Metric.from_name(Metric.EUCLIDEAN) is Metric.EUCLIDEAN

    with pytest.raises(UnknownMetricError):
        Metric.from_name("cosine")


def test_topology_from_name():
    assert Topology.from_name("rectangle") is Topology.RECTANGLE
    assert Topology.from_name("HEXAGON") is Topology.HEXAGON

    with pytest.raises(UnsupportedTopologyError):
        Topology.from_name("triangle")

    # both error kinds are also plain ValueErrors
    with pytest.raises(ValueError):
        grid_coordinates("triangle", (rows, cols))


@pytest.mark.parametrize("metric", ["euclidean", "manhattan"])
def test_distance_matrix_symmetric(metric):
    print(f"Testing {metric} distance matrix", flush=True)
    d = distance_matrix(metric, data)

    assert d.shape == (rows * cols, rows * cols)
    assert np.array_equal(d, d.T)
    assert np.all(np.diag(d) == 0.0)
    assert np.all(d >= 0.0)


def test_distance_matrix_values():
    d = distance_matrix("euclidean", np.array([[0.0, 0.0], [3.0, 4.0]]))
    assert d[0, 1] == pytest.approx(5.0)

    d = distance_matrix("manhattan", np.array([[0.0, 0.0], [3.0, 4.0]]))
    assert d[0, 1] == pytest.approx(7.0)


def test_point_distance():
    d = distance_matrix("euclidean", data)
    for i, j in [(0, 1), (3, 17), (19, 5)]:
        assert point_distance("euclidean", data[i], data[j]) == pytest.approx(
            d[i, j], rel=1e-6
        )

    with pytest.raises(UnknownMetricError):
        point_distance("hamming", data[0], data[1])


def test_rectangle_coordinates():
    coords = grid_coordinates("rectangle", (rows, cols))

    assert coords.shape == (rows * cols, 2)
    for i in range(rows * cols):
        assert coords[i, 0] == i % cols
        assert coords[i, 1] == i // cols


def test_hexagon_coordinates():
    coords = grid_coordinates(Topology.HEXAGON, (rows, cols))

    assert coords.shape == (rows * cols, 2)
    # even rows are not shifted, odd rows are shifted half a unit
    assert coords[0, 0] == pytest.approx(0.0)
    assert coords[cols, 0] == pytest.approx(0.5)
    assert coords[cols, 1] == pytest.approx(np.sqrt(0.75))
    assert coords[2 * cols, 0] == pytest.approx(0.0)

    # the immediate neighbors in the next row are one unit away
    d = distance_matrix("euclidean", coords)
    assert d[0, cols] == pytest.approx(1.0)
    assert d[1, cols] == pytest.approx(1.0)


@pytest.mark.parametrize("dims", [(0, 3), (3, -1), (2, 2, 2)])
def test_bad_dims(dims):
    with pytest.raises(ValueError):
        grid_coordinates("rectangle", dims)


if __name__ == "__main__":
    pytest.main()
