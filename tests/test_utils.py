import numpy as np

from kinect_vision.utils import _depth_to_image, _draw_object, _num_to_string, _temporal_filter


def test_temporal_filter_without_previous():
    frame = np.full((4, 4), 100, dtype=np.uint8)
    assert _temporal_filter(frame, None) is frame


def test_temporal_filter_blends():
    frame = np.full((4, 4), 100, dtype=np.uint8)
    prev = np.full((4, 4), 200, dtype=np.uint8)
    assert np.all(_temporal_filter(frame, prev) == 150)


def test_temporal_filter_shape_change():
    frame = np.full((4, 4), 100, dtype=np.uint8)
    prev = np.full((2, 2), 200, dtype=np.uint8)
    assert _temporal_filter(frame, prev) is frame


def test_depth_to_image():
    depth = np.array([[0, 500], [1000, 1000]], dtype=np.uint16)
    image = _depth_to_image(depth)

    assert image.dtype == np.uint8
    assert image[0, 0] == 0
    assert image[1, 0] == 255
    assert depth[1, 0] == 1000


def test_depth_to_image_colormap():
    depth = np.array([[0, 500], [1000, 1000]], dtype=np.uint16)
    assert _depth_to_image(depth, colormap=True).shape == (2, 2, 3)


def test_num_to_string():
    assert _num_to_string(3) == '3'
    assert _num_to_string(1.5) == '1.5'
    assert _num_to_string(-0.25) == '-0.25'


def test_draw_object_near_edges():
    frame = np.zeros((100, 100, 3), dtype=np.uint8)
    _draw_object(5, 95, frame)
    _draw_object(95, 5, frame)
    assert frame[95, 5].any()
    assert frame[5, 95].any()
