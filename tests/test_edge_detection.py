import numpy as np
import pytest
from PIL import Image

from ascii_grid.edge_detection import EdgeProcessor, edge_detection_filter
from ascii_grid.exceptions import ConfigurationError


def gray_image(values) -> Image.Image:
    return Image.fromarray(np.array(values, dtype=np.uint8))


def single_pixel(value, neighbors=None) -> Image.Image:
    """3x3 black image with `value` in the middle and optional extra pixels."""
    arr = np.zeros((3, 3), dtype=np.uint8)
    arr[1, 1] = value
    for (x, y), neighbor in (neighbors or {}).items():
        arr[y, x] = neighbor
    return Image.fromarray(arr)


class TestGaussKernel:
    @pytest.mark.parametrize("sigma", [0.0, -1.0])
    def test_non_positive_sigma_raises(self, sigma):
        with pytest.raises(ConfigurationError):
            EdgeProcessor.create_gauss_kernel(sigma)

    def test_sigma_1_4(self):
        centre, edge, corner = 0.15382623026508038, 0.11919032075339756, 0.09235312168033236
        expected = [
            [corner, edge, corner],
            [edge, centre, edge],
            [corner, edge, corner],
        ]
        assert EdgeProcessor.create_gauss_kernel(1.4).tolist() == [
            pytest.approx(row, abs=1e-9) for row in expected
        ]

    def test_kernel_is_normalized(self):
        assert EdgeProcessor.create_gauss_kernel(6.4).sum() == pytest.approx(1.0)


class TestBlur:
    @pytest.mark.parametrize("sigma", [0.0, -1.0])
    def test_non_positive_sigma_raises(self, sigma):
        with pytest.raises(ConfigurationError):
            EdgeProcessor.blur(Image.new('RGB', (3, 3)), sigma)

    def test_black_img_remains_black(self):
        blurred = EdgeProcessor.blur(Image.new('RGB', (3, 3)), 1.4)
        assert blurred.mode == 'RGB'
        assert not np.asarray(blurred).any()

    def test_white_img_remains_white(self):
        blurred = EdgeProcessor.blur(Image.new('RGB', (4, 4), (255, 255, 255)), 6.4)
        assert (np.asarray(blurred) == 255).all()

    @pytest.mark.parametrize("threads", [1, 2, 3, 8])
    def test_img_middle_white(self, threads):
        arr = np.zeros((3, 3, 3), dtype=np.uint8)
        arr[1, 1] = 255
        blurred = np.asarray(EdgeProcessor.blur(Image.fromarray(arr), 1.4, threads))

        expected = np.array([[23, 30, 23], [30, 39, 30], [23, 30, 23]], dtype=np.uint8)
        for channel in range(3):
            assert blurred[:, :, channel].tolist() == expected.tolist()

    def test_threads_do_not_change_result(self):
        rng = np.random.default_rng(0)
        image = Image.fromarray(rng.integers(0, 256, (37, 23, 3), dtype=np.uint8))
        single = np.asarray(EdgeProcessor.blur(image, 6.4, 1))
        for threads in (2, 5, 37, 100):
            assert np.array_equal(single, np.asarray(EdgeProcessor.blur(image, 6.4, threads)))


class TestSobel:
    def test_no_edge(self):
        edges = EdgeProcessor.sobel(gray_image(np.zeros((3, 3))))
        assert edges.mode == 'L'
        assert not np.asarray(edges).any()

    @pytest.mark.parametrize("threads", [1, 2, 3])
    def test_edge_vertical(self, threads):
        values = [[255, 0, 255]] * 3
        edges = EdgeProcessor.sobel(gray_image(values), threads)
        assert np.asarray(edges).tolist() == values

    @pytest.mark.parametrize("threads", [1, 2, 3])
    def test_edge_horizontal(self, threads):
        values = [[255, 255, 255], [0, 0, 0], [255, 255, 255]]
        edges = EdgeProcessor.sobel(gray_image(values), threads)
        assert np.asarray(edges).tolist() == values

    def test_magnitude_is_amplified(self):
        # a step of 10 gives a gradient of 40, amplified to 120
        values = [[0, 10, 10]] * 3
        edges = np.asarray(EdgeProcessor.sobel(gray_image(values)))
        assert edges[1].tolist() == [120, 120, 0]

    def test_threads_do_not_change_result(self):
        rng = np.random.default_rng(1)
        image = Image.fromarray(rng.integers(0, 256, (29, 31, 3), dtype=np.uint8))
        single = np.asarray(EdgeProcessor.sobel(image, 1))
        for threads in (2, 4, 29):
            assert np.array_equal(single, np.asarray(EdgeProcessor.sobel(image, threads)))


class TestEdgeTracking:
    def test_no_strong_results_in_black_img(self):
        result = EdgeProcessor.edge_tracking(single_pixel(0))
        assert not np.asarray(result).any()

    def test_strong_pixels_stay(self):
        result = EdgeProcessor.edge_tracking(single_pixel(255))
        assert np.asarray(result).tolist() == [[0, 0, 0], [0, 255, 0], [0, 0, 0]]

    def test_weak_pixel_removed(self):
        result = EdgeProcessor.edge_tracking(single_pixel(126))
        assert not np.asarray(result).any()

    def test_irrelevant_pixel_removed(self):
        result = EdgeProcessor.edge_tracking(single_pixel(76))
        assert not np.asarray(result).any()

    def test_weak_pixel_with_strong_neighbor_is_converted(self):
        result = EdgeProcessor.edge_tracking(single_pixel(126, {(2, 1): 255}))
        assert np.asarray(result).tolist() == [[0, 0, 0], [0, 255, 255], [0, 0, 0]]

    def test_weak_pixel_with_strong_diagonal_neighbor_is_converted(self):
        result = EdgeProcessor.edge_tracking(single_pixel(126, {(0, 0): 255}))
        assert np.asarray(result).tolist() == [[255, 0, 0], [0, 255, 0], [0, 0, 0]]

    def test_irrelevant_pixel_with_strong_neighbor_is_removed(self):
        result = EdgeProcessor.edge_tracking(single_pixel(255, {(2, 1): 40}))
        assert np.asarray(result).tolist() == [[0, 0, 0], [0, 255, 0], [0, 0, 0]]

    def test_weak_pixels_do_not_propagate(self):
        values = [[255, 126, 126, 126]]
        result = EdgeProcessor.edge_tracking(gray_image(values))
        assert np.asarray(result).tolist() == [[255, 255, 0, 0]]


class TestEdgeDetectionFilter:
    @staticmethod
    def square() -> Image.Image:
        arr = np.zeros((40, 40, 3), dtype=np.uint8)
        arr[10:30, 10:30] = 255
        return Image.fromarray(arr)

    def test_outline_is_grayscale_of_same_size(self):
        result = edge_detection_filter(self.square(), threads=4)
        assert result.mode == 'L'
        assert result.size == (40, 40)
        arr = np.asarray(result)
        # edges around the square, nothing in the flat regions
        assert arr[20, 10] > 0
        assert arr[0, 0] == 0
        assert arr[20, 20] == 0

    def test_hysteresis_is_binary(self):
        arr = np.asarray(edge_detection_filter(self.square(), threads=2, hysteresis=True))
        assert set(np.unique(arr).tolist()) <= {0, 255}
