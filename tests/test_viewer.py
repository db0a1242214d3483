"""
Tests for the matplotlib presenter and the viewer entry point.
"""
import matplotlib.pyplot as plt
import numpy as np
import pytest
import yaml
from PIL import Image

from ConvViewer import (
    parse_weights, format_weights, render_side_by_side, session_figure, KernelViewer, main,
)
from KernelSession import KernelSession
from KernelSettings import KernelSettings


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close('all')


@pytest.mark.unit
class TestWeightText:

    def test_parse_commas_and_whitespace(self):
        assert parse_weights("1, -2.5,3\n 0") == [1.0, -2.5, 3.0, 0.0]

    def test_parse_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_weights("1, two, 3")

    def test_format_round_trips(self):
        settings = KernelSettings(2, [1, -0.5, 0, 2])

        assert format_weights(settings) == "1, -0.5, 0, 2"
        assert parse_weights(format_weights(settings)) == list(settings.weights)


@pytest.mark.unit
class TestRenderSideBySide:

    def test_two_panels(self, random_raster):
        convolved = random_raster[:-2, :-2]

        fig = render_side_by_side(random_raster, convolved, title="Edge")

        assert len(fig.axes) == 2
        left, right = fig.axes
        assert left.get_title().startswith("Original (53x37)")
        assert right.get_title().startswith("Convolved (51x35)")
        np.testing.assert_array_equal(right.images[0].get_array(), convolved)

    def test_session_figure_notes_rejected_kernel(self, scenario_raster):
        session = KernelSession(scenario_raster, KernelSettings.ones(6), n_jobs=1)

        fig = session_figure(session)

        right = fig.axes[1]
        assert "rejected" in right.get_title()
        assert "does not fit" in right.get_title()

    def test_session_figure_without_error(self, random_raster):
        fig = session_figure(KernelSession(random_raster, n_jobs=1))

        assert "rejected" not in fig.axes[1].get_title()


@pytest.mark.unit
class TestKernelViewer:

    @pytest.fixture
    def viewer(self, random_raster):
        return KernelViewer(KernelSession(random_raster, n_jobs=1))

    def test_initial_state(self, viewer):
        assert viewer.text_box.text == "1, 1, 1, 1"
        assert viewer.ax_output.images[0].get_array().shape == (36, 52)

    def test_area_size_change_resets_weights(self, viewer):
        viewer.on_weights("0 0 0 1")

        viewer.on_area_size(3.0)

        assert viewer.session.settings == KernelSettings.ones(3)
        assert viewer.text_box.text == ", ".join(["1"] * 9)
        assert viewer.ax_output.images[0].get_array().shape == (35, 51)

    def test_weight_edit_recomputes(self, viewer):
        viewer.on_weights("1, 0, 0, 0")

        assert viewer.session.settings == KernelSettings(2, [1, 0, 0, 0])

    def test_bad_weights_are_ignored(self, viewer):
        before = viewer.session.settings

        viewer.on_weights("1, 2")
        viewer.on_weights("a b c d")
        viewer.on_weights("nan, 1, 1, 1")
        viewer.on_weights("inf 1 1 1")

        assert viewer.session.settings == before

    def test_rejected_kernel_is_shown_in_title(self, scenario_raster):
        viewer = KernelViewer(KernelSession(scenario_raster, n_jobs=1))

        viewer.on_area_size(6)

        assert "rejected" in viewer.ax_output.get_title()
        assert viewer.session.settings == KernelSettings.ones(2)


@pytest.mark.integration
class TestMain:

    def test_saves_side_by_side_figure(self, sample_config_file, sample_config, restore_root_logger):
        assert main([str(sample_config_file)]) == 0

        assert (sample_config_file.parent / "side_by_side.png").exists()

    def test_rejected_initial_kernel_still_saves(self, tmp_path, sample_config, restore_root_logger):
        small = tmp_path / "small.png"
        Image.fromarray(np.zeros((5, 5), dtype=np.uint8)).save(small)
        sample_config['input']['path'] = str(small)
        sample_config['kernel']['area_size'] = 8
        config_file = tmp_path / "too_large.yaml"
        config_file.write_text(yaml.dump(sample_config))

        assert main([str(config_file)]) == 0
        assert (tmp_path / "side_by_side.png").exists()

    def test_missing_image_fails(self, tmp_path, sample_config, restore_root_logger):
        sample_config['input']['path'] = str(tmp_path / "missing.jpg")
        config_file = tmp_path / "bad_input.yaml"
        config_file.write_text(yaml.dump(sample_config))

        assert main([str(config_file)]) == 1

    def test_invalid_kernel_fails(self, tmp_path, sample_config, restore_root_logger):
        sample_config['kernel']['area_size'] = 12
        config_file = tmp_path / "bad_kernel.yaml"
        config_file.write_text(yaml.dump(sample_config))

        assert main([str(config_file)]) == 1
