#!/usr/bin/env python3
"""
Side-by-side viewer: original image on the left, convolved image on the right,
with an area-size slider and an editable weight grid driving a KernelSession.
"""
import logging
import sys

import matplotlib.pyplot as plt
from matplotlib.widgets import Slider, TextBox

from ConvConfig import load_config, setup_logging, validate_kernel_config
from ImageLoader import load, LoadError
from KernelSession import KernelSession
from KernelSettings import MAX_AREA_SIZE


def parse_weights(text):
    """Parse comma or whitespace separated numbers into a list of floats."""
    return [float(token) for token in text.replace(',', ' ').split()]


def format_weights(settings):
    return ", ".join(f"{w:g}" for w in settings.weights)


def show_raster(ax, raster, title):
    ax.clear()
    ax.imshow(raster, cmap='gray', vmin=0, vmax=255, interpolation='nearest')
    ax.set_title(title, fontsize=11, fontweight='bold')
    ax.axis('off')


def render_side_by_side(original, convolved, title=None, note=None):
    """Return a figure with the original and the convolved raster next to each other."""
    fig, (ax_original, ax_output) = plt.subplots(1, 2, figsize=(12, 6))
    show_raster(ax_original, original, f'Original ({original.shape[1]}x{original.shape[0]})')
    output_title = f'Convolved ({convolved.shape[1]}x{convolved.shape[0]})'
    if note:
        output_title += f' - {note}'
    show_raster(ax_output, convolved, output_title)
    if title:
        fig.suptitle(title, fontsize=14, fontweight='bold')
    return fig


def session_figure(session):
    """Side-by-side figure of a session's source and its published output."""
    note = f'rejected: {session.last_error}' if session.last_error is not None else None
    return render_side_by_side(session.source, session.output, note=note)


class KernelViewer:
    """Interactive matplotlib front end for a KernelSession."""

    def __init__(self, session, max_area_size=MAX_AREA_SIZE):
        self.session = session
        settings = session.current_settings()

        self.fig = plt.figure(figsize=(12, 7))
        self.ax_original = self.fig.add_axes([0.02, 0.25, 0.47, 0.68])
        self.ax_output = self.fig.add_axes([0.51, 0.25, 0.47, 0.68])
        show_raster(self.ax_original, session.source, 'Original')

        slider_ax = self.fig.add_axes([0.15, 0.13, 0.7, 0.04])
        self.slider = Slider(slider_ax, 'Area Size', 1, max_area_size,
                             valinit=settings.area_size, valstep=1)
        text_ax = self.fig.add_axes([0.15, 0.04, 0.7, 0.05])
        self.text_box = TextBox(text_ax, 'Weights', initial=format_weights(settings))

        self.slider.on_changed(self.on_area_size)
        self.text_box.on_submit(self.on_weights)
        self.refresh()

    def on_area_size(self, value):
        self.session.set_area_size(int(value))
        # the weight grid is reset to all ones on resize
        self.text_box.set_val(format_weights(self.session.current_settings()))
        self.refresh()

    def on_weights(self, text):
        try:
            self.session.set_weights(parse_weights(text))
        except ValueError as e:
            logging.warning(f"Ignoring weights {text!r}: {e}")
        self.refresh()

    def refresh(self):
        settings = self.session.current_settings()
        title = f'Convolved ({settings.area_size}x{settings.area_size})'
        if self.session.last_error is not None:
            title += f' - rejected: {self.session.last_error}'
        show_raster(self.ax_output, self.session.output, title)
        self.fig.canvas.draw_idle()

    def show(self):
        plt.show()


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    config = load_config(argv[0] if argv else None)
    setup_logging(config)

    try:
        settings = validate_kernel_config(config)
    except ValueError as e:
        logging.error(f"Invalid kernel configuration: {e}")
        return 1

    try:
        source = load(config['input']['path'])
    except LoadError as e:
        logging.error(f"Cannot start without a source image: {e}")
        return 1

    parallel = config['parallel']
    session = KernelSession(
        source, settings,
        n_jobs=parallel['n_jobs'],
        block_rows=parallel['block_rows'],
        prefer=parallel['prefer'],
        max_area_size=config['kernel']['max_area_size'],
    )

    output_path = config['output']['path']
    if output_path:
        fig = session_figure(session)
        fig.savefig(output_path, dpi=150, bbox_inches='tight')
        plt.close(fig)
        print(f"Saved: {output_path}")
    else:
        KernelViewer(session, max_area_size=config['kernel']['max_area_size']).show()
    return 0


if __name__ == '__main__':
    sys.exit(main())
