#!/usr/bin/env python3
"""
Live recomputation driver between the kernel editor and the presenter.

A session owns the source raster, the last accepted settings snapshot and the
published output. Every edit produces a new snapshot; recomputation only runs
when it differs from the accepted one, and a kernel that does not fit keeps
the previous output on display.
"""
import logging

from ConvParallel import convolve
from KernelSettings import (
    KernelSettings, KernelTooLargeError, KernelOverflowError, MAX_AREA_SIZE,
)


class KernelSession:

    def __init__(self, source, settings=None, n_jobs=-1, block_rows=None,
                 prefer="threads", max_area_size=MAX_AREA_SIZE):
        self.source = source
        self.n_jobs = n_jobs
        self.block_rows = block_rows
        self.prefer = prefer
        self.max_area_size = max_area_size
        self.last_error = None
        self.recomputations = 0
        # Until the first kernel is accepted the presenter shows the original
        self.output = source
        self.settings = None
        self.update(settings if settings is not None else KernelSettings.ones())

    def compute(self, settings):
        return convolve(self.source, settings.area_size, settings.weights,
                        n_jobs=self.n_jobs, block_rows=self.block_rows,
                        prefer=self.prefer)

    def update(self, settings):
        """
        Publish a new output for `settings` if they changed.

        Returns True when a new output was published, False when the snapshot
        was unchanged or rejected (see `last_error`).
        """
        if settings == self.settings:
            return False

        try:
            output = self.compute(settings)
        except (KernelTooLargeError, KernelOverflowError) as e:
            logging.warning(f"Rejected kernel settings: {e}")
            self.last_error = e
            return False

        self.output = output
        self.settings = settings
        self.last_error = None
        self.recomputations += 1
        logging.info(
            f"Recomputed {settings.area_size}x{settings.area_size} kernel, "
            f"output {output.shape[1]}x{output.shape[0]}"
        )
        return True

    def current_settings(self):
        """The snapshot being edited: the accepted one, or all ones before any."""
        return self.settings if self.settings is not None else KernelSettings.ones()

    def set_area_size(self, area_size):
        if not 1 <= area_size <= self.max_area_size:
            raise ValueError(f"Area size must be within [1, {self.max_area_size}], got {area_size}")
        return self.update(self.current_settings().resize(area_size))

    def set_weight(self, y, x, value):
        return self.update(self.current_settings().with_weight(y, x, value))

    def set_weights(self, weights):
        return self.update(KernelSettings(self.current_settings().area_size, weights))
