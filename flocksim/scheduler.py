from enum import Enum
import logging

log = logging.getLogger(__name__)


class RunState(Enum):
    RUNNING = "running"
    PAUSED = "paused"


class FrameScheduler:
    """
    Drives the simulation from three independent cadences:

      on_frame   once per display refresh: one tick + render (skipped while paused)
      on_signal  every ``signal_interval_ms``: leaders broadcast their heading
      on_plot    every ``plot_interval_ms``: metrics plots redraw

    The host loop (matplotlib timers interactively, ``run_headless`` otherwise)
    owns the clock; the scheduler itself never reads wall-clock time, so one
    frame is always one tick regardless of the refresh rate.
    """

    def __init__(self, sim, renderer=None, plotter=None):
        self.sim = sim
        self.renderer = renderer
        self.plotter = plotter
        self.state = RunState.RUNNING
        self.frames_seen = 0

    @property
    def running(self) -> bool:
        return self.state is RunState.RUNNING

    def pause(self):
        self.state = RunState.PAUSED
        log.info("paused at tick %d", self.sim.tick)

    def resume(self):
        self.state = RunState.RUNNING
        log.info("resumed at tick %d", self.sim.tick)

    def toggle_pause(self):
        if self.running:
            self.pause()
        else:
            self.resume()
        return self.state

    def reset(self):
        self.sim.reset()
        if self.renderer is not None:
            self.renderer.reset(self.sim.frame())
        if self.plotter is not None:
            self.plotter.update(self.sim.metrics)

    def on_frame(self):
        self.frames_seen += 1
        if not self.running:
            return None

        frame = self.sim.step()
        if self.renderer is not None:
            self.renderer.draw(frame)
        return frame

    def on_signal(self):
        # keeps firing while paused, like any other timer
        self.sim.broadcast_signals()

    def on_plot(self):
        if self.plotter is not None:
            self.plotter.update(self.sim.metrics)

    def run_headless(self, frames: int, keep_every: int = 1):
        """
        Run ``frames`` refreshes on a virtual millisecond clock so the signal
        and plot timers fire at the same relative cadence as they would live.
        Returns every ``keep_every``-th frame snapshot.
        """
        cfg = self.sim.cfg
        now = 0.0
        next_signal = cfg.signal_interval_ms
        next_plot = cfg.plot_interval_ms
        history = []

        for k in range(frames):
            now += cfg.frame_interval_ms
            while next_signal <= now:
                self.on_signal()
                next_signal += cfg.signal_interval_ms
            while next_plot <= now:
                self.on_plot()
                next_plot += cfg.plot_interval_ms

            frame = self.on_frame()
            if frame is not None and k % keep_every == 0:
                history.append(frame)

            if (k + 1) % 500 == 0:
                log.info("headless: %d/%d frames, %d boids alive", k + 1, frames, len(self.sim.boids))

        return history
