"""
trigger.py — Turns fire events into beams.

fire() only asks the camera for a fresh detection.  The answer arrives
asynchronously; poll() is called by the main loop at the start of every
tick to turn answered requests into beams, so a new beam is first drawn
on the tick after its detection completes.
"""

import config as cfg


def origin_for(frame_size):
    """Bottom-centre of a frame of the given (width, height)."""
    w, h = frame_size
    return w / 2, h


class TriggerController:
    """
    Fires one beam at every tracked target in the current frame.

    Usage:
        trigger = TriggerController(registry, camera)
        trigger.fire()          # on SPACE / click
        trigger.poll()          # once per tick, main thread
    """

    def __init__(self, registry, frame_source, tracked_label=None):
        self.registry = registry
        self.frame_source = frame_source
        self.tracked_label = cfg.TRACKED_LABEL if tracked_label is None else tracked_label
        self.shots_fired = 0

    def fire(self):
        """Request detections for the next frame.  Never blocks."""
        self.shots_fired += 1
        self.frame_source.request_detection()

    def poll(self):
        """Spawn beams for every answered fire request.  Returns beams spawned."""
        spawned = 0
        for snapshot in self.frame_source.collect_snapshots():
            spawned += self.spawn_from(snapshot.detections, snapshot.frame_size)
        return spawned

    def spawn_from(self, detections, frame_size):
        """
        Spawn one beam from the bottom-centre toward the centre of each
        detection carrying the tracked label.  Returns beams spawned.
        """
        origin = origin_for(frame_size)
        spawned = 0
        for det in detections:
            if det.label != self.tracked_label:
                continue
            self.registry.spawn(origin, det.center)
            spawned += 1
        return spawned
