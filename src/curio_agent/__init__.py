"""
curio_agent
===========

Curiosity-driven controller for a differential-drive rover.

The agent watches a grayscale camera feed, measures how novel the recent
window of frames is, and lets a small online action-value policy choose a
locomotion action that seeks out more novel scenes. A human operator can
take over at any time with a joystick.

Components:
    - signals: Compression-based complexity estimation
    - sensing: Temporal frame buffer + spectral novelty sensor
    - policy: Online action-value policies (MarkovMind, KMind)
    - stream: Frame model, frame buffer and camera sources
    - control: Mode arbitration, joystick input, transports, control loop
    - simulation: Offline grid-world harness with GIF rendering

Example:
    from curio_agent.sensing import SpectralNoveltySensor
    from curio_agent.policy import MarkovMind

    sensor = SpectralNoveltySensor(mode="entropy")
    mind = MarkovMind(action_count=5, rng=np.random.default_rng(1))

    for frame in camera.frames():
        action = mind.step(4 * sensor.sense(frame.luminance))
"""

__version__ = "0.1.0"
__author__ = "Curio Project"

__all__ = [
    "__version__",
]
