import sys, os
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from types import SimpleNamespace

import numpy as np
import pytest
from primesense.utils import InitializationError, OpenNIError


def _error(message):
    return OpenNIError(1, message, None)


class FakeFrame:
    def __init__(self, stream, data, timestamp):
        self.stream = stream
        self.data = data
        self.height, self.width = data.shape[:2]
        self.timestamp = timestamp

    def get_buffer_as_uint8(self):
        return self.data.astype(np.uint8).tobytes()

    def get_buffer_as_uint16(self):
        return self.data.astype(np.uint16).tobytes()

    def close(self):
        self.stream.released += 1


class FakeStream:
    def __init__(self, runtime, kind):
        self.runtime = runtime
        self.kind = kind
        self.ready = True
        self.started = 0
        self.stopped = 0
        self.closed = 0
        self.reads = 0
        self.released = 0
        self.video_mode = None

    @property
    def live(self):
        return self.closed == 0

    def set_video_mode(self, mode):
        if f'{self.kind}_video_mode' in self.runtime.fail:
            raise _error(f'{self.kind} video mode unsupported')
        self.video_mode = mode

    def start(self):
        if f'{self.kind}_start' in self.runtime.fail:
            raise _error(f'{self.kind} start failed')
        if f'{self.kind}_crash' in self.runtime.fail:
            raise RuntimeError(f'{self.kind} driver crashed')
        self.started += 1

    def stop(self):
        self.stopped += 1

    def close(self):
        self.closed += 1

    def read_frame(self):
        self.reads += 1
        data = self.runtime.images[self.kind]
        timestamp = self.runtime.timestamps[self.kind] + self.reads
        return FakeFrame(self, data, timestamp)


class FakeDevice:
    def __init__(self, runtime):
        self.runtime = runtime
        self.closed = 0
        self.registration = None

    def _create(self, kind):
        if f'{kind}_create' in self.runtime.fail:
            raise _error(f'no {kind} sensor')
        stream = FakeStream(self.runtime, kind)
        self.runtime.streams[kind] = stream
        return stream

    def create_color_stream(self):
        return self._create('color')

    def create_depth_stream(self):
        return self._create('depth')

    def set_image_registration_mode(self, mode):
        if 'registration' in self.runtime.fail:
            raise _error('registration unsupported')
        self.registration = mode

    def close(self):
        self.closed += 1


class FakeOpenNI:
    """Stand-in for ``primesense.openni2`` that counts every acquire and release."""

    IMAGE_REGISTRATION_DEPTH_TO_COLOR = 'depth_to_color'

    def __init__(self, color_image, depth_image):
        self.images = {'color': color_image, 'depth': depth_image}
        self.timestamps = {'color': 1000, 'depth': 2000}
        self.fail = set()
        self.initialized = 0
        self.unloaded = 0
        self.devices = []
        self.streams = {}
        self.waits = []
        self.conversions = []
        self.world = None
        self.Device = SimpleNamespace(open_any=self._open_any)

    def initialize(self, redist=None):
        if 'initialize' in self.fail:
            raise InitializationError('OpenNI2 library not found')
        self.initialized += 1

    def unload(self):
        self.unloaded += 1

    def _open_any(self):
        if 'open' in self.fail:
            raise _error('no device')
        device = FakeDevice(self)
        self.devices.append(device)
        return device

    def wait_for_any_stream(self, streams, timeout=None):
        self.waits.append((list(streams), timeout))
        for stream in streams:
            if stream.ready:
                return stream
        return None

    def convert_depth_to_world(self, stream, x, y, z):
        self.conversions.append((stream, x, y, z))
        if self.world is not None:
            return self.world
        return x * z / 100.0, y * z / 100.0, float(z)

    def live_handles(self):
        live = [s for s in self.streams.values() if s.live]
        live += [d for d in self.devices if d.closed == 0]
        if self.initialized > self.unloaded:
            live.append('runtime')
        return live


@pytest.fixture
def color_image():
    # native RGB order: R=10, G=20, B=30
    image = np.zeros((4, 6, 3), dtype=np.uint8)
    image[..., 0] = 10
    image[..., 1] = 20
    image[..., 2] = 30
    return image


@pytest.fixture
def depth_image():
    image = np.zeros((4, 6), dtype=np.uint16)
    image[1, 2] = 1000
    image[3, 5] = 65535
    return image


@pytest.fixture
def runtime(color_image, depth_image):
    return FakeOpenNI(color_image, depth_image)


@pytest.fixture
def camera(runtime):
    from kinect_vision.camera import KinectCamera
    return KinectCamera(runtime=runtime, redist='redist')


@pytest.fixture
def ready_camera(camera):
    assert camera.init()
    yield camera
    camera.close()
