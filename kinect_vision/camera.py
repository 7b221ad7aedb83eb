import enum
import math

from primesense import openni2
from primesense.utils import InitializationError, OpenNIError

from kinect_vision.config import *
from kinect_vision.colorstream import ColorStream
from kinect_vision.depthstream import DepthStream
from kinect_vision.logger import Logger

logger = Logger.get_logger('kinect_vision.camera')

SDK_ERRORS = (OpenNIError, InitializationError, OSError)


class KinectError(Exception):
    pass


class ImageType(enum.Enum):
    COLOR = 'color'
    DEPTH = 'depth'


class State(enum.Enum):
    UNINITIALIZED = 'uninitialized'
    READY = 'ready'
    CLOSED = 'closed'


class KinectCamera:
    """Color and depth streams of one OpenNI2 device, read as numpy images.

    ``read`` blocks on both streams at once and then fetches the requested
    kind. Failures never raise: they return ``False``/``None`` and leave a
    diagnostic in ``error``.
    """

    def __init__(self,
                 runtime=openni2,
                 redist=REDIST_PATH,
                 width=None,
                 height=None,
                 fps=None):

        self.runtime = runtime
        self.redist = redist
        self.width = width
        self.height = height
        self.fps = fps

        self.state = State.UNINITIALIZED
        self.error = None
        self.device = None
        self.color_stream = None
        self.depth_stream = None
        self.streams = {}
        self._initialized = False
        self.color_timestamp = 0
        self.depth_timestamp = 0

    def __enter__(self):
        if not self.init():
            raise KinectError(self.error)
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def init(self):
        if self.state is not State.UNINITIALIZED:
            return self._fail(f'Cannot initialize a {self.state.value} camera')

        try:
            self.runtime.initialize(self.redist)
        except SDK_ERRORS as e:
            return self._fail(f'OpenNI Initialization Error: {e}')
        self._initialized = True

        # anything escaping the steps below must not leave the device open
        try:
            if not self._open_streams():
                self._release()
                return False
        except Exception:
            self._release()
            raise

        self.streams = {
            ImageType.COLOR: self.color_stream,
            ImageType.DEPTH: self.depth_stream,
        }
        self.state = State.READY
        self.error = None
        logger.info('Color and depth streams started')
        return True

    def _open_streams(self):
        try:
            self.device = self.runtime.Device.open_any()
        except SDK_ERRORS as e:
            return self._fail(f'Device open failed: {e}')

        try:
            self.color_stream = ColorStream(self.device, self.width, self.height, self.fps)
            self.color_stream.start()
        except SDK_ERRORS as e:
            return self._fail(f"Couldn't start color stream: {e}")

        try:
            self.depth_stream = DepthStream(self.device, self.width, self.height, self.fps)
            self.depth_stream.start()
        except SDK_ERRORS as e:
            return self._fail(f"Couldn't start depth stream: {e}")

        return True

    def read(self, image_type):
        if not self._check_ready('read'):
            return None

        requested = self.streams[image_type]
        wait_set = [self.color_stream.stream, self.depth_stream.stream]
        try:
            ready = self.runtime.wait_for_any_stream(wait_set, timeout=STREAM_TIMEOUT / 1000.0)
            if ready is None:
                return self._fail('Unable to wait for streams', None)

            # the stream that woke us may not be the one asked for
            if ready is not requested.stream:
                if self.runtime.wait_for_any_stream([requested.stream], timeout=0) is None:
                    return self._fail(f'{image_type.value} stream not ready', None)

            image = requested.get_frame()
        except SDK_ERRORS as e:
            return self._fail(f'Unable to read {image_type.value} frame: {e}', None)

        # kept on the camera so the last reading survives close()
        if image_type is ImageType.COLOR:
            self.color_timestamp = requested.timestamp
        else:
            self.depth_timestamp = requested.timestamp
        return image

    def register_depth_and_image(self):
        if not self._check_ready('register depth and image'):
            return False

        try:
            self.device.set_image_registration_mode(self.runtime.IMAGE_REGISTRATION_DEPTH_TO_COLOR)
        except SDK_ERRORS as e:
            return self._fail(f'Unable to register depth to color: {e}')

        logger.info('Depth registered to color')
        return True

    def pixel_to_world(self, x, y):
        """Map pixel ``(x, y)`` of a fresh depth frame to camera-space ``(wx, wy, wz)``.

        Returns ``None`` when no depth frame arrives, the pixel falls outside
        the frame, or the sensor has no reading there (zero sample).
        """
        img_depth = self.read(ImageType.DEPTH)
        if img_depth is None:
            return None

        x, y = int(x), int(y)
        height, width = img_depth.shape
        if not (0 <= x < width and 0 <= y < height):
            return self._fail(f'Pixel ({x}, {y}) outside {width}x{height} depth frame', None)

        depth = int(img_depth[y, x])
        if depth == 0:
            return self._fail(f'No depth reading at ({x}, {y})', None)

        try:
            world = self.runtime.convert_depth_to_world(self.depth_stream.stream, x, y, depth)
        except SDK_ERRORS as e:
            return self._fail(f'Unable to convert ({x}, {y}) to world: {e}', None)

        world = tuple(float(v) for v in world)
        if not all(math.isfinite(v) for v in world):
            return self._fail(f'Invalid world coordinate at ({x}, {y}): {world}', None)
        return world

    def close(self):
        if self.state is State.CLOSED:
            return

        self._release()
        self.state = State.CLOSED
        logger.info('Camera closed')

    def _release(self):
        # reverse acquisition order, keep going past individual failures
        for name in ('depth_stream', 'color_stream'):
            stream = getattr(self, name)
            if stream is not None:
                try:
                    stream.close()
                except SDK_ERRORS as e:
                    logger.warning(f'Unable to close {name}: {e}')
                setattr(self, name, None)

        if self.device is not None:
            try:
                self.device.close()
            except SDK_ERRORS as e:
                logger.warning(f'Unable to close device: {e}')
            self.device = None

        if self._initialized:
            self.runtime.unload()
            self._initialized = False

        self.streams = {}

    def _check_ready(self, action):
        if self.state is State.READY:
            return True
        self._fail(f'Cannot {action}: camera is {self.state.value}')
        return False

    def _fail(self, message, result=False):
        self.error = message
        logger.error(message)
        return result
