from contextlib import closing

from primesense import _openni2 as c_api
import numpy as np

from kinect_vision.logger import Logger

logger = Logger.get_logger('kinect_vision.depthstream')


def _frame_to_depth(frame):
    # copy so the array outlives the native frame
    buffer = frame.get_buffer_as_uint16()
    img_depth = np.frombuffer(buffer, dtype=np.uint16, count=frame.width * frame.height)
    return img_depth.reshape((frame.height, frame.width)).copy()


class DepthStream :
    def __init__(self, device, width=None, height=None, fps=None):
        self.timestamp = 0
        self.depth_stream = device.create_depth_stream()
        self.running = False

        if width and height and fps:
            try:
                self.depth_stream.set_video_mode(c_api.OniVideoMode(pixelFormat = c_api.OniPixelFormat.ONI_PIXEL_FORMAT_DEPTH_1_MM, resolutionX = width, resolutionY = height, fps = fps))
            except Exception:
                self.depth_stream.close()
                raise

    @property
    def stream(self):
        return self.depth_stream

    def start(self):
        self.depth_stream.start()
        self.running = True

    def get_frame(self):
        with closing(self.depth_stream.read_frame()) as depth_frame:
            img_depth = _frame_to_depth(depth_frame)
            self.timestamp = depth_frame.timestamp
        logger.debug(f'Depth Timestamp: {self.timestamp}')
        return img_depth

    def close(self):
        if self.running:
            self.depth_stream.stop()
            self.running = False
        self.depth_stream.close()
