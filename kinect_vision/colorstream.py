from contextlib import closing

from primesense import _openni2 as c_api
import cv2
import numpy as np

from kinect_vision.logger import Logger

logger = Logger.get_logger('kinect_vision.colorstream')


def _frame_to_color(frame):
    # sensor delivers RGB888, OpenCV displays BGR
    buffer = frame.get_buffer_as_uint8()
    color_image_raw = np.frombuffer(buffer, dtype=np.uint8, count=frame.width * frame.height * 3)
    color_image_raw = color_image_raw.reshape((frame.height, frame.width, 3))
    return cv2.cvtColor(color_image_raw, cv2.COLOR_RGB2BGR)


class ColorStream:
    def __init__(self, device, width=None, height=None, fps=None):
        self.timestamp = 0
        self.color_stream = device.create_color_stream()
        self.running = False

        if width and height and fps:
            try:
                self.color_stream.set_video_mode(c_api.OniVideoMode(pixelFormat = c_api.OniPixelFormat.ONI_PIXEL_FORMAT_RGB888, resolutionX = width, resolutionY = height, fps = fps))
            except Exception:
                self.color_stream.close()
                raise

    @property
    def stream(self):
        return self.color_stream

    def start(self):
        self.color_stream.start()
        self.running = True

    def get_frame(self):
        with closing(self.color_stream.read_frame()) as color_frame:
            color_image = _frame_to_color(color_frame)
            self.timestamp = color_frame.timestamp
        logger.debug(f'Color Timestamp: {self.timestamp}')
        return color_image

    def close(self):
        if self.running:
            self.color_stream.stop()
            self.running = False
        self.color_stream.close()
