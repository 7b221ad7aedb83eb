import os
import cv2

REDIST_PATH = os.environ.get('OPENNI2_REDIST', './/Redist//')
LOG_LEVEL = os.environ.get('KINECT_LOG_LEVEL', 'INFO')

# milliseconds
STREAM_TIMEOUT = 2000

FRAME_WIDTH = 640
FRAME_HEIGHT = 480
FRAME_FPS = 30

# max number of objects to be detected in frame
MAX_NUM_OBJECTS = 50

# minimum and maximum object area
MIN_OBJECT_AREA = 20 * 20
MAX_OBJECT_AREA = FRAME_HEIGHT * FRAME_WIDTH / 1.5

# canny
LOW_THRESHOLD = 50
MAX_LOW_THRESHOLD = 100
THRESHOLD_RATIO = 3
KERNEL_SIZE = 3
APPROX_EPSILON = 0.01

# hsv trackbars
HSV_LOW = (0, 0, 0)
HSV_HIGH = (179, 255, 255)
HSV_MAX = (179, 255, 255)
MORPH_SIZE = 5

ESC_KEY = 27

DEFAULT_FONT = cv2.FONT_HERSHEY_PLAIN
DEFAULT_LINE = cv2.LINE_8
DEFAULT_COLOR = (0, 0, 255)
TRACK_COLOR = (0, 255, 0)
