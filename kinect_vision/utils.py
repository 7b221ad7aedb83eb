import cv2
import numpy as np
from kinect_vision.config import *

def _temporal_filter(frame, prev_frame=None, alpha=0.5):
    if prev_frame is None or prev_frame.shape != frame.shape:
        return frame
    else :
        result = cv2.addWeighted(frame, alpha, prev_frame, 1-alpha, 0)
        return result

def _depth_to_image(img_depth, colormap=False):
    depth_image = cv2.normalize(img_depth.astype(np.float32), None, 0, 255, cv2.NORM_MINMAX, dtype=cv2.CV_8U)
    if colormap:
        depth_image = cv2.applyColorMap(depth_image, cv2.COLORMAP_JET)
    return depth_image

def _num_to_string(number):
    if isinstance(number, float):
        return f'{number:g}'
    return str(number)

def _draw_object(x, y, frame):
    # crosshair arms are clamped to the frame edges
    height, width = frame.shape[:2]
    cv2.circle(frame, (x, y), 20, TRACK_COLOR, 2)
    cv2.line(frame, (x, y), (x, y - 25 if y - 25 > 0 else 0), TRACK_COLOR, 2)
    cv2.line(frame, (x, y), (x, y + 25 if y + 25 < height else height), TRACK_COLOR, 2)
    cv2.line(frame, (x, y), (x - 25 if x - 25 > 0 else 0, y), TRACK_COLOR, 2)
    cv2.line(frame, (x, y), (x + 25 if x + 25 < width else width, y), TRACK_COLOR, 2)

    cv2.putText(frame, f'{_num_to_string(x)},{_num_to_string(y)}', (x, y + 30), DEFAULT_FONT, 1, TRACK_COLOR, 2)
    return frame

def _add_text(img, text, origin=(0, 50), color=DEFAULT_COLOR, scale=2, thickness=1):
    return cv2.putText(img, text, origin, DEFAULT_FONT, scale, color, thickness, DEFAULT_LINE)
