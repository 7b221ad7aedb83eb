from collections import namedtuple

import cv2
import numpy as np

from kinect_vision.config import *
from kinect_vision.utils import _add_text, _draw_object

Rectangle = namedtuple('Rectangle', ['corners', 'center', 'area'])


def _find_contours(mask):
    # OpenCV 3 returns (image, contours, hierarchy), OpenCV 4 drops the image
    contours, hierarchy = cv2.findContours(mask.copy(), cv2.RETR_CCOMP, cv2.CHAIN_APPROX_SIMPLE)[-2:]
    return contours, hierarchy


def _within_area(area, min_area=MIN_OBJECT_AREA, max_area=MAX_OBJECT_AREA):
    return min_area < area < max_area


def _centroid(moment):
    return int(moment['m10'] / moment['m00']), int(moment['m01'] / moment['m00'])


def threshold_hsv(frame, low=HSV_LOW, high=HSV_HIGH, morph_size=MORPH_SIZE):
    """Binary HSV range mask of a BGR frame, cleaned by an opening then a closing."""
    img_hsv = cv2.cvtColor(frame, cv2.COLOR_BGR2HSV)
    img_thresholded = cv2.inRange(img_hsv, np.array(low), np.array(high))

    kernel = cv2.getStructuringElement(cv2.MORPH_ELLIPSE, (morph_size, morph_size))
    img_thresholded = cv2.erode(img_thresholded, kernel)
    img_thresholded = cv2.dilate(img_thresholded, kernel)

    img_thresholded = cv2.dilate(img_thresholded, kernel)
    img_thresholded = cv2.erode(img_thresholded, kernel)
    return img_thresholded


def track_filtered_object(mask, frame, draw_contours=False):
    """Locate the largest blob in ``mask`` and mark it on ``frame``.

    Only top-level contours are considered. Returns the blob centroid
    ``(x, y)``, or ``None`` when nothing qualifies or the mask is too noisy.
    """
    contours, hierarchy = _find_contours(mask)
    if hierarchy is None or len(contours) == 0:
        return None

    hierarchy = hierarchy[0]
    if len(hierarchy) >= MAX_NUM_OBJECTS:
        _add_text(frame, 'TOO MUCH NOISE! ADJUST FILTER', scale=2, thickness=2)
        return None

    ref_area = 0
    location = None
    index = 0
    while index >= 0:
        moment = cv2.moments(contours[index])
        area = moment['m00']
        if _within_area(area) and area > ref_area:
            location = _centroid(moment)
            ref_area = area
        index = hierarchy[index][0]

    if location is None:
        return None

    cv2.putText(frame, 'Tracking Object', (0, 50), cv2.FONT_HERSHEY_DUPLEX, 1, TRACK_COLOR, 2)
    _draw_object(location[0], location[1], frame)

    if draw_contours:
        rng = np.random.default_rng(12345)
        for i in range(len(contours)):
            color = tuple(int(c) for c in rng.integers(0, 255, 3))
            cv2.drawContours(frame, contours, i, color, 2, cv2.LINE_8, hierarchy[np.newaxis], 0)

    return location


def detect_edges(frame, low_threshold=LOW_THRESHOLD, ratio=THRESHOLD_RATIO, kernel_size=KERNEL_SIZE):
    img_gray = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
    detected_edges = cv2.blur(img_gray, (3, 3))
    return cv2.Canny(detected_edges, low_threshold, low_threshold * ratio, apertureSize=kernel_size)


def find_rectangles(frame, low_threshold=LOW_THRESHOLD, ratio=THRESHOLD_RATIO, kernel_size=KERNEL_SIZE):
    """Canny edges of ``frame`` and the quadrilaterals traced along them.

    A rectangle's ``center`` is only set when its area is plausible for an
    object, otherwise it is ``None``.
    """
    detected_edges = detect_edges(frame, low_threshold, ratio, kernel_size)
    contours, _ = _find_contours(detected_edges)

    rectangles = []
    for contour in contours:
        approx = cv2.approxPolyDP(contour, cv2.arcLength(contour, True) * APPROX_EPSILON, True)
        if len(approx) != 4:
            continue

        moment = cv2.moments(contour)
        area = moment['m00']
        center = _centroid(moment) if _within_area(area) else None
        corners = [tuple(int(v) for v in point[0]) for point in approx]
        rectangles.append(Rectangle(corners, center, area))

    return detected_edges, rectangles


def draw_rectangle(frame, rectangle):
    for corner in rectangle.corners:
        cv2.line(frame, corner, corner, DEFAULT_COLOR, 4)
    if rectangle.center is not None:
        _draw_object(rectangle.center[0], rectangle.center[1], frame)
    return frame
