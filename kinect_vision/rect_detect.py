import argparse

import cv2

from kinect_vision.camera import ImageType, KinectCamera
from kinect_vision.config import *
from kinect_vision.logger import Logger
from kinect_vision.tracking import draw_rectangle, find_rectangles
from kinect_vision.utils import _add_text, _num_to_string

logger = Logger.get_logger('kinect_vision.rect_detect')

CONTROL_WINDOW = 'Control'


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Detect rectangles and locate their centers in 3-D')
    parser.add_argument('--redist', default=REDIST_PATH, help='OpenNI2 redist directory')
    parser.add_argument('--threshold', type=int, default=LOW_THRESHOLD, help='initial Canny low threshold')
    parser.add_argument('-v', '--verbose', action='store_true', help='log frame timestamps')
    return parser.parse_args(argv)


def canny_threshold(camera, low_threshold):
    """Run one detection pass on a fresh color frame.

    Returns ``(canny, dst, results)`` where ``results`` pairs each
    centered rectangle with its world coordinate (``None`` if unknown), or
    ``None`` when no frame could be read.
    """
    img_original = camera.read(ImageType.COLOR)
    if img_original is None:
        logger.warning('Cannot read a frame from video stream')
        return None

    detected_edges, rectangles = find_rectangles(img_original, low_threshold)
    canny = cv2.bitwise_and(img_original, img_original, mask=detected_edges)

    dst = img_original.copy()
    results = []
    for rectangle in rectangles:
        draw_rectangle(dst, rectangle)
        if rectangle.center is None:
            continue

        world = camera.pixel_to_world(*rectangle.center)
        results.append((rectangle, world))
        if world is not None:
            _add_text(dst, ','.join(_num_to_string(round(v, 2)) for v in world))

    return canny, dst, results


def run(camera, low_threshold=LOW_THRESHOLD):
    camera.register_depth_and_image()

    cv2.namedWindow(CONTROL_WINDOW, cv2.WINDOW_AUTOSIZE)
    cv2.createTrackbar('Threshold', CONTROL_WINDOW, low_threshold, MAX_LOW_THRESHOLD, lambda _: None)

    while cv2.waitKey(30) & 0xFF != ESC_KEY:
        output = canny_threshold(camera, cv2.getTrackbarPos('Threshold', CONTROL_WINDOW))
        if output is None:
            continue
        canny, dst, _ = output
        cv2.imshow('Thresholded Image', canny)
        cv2.imshow('detected lines', dst)

    cv2.destroyAllWindows()


def main(argv=None):
    args = parse_args(argv)
    if args.verbose:
        Logger.configure('DEBUG')

    camera = KinectCamera(redist=args.redist)
    if not camera.init():
        logger.error('Error initializing')
        return 1

    try:
        run(camera, low_threshold=args.threshold)
    finally:
        camera.close()
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
