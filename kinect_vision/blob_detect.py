import argparse

import cv2

from kinect_vision.camera import ImageType, KinectCamera
from kinect_vision.config import *
from kinect_vision.logger import Logger
from kinect_vision.tracking import threshold_hsv, track_filtered_object

logger = Logger.get_logger('kinect_vision.blob_detect')

CONTROL_WINDOW = 'Control'
TRACKBARS = (
    ('LowH', HSV_LOW[0], HSV_MAX[0]),
    ('HighH', HSV_HIGH[0], HSV_MAX[0]),
    ('LowS', HSV_LOW[1], HSV_MAX[1]),
    ('HighS', HSV_HIGH[1], HSV_MAX[1]),
    ('LowV', HSV_LOW[2], HSV_MAX[2]),
    ('HighV', HSV_HIGH[2], HSV_MAX[2]),
)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Track a colored blob in the Kinect color stream')
    parser.add_argument('--redist', default=REDIST_PATH, help='OpenNI2 redist directory')
    parser.add_argument('--contours', action='store_true', help='draw every contour of the mask')
    parser.add_argument('-v', '--verbose', action='store_true', help='log frame timestamps')
    return parser.parse_args(argv)


def create_controls():
    cv2.namedWindow(CONTROL_WINDOW, cv2.WINDOW_AUTOSIZE)
    for name, value, maximum in TRACKBARS:
        cv2.createTrackbar(name, CONTROL_WINDOW, value, maximum, lambda _: None)


def read_controls():
    pos = {name: cv2.getTrackbarPos(name, CONTROL_WINDOW) for name, _, _ in TRACKBARS}
    low = (pos['LowH'], pos['LowS'], pos['LowV'])
    high = (pos['HighH'], pos['HighS'], pos['HighV'])
    return low, high


def process_frame(img_original, low, high, draw_contours=False):
    img_thresholded = threshold_hsv(img_original, low, high)
    location = track_filtered_object(img_thresholded, img_original, draw_contours=draw_contours)
    return img_thresholded, location


def run(camera, draw_contours=False):
    create_controls()

    while True:
        img_original = camera.read(ImageType.COLOR)
        if img_original is None:
            logger.warning('Cannot read a frame from video stream')
        else:
            low, high = read_controls()
            img_thresholded, _ = process_frame(img_original, low, high, draw_contours)
            cv2.imshow('Thresholded Image', img_thresholded)
            cv2.imshow('Original', img_original)

        if cv2.waitKey(30) & 0xFF == ESC_KEY:
            logger.info('esc key is pressed by user')
            break

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
        run(camera, draw_contours=args.contours)
    finally:
        camera.close()
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
