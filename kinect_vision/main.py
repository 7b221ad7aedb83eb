import argparse

import cv2

from kinect_vision.camera import ImageType, KinectCamera
from kinect_vision.config import *
from kinect_vision.logger import Logger
from kinect_vision.utils import _depth_to_image, _temporal_filter

logger = Logger.get_logger('kinect_vision.main')


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Show the Kinect color and depth streams')
    parser.add_argument('--redist', default=REDIST_PATH, help='OpenNI2 redist directory')
    parser.add_argument('--colormap', action='store_true', help='render depth with a JET colormap')
    parser.add_argument('--temporal-filter', action='store_true', help='blend each frame with the previous one')
    parser.add_argument('--register', action='store_true', help='align depth to the color image')
    parser.add_argument('--video-mode', action='store_true',
                        help=f'force {FRAME_WIDTH}x{FRAME_HEIGHT}@{FRAME_FPS} on both streams')
    parser.add_argument('-v', '--verbose', action='store_true', help='log frame timestamps')
    return parser.parse_args(argv)


class Viewer:
    def __init__(self, camera, colormap=False, temporal_filter=False):
        self.camera = camera
        self.colormap = colormap
        self.temporal_filter = temporal_filter
        self.prev_color_image = None
        self.prev_depth_image = None

    def get_frame(self):
        color_image = self.camera.read(ImageType.COLOR)
        img_depth = self.camera.read(ImageType.DEPTH)

        depth_image = None
        if img_depth is not None:
            depth_image = _depth_to_image(img_depth, colormap=self.colormap)

        if self.temporal_filter:
            if color_image is not None:
                color_image = _temporal_filter(color_image, self.prev_color_image)
                self.prev_color_image = color_image
            if depth_image is not None:
                depth_image = _temporal_filter(depth_image, self.prev_depth_image)
                self.prev_depth_image = depth_image

        return color_image, depth_image

    def loop(self):
        while True :
            color_image, depth_image = self.get_frame()
            if color_image is not None:
                cv2.imshow('Color Image', color_image)
            if depth_image is not None:
                cv2.imshow('Depth Image', depth_image)

            key = cv2.waitKey(1) & 0xFF
            if key == ord('q') or key == ESC_KEY:
                break

        cv2.destroyAllWindows()


def main(argv=None):
    args = parse_args(argv)
    if args.verbose:
        Logger.configure('DEBUG')

    mode = (FRAME_WIDTH, FRAME_HEIGHT, FRAME_FPS) if args.video_mode else (None, None, None)
    camera = KinectCamera(redist=args.redist, width=mode[0], height=mode[1], fps=mode[2])
    if not camera.init():
        logger.error('Error initializing')
        return 1

    try:
        if args.register:
            camera.register_depth_and_image()
        Viewer(camera, colormap=args.colormap, temporal_filter=args.temporal_filter).loop()
    finally:
        camera.close()
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
