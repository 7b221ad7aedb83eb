import sys

from kinect_vision.main import main


if __name__ == '__main__':

    # python main.py --colormap --temporal-filter
    # python -m kinect_vision.blob_detect
    # python -m kinect_vision.rect_detect
    sys.exit(main(sys.argv[1:]))
