"""CLI entrypoint for the photo slideshow builder."""

import sys

from photo_sequence.cli import main


if __name__ == "__main__":
    sys.exit(main())
