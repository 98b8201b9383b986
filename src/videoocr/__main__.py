"""Entry point for videoocr package.

Usage:
    python -m videoocr -f /dev/video0 -r 0,0,640,120 -l eng
Keys: p = pause OCR, s = show/hide stats, ESC or q = quit.
Drag with the mouse to add a region.
"""
from videoocr.app import main

if __name__ == '__main__':
    main()
