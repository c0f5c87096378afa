#!/usr/bin/env python3
"""python -m mprisbus"""

import mprisbus.player

if __name__ == "__main__":
    mprisbus.player.cli()
