#!/usr/bin/env python3
import logging
import os
import sys

from ncmstruct import NcmFile, NcmException
from ncmstruct.music.ncm.utils import get_cover_image


logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)
logger = logging.getLogger(__name__)


def usage(progname):
    print(f'usage: {progname} <ncm file path>')
    sys.exit(1)


def dump_layout(ncm):
    print(f'''NCM file: {ncm.path}
 Name                 Offset     Size''')
    for name, (offset, size) in ncm.layout.items():
        print(f' {name:<20} 0x{offset:08x} {size}')


def dump_cover(ncm):
    image = get_cover_image(ncm)
    if image is None:
        print('Cover: none')
        return

    print(f'Cover: {image.format} {image.width}x{image.height} {image.mode}')


if __name__ == '__main__':
    if len(sys.argv) < 2:
        usage(sys.argv[0])

    try:
        ncm = NcmFile(sys.argv[1])
    except NcmException as e:
        logger.error(f"cannot open '{sys.argv[1]}': {e}")
        sys.exit(2)

    with ncm:
        try:
            ncm.parse()
        except NcmException as e:
            logger.error(f"parsing failed: {e}")
            dump_layout(ncm)
            sys.exit(2)

        dump_layout(ncm)
        dump_cover(ncm)
