#!/usr/bin/env python3
'''
Extract the (still encrypted) sections of an NCM file

 $ ncmextract.py track.ncm track/
'''
import logging
import os
import sys

from ncmstruct import NcmFile, NcmException
from ncmstruct.music.ncm.utils import dump_sections


logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)
logger = logging.getLogger(__name__)


def usage(progname):
    print(f'usage: {progname} <ncm file path> [output directory]')
    sys.exit(1)


if __name__ == '__main__':
    if len(sys.argv) < 2:
        usage(sys.argv[0])

    path = sys.argv[1]
    outdir = sys.argv[2] if len(sys.argv) > 2 else os.path.splitext(path)[0]

    try:
        with NcmFile(path) as ncm:
            ncm.parse()
            for output in dump_sections(ncm, outdir):
                logger.info(f'written \'{output}\'')
    except NcmException as e:
        logger.error(f'cannot extract \'{path}\': {e}')
        sys.exit(2)
