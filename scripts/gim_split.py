#!/usr/bin/env python3
'''
Split a GIM file into PNG images and standalone GIM files, one for each picture.

 $ gim_split.py file.gim [output dir]
'''
import logging
import os
import sys

from gimsplit.diagnostics import DiagnosticKind
from gimsplit.exceptions import FormatError
from gimsplit.images.gim.split import split, DirectorySink


logging.basicConfig(level=logging.INFO if 'DEBUG' not in os.environ else logging.DEBUG)
logger = logging.getLogger(__name__)


def usage(progname):
    print(f'usage: {progname} <gim file> [output dir]')
    sys.exit(1)


def log_diagnostic(diagnostic):
    if diagnostic.kind == DiagnosticKind.FILE_INFO:
        logger.info('found file info:')
        for line in diagnostic.strings:
            logger.info(f'  {line}')
    elif diagnostic.kind == DiagnosticKind.ARTIFACT_WRITTEN:
        logger.info(f'[{diagnostic.index:02d}] {diagnostic.path}')
    elif diagnostic.kind == DiagnosticKind.MISSING_PALETTE:
        logger.warning('found paletted image but no palette, using the default one')
    else:
        logger.error(f'{diagnostic.kind.name.lower().replace("_", " ")}: {diagnostic.exception}')


if __name__ == '__main__':
    if len(sys.argv) < 2 or not os.path.isfile(sys.argv[1]):
        usage(sys.argv[0])

    filepath = sys.argv[1]
    out_dir = sys.argv[2] if len(sys.argv) > 2 else None

    sink = DirectorySink.for_input(filepath, out_dir=out_dir, listener=log_diagnostic)

    try:
        count = split(filepath, sink, listener=log_diagnostic)
    except FormatError:
        logger.error(f'{filepath} isn\'t a GIM we can process!')
        sys.exit(2)

    logger.info(f'{count} files written')
