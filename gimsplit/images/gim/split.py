'''
Drive the splitting of a GIM file.

For each PICTURE child of the ROOT block the images are decoded (with the
first palette of the picture) and the picture itself is re-exported as a
standalone file. Every artifact takes the next value of a counter that is
passed in and returned back, images and containers sharing the same one.

A broken file header or ROOT block stops everything; a broken or unsupported
leaf only costs its own artifact.
'''
import logging
import os

from gimsplit.streams import Stream
from gimsplit.diagnostics import Diagnostic, DiagnosticKind, ignore
from gimsplit.exceptions import (
    FormatError,
    MagicException,
    RootTypeException,
    UnsupportedFormatError,
    InvalidPaletteException,
)
from . import BlockType
from .tree import parse_container, BlockRecord
from .palette import decode_palette
from .raster import decode_image, RasterImage
from .export import export_picture
from .utils import read_file_info


logger = logging.getLogger(__name__)


class DirectorySink(object):
    '''Write the artifacts as <base name>-<index>.<extension> into a directory.'''

    def __init__(self, out_dir, base_name, listener=ignore):
        self.out_dir = out_dir
        self.base_name = base_name
        self.listener = listener

    def get_path(self, index, extension):
        return os.path.join(self.out_dir, '%s-%d.%s' % (self.base_name, index, extension))

    def write_image(self, raster: RasterImage, index: int):
        path = self.get_path(index, 'png')
        logger.debug('dumping image %s as %s', path, raster)
        raster.to_image().save(path, 'PNG')
        self.listener(Diagnostic(DiagnosticKind.ARTIFACT_WRITTEN, index=index, path=path))

    def write_container(self, raw: bytes, index: int):
        path = self.get_path(index, 'gim')
        logger.debug('dumping container %s (0x%x bytes)', path, len(raw))
        with open(path, 'wb') as f:
            f.write(raw)
        self.listener(Diagnostic(DiagnosticKind.ARTIFACT_WRITTEN, index=index, path=path))

    @classmethod
    def for_input(cls, filepath, out_dir=None, listener=ignore):
        '''The sink next to the input file (or into out_dir) named after it.'''
        base_name = os.path.splitext(os.path.basename(filepath))[0]

        return cls(out_dir if out_dir is not None else os.path.dirname(filepath), base_name, listener=listener)


def _leaf_failed(listener, block, exception):
    if isinstance(exception, InvalidPaletteException):
        kind = DiagnosticKind.INVALID_PALETTE
    elif isinstance(exception, UnsupportedFormatError):
        kind = DiagnosticKind.UNSUPPORTED_PIXEL_FORMAT
    else:
        kind = DiagnosticKind.MALFORMED_BLOCK

    logger.warning('skipping %s: %s', block, exception)

    details = {'code': exception.code} if isinstance(exception, UnsupportedFormatError) else {}
    listener(Diagnostic(kind, exception=exception, offset=block.start, **details))


def split_picture(stream: Stream, picture: BlockRecord, sink, index: int, listener=ignore, root_flags=0) -> int:
    '''Emit the images and the standalone container of picture, return the last index used.'''
    palette = None
    palette_block = picture.find(BlockType.PALETTE)
    if palette_block is not None:
        try:
            palette = decode_palette(stream, palette_block)
        except (UnsupportedFormatError, FormatError) as e:
            _leaf_failed(listener, palette_block, e)

    for image_block in picture.find_all(BlockType.IMAGE):
        try:
            raster = decode_image(stream, image_block, palette=palette, listener=listener)
        except (UnsupportedFormatError, FormatError) as e:
            _leaf_failed(listener, image_block, e)
            continue

        index += 1
        sink.write_image(raster, index)

    try:
        raw = export_picture(stream, picture, root_flags=root_flags)
    except FormatError as e:
        _leaf_failed(listener, picture, e)
        return index

    index += 1
    sink.write_container(raw, index)

    return index


def split(data, sink, listener=ignore, index=0) -> int:
    '''Split a whole GIM file into sink, return the last artifact index used.

    The first artifact takes index + 1.'''
    stream = data if isinstance(data, Stream) else Stream(data)

    try:
        root = parse_container(stream)
    except MagicException as e:
        listener(Diagnostic(DiagnosticKind.BAD_MAGIC, exception=e))
        raise
    except RootTypeException as e:
        listener(Diagnostic(DiagnosticKind.WRONG_ROOT_TYPE, exception=e))
        raise
    except FormatError as e:
        listener(Diagnostic(DiagnosticKind.MALFORMED_BLOCK, exception=e))
        raise

    for block in root.children:
        if block.type == BlockType.PICTURE:
            index = split_picture(stream, block, sink, index, listener=listener, root_flags=root.flags)
        elif block.type == BlockType.FILEINFO:
            try:
                strings = read_file_info(stream, block)
            except FormatError as e:
                _leaf_failed(listener, block, e)
                continue

            if strings:
                listener(Diagnostic(DiagnosticKind.FILE_INFO, strings=strings))
        else:
            logger.debug('ignoring %s', block)

    return index
