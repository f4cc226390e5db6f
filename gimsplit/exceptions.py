class GIMException(Exception):
    '''Base class to extend in order to throw exception in gimsplit.

    The first argument is the chain of the layers (field names) that
    caused the exception, the outermost first.
    '''

    def __init__(self, chain=None, message=None):
        self.chain = chain if chain is not None else []
        self.message = message
        super().__init__(message or '.'.join(self.chain))


class FormatError(GIMException):
    '''The data doesn't respect the format: whatever was being parsed
    must be abandoned.'''
    pass


class UnpackException(FormatError):
    pass


class MagicException(FormatError):
    pass


class ChunkUnpackException(FormatError):
    pass


class RootTypeException(FormatError):
    pass


class BlockChainException(FormatError):
    '''The headers of the blocks don't describe a sane tree.'''
    pass


class UnsupportedFormatError(GIMException):
    '''The pixel format is not one we know how to decode.

    This is recoverable: only the leaf using it is skipped.'''

    def __init__(self, code, chain=None, message=None):
        self.code = code
        super().__init__(chain=chain, message=message or f'unsupported pixel format 0x{code:x}')


class InvalidPaletteException(UnsupportedFormatError):
    '''A palette must be made of colors, not of indexes.'''

    def __init__(self, code, chain=None):
        super().__init__(code, chain=chain, message=f'indexed palette source invalid (pixel format 0x{code:x})')


class MissingPaletteWarning(UserWarning):
    '''An indexed image has no palette to resolve its indexes against.'''
    pass
