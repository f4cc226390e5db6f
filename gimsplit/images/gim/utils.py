import logging


logger = logging.getLogger(__name__)


def walk(root):
    '''Depth first iteration over (depth, block), root included.'''
    stack = [(0, root)]
    while stack:
        depth, block = stack.pop()
        yield depth, block
        stack.extend((depth + 1, _) for _ in reversed(block.children))


def get_blocks_by_type(root, block_type):
    '''All the blocks of the tree with the given type, in file order.'''
    return [block for _, block in walk(root) if block.type == block_type]


def read_file_info(stream, block):
    '''The FILEINFO block is a list of NUL separated strings (project, user,
    date, tool...), the empty ones are dropped.'''
    with stream.preserve():
        stream.seek(block.payload_offset)
        text = stream.read(block.payload_size).decode('utf-8', errors='replace')

    return [_ for _ in text.split('\x00') if _]
