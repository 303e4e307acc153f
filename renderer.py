import numpy as np

OPACITY_BASE = 0.78
OPACITY_SHADE = 0.22


def sort_blocks(blocks):
    """Far-to-near order: ascending depth key, ties kept in input order."""
    order = np.argsort(blocks['depth'], kind='stable')
    return blocks[order]


def block_opacity(shade):
    return OPACITY_BASE + OPACITY_SHADE * shade


class Renderer:
    """
    Painter's-algorithm renderer for projected voxel blocks.

    There is no depth buffer: every frame the whole block set is sorted by
    depth key and handed to the canvas far to near, which paints the blocks
    in exactly that order, so nearer blocks cover the ones behind them. Do not
    replace the sort with a partial or incremental one; the entire shape
    rotates each frame.
    """

    def __init__(self, canvas):
        self.canvas = canvas

    def render(self, blocks, block_size):
        ordered = sort_blocks(blocks)
        self.canvas.draw_blocks(np.floor(ordered['x']), np.floor(ordered['y']),
                                block_size, block_opacity(ordered['shade']))
