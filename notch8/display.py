# Notch8, a Chip-8 virtual machine.
# Lindsay Gaff <lindsaygaff@gmail.com>

# To the extent possible under law, the person who associated CC0 with
# Notch8 has waived all copyright and related or neighboring rights
# to Notch8.

# You should have received a copy of the CC0 legalcode along with this
# work.  If not, see <http://creativecommons.org/publicdomain/zero/1.0/>.

from notch8.constants import VIDEO_X, VIDEO_Y, SPRITE_W


class Display:
    """64x32 monochrome frame buffer.

    Pixels are kept row-major in a flat bytearray, one byte per pixel,
    so index = y * width + x is always in [0, width * height).
    """

    def __init__(self, width=VIDEO_X, height=VIDEO_Y):
        self.width = width
        self.height = height
        self.pixels = bytearray(width * height)

    def clear(self):
        self.pixels[:] = bytes(len(self.pixels))

    def pixel(self, x, y):
        return self.pixels[(y % self.height) * self.width + (x % self.width)]

    def draw(self, x, y, sprite):
        """XOR sprite rows onto the buffer with (x, y) as top left corner.

        Each byte in the sprite represents one row, most significant bit
        leftmost. Both axes wrap around the buffer edges. Returns True
        when a lit pixel was switched off.
        """
        collision = False
        for row, bits in enumerate(sprite):
            y_off = (y + row) % self.height
            line = y_off * self.width
            for col in range(SPRITE_W):
                if not bits >> (SPRITE_W - 1 - col) & 0x1:
                    continue
                index = line + (x + col) % self.width
                if self.pixels[index]:
                    collision = True
                self.pixels[index] ^= 1
        return collision

    def rows(self):
        """Yield each row of the buffer as a bytes object"""
        for y in range(self.height):
            yield bytes(self.pixels[y * self.width:(y + 1) * self.width])

    def lit(self):
        return sum(self.pixels)

    def __str__(self):
        return "\n".join("".join("#" if p else "." for p in row) for row in self.rows())
