"""Monochrome framebuffer for the CHIP-8 interpreter."""

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32


class Display:
    """Row-major boolean pixel grid drawn with XOR sprites."""

    def __init__(self, width: int = SCREEN_WIDTH, height: int = SCREEN_HEIGHT):
        self.width = width
        self.height = height
        self._cells: list[bool] = [False] * (width * height)

    def clear(self) -> None:
        self._cells = [False] * (self.width * self.height)

    def get(self, x: int, y: int) -> bool:
        return self._cells[(y % self.height) * self.width + (x % self.width)]

    def draw_sprite(self, x: int, y: int, sprite: bytes) -> bool:
        """XOR an 8-pixel-wide sprite onto the screen.

        The origin is reduced modulo the screen size first; every pixel then
        wraps around the edges independently. Returns True if any set pixel
        was turned off.
        """
        x0 = x % self.width
        y0 = y % self.height
        collision = False
        for row, bits in enumerate(sprite):
            py = (y0 + row) % self.height
            for col in range(8):
                if bits & (0x80 >> col):
                    idx = py * self.width + (x0 + col) % self.width
                    if self._cells[idx]:
                        collision = True
                    self._cells[idx] = not self._cells[idx]
        return collision

    def rows(self) -> list[list[bool]]:
        """Return the grid as a list of rows."""
        return [
            self._cells[y * self.width:(y + 1) * self.width]
            for y in range(self.height)
        ]

    def snapshot(self) -> list[bool]:
        """Return a copy of the flat row-major buffer."""
        return self._cells.copy()

    def lit_count(self) -> int:
        return sum(self._cells)

    def to_text(self, on: str = "#", off: str = ".") -> list[str]:
        """Render each row as a string."""
        return ["".join(on if cell else off for cell in row) for row in self.rows()]
