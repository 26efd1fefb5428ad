import logging
from typing import Iterator, Optional, Tuple

import pygame

from maze_weaver.core.events import StepEvent
from maze_weaver.core.grid import Grid

logger = logging.getLogger(__name__)

COLOR_BG = (10, 10, 10)
COLOR_WALL = (200, 200, 200)
COLOR_VISITED = (60, 100, 160)  # Blue tint


def draw_grid(surface: pygame.Surface, grid: Grid, cell_size: float, offset: Tuple[float, float] = (0, 0)):
    """
    Paints visited cells and walls onto 'surface'. Reads grid state only.
    Works on any surface, including off-screen ones.
    """
    offset_x, offset_y = offset
    screen_w, screen_h = surface.get_size()
    surface.fill(COLOR_BG)

    # Culling: Calculate visible cell range
    start_col = max(0, int(-offset_x / cell_size))
    start_row = max(0, int(-offset_y / cell_size))
    end_col = min(grid.cols, int((screen_w - offset_x) / cell_size) + 1)
    end_row = min(grid.rows, int((screen_h - offset_y) / cell_size) + 1)

    size = int(cell_size)
    draw_walls = cell_size > 4.0

    # 1. Backgrounds
    for r in range(start_row, end_row):
        for c in range(start_col, end_col):
            if grid.cells[r][c].visited:
                px = int(c * cell_size + offset_x)
                py = int(r * cell_size + offset_y)
                pygame.draw.rect(surface, COLOR_VISITED, (px, py, size + 1, size + 1))

    if not draw_walls:
        return

    # 2. Walls. Each cell owns its bottom and right edge; the outer top and
    # left edges are drawn by the first row and column.
    for r in range(start_row, end_row):
        for c in range(start_col, end_col):
            walls = grid.cells[r][c].walls
            px = int(c * cell_size + offset_x)
            py = int(r * cell_size + offset_y)

            if walls & Grid.BOTTOM:
                pygame.draw.line(surface, COLOR_WALL, (px, py + size), (px + size, py + size), 1)
            if walls & Grid.RIGHT:
                pygame.draw.line(surface, COLOR_WALL, (px + size, py), (px + size, py + size), 1)
            if r == 0 and walls & Grid.TOP:
                pygame.draw.line(surface, COLOR_WALL, (px, py), (px + size, py), 1)
            if c == 0 and walls & Grid.LEFT:
                pygame.draw.line(surface, COLOR_WALL, (px, py), (px, py + size), 1)


class Renderer:
    def __init__(self, grid: Grid, steps: Optional[Iterator[StepEvent]] = None, delay_ms: float = 0,
                 width=1280, height=720):
        self.grid = grid
        self.steps = steps
        self.delay_ms = delay_ms
        self.screen_width = width
        self.screen_height = height

        # Camera
        self.cell_size = 20.0  # Pixels per cell
        self.offset_x = 0.0
        self.offset_y = 0.0
        self.zoom_speed = 1.1

        self.font = None
        self.running = True
        self.clock = None
        self.surface = None
        self.gen_finished = steps is None
        self.last_event: Optional[StepEvent] = None
        self.pending_ms = 0.0

    def fit_to_screen(self):
        """Auto-adjust zoom and pan to fit the entire grid on screen with padding."""
        padding = 40
        available_w = self.screen_width - (padding * 2)
        available_h = self.screen_height - (padding * 2)

        self.cell_size = min(available_w / self.grid.cols, available_h / self.grid.rows)

        # Center
        self.offset_x = (self.screen_width - self.grid.cols * self.cell_size) / 2
        self.offset_y = (self.screen_height - self.grid.rows * self.cell_size) / 2

    def init_window(self):
        pygame.init()
        pygame.display.set_caption(f"Maze Weaver - {self.grid.rows}x{self.grid.cols}")
        self.surface = pygame.display.set_mode((self.screen_width, self.screen_height), pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("Consolas", 16)
        self.fit_to_screen()

    def handle_input(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.screen_width, self.screen_height = event.w, event.h
                self.fit_to_screen()

            elif event.type == pygame.MOUSEWHEEL:
                # Zoom towards mouse
                mx, my = pygame.mouse.get_pos()
                wx = (mx - self.offset_x) / self.cell_size
                wy = (my - self.offset_y) / self.cell_size

                if event.y > 0:
                    self.cell_size *= self.zoom_speed
                else:
                    self.cell_size /= self.zoom_speed
                self.cell_size = max(0.5, min(200.0, self.cell_size))

                # Keep the mouse over the same cell
                self.offset_x = mx - wx * self.cell_size
                self.offset_y = my - wy * self.cell_size

            elif event.type == pygame.MOUSEMOTION:
                if pygame.mouse.get_pressed()[0] or pygame.mouse.get_pressed()[2]:
                    self.offset_x += event.rel[0]
                    self.offset_y += event.rel[1]

    def steps_this_frame(self, frame_ms: float) -> int:
        """How many generator steps to take for a frame that lasted 'frame_ms'."""
        if self.delay_ms <= 0:
            return 1000
        self.pending_ms += frame_ms
        count = int(self.pending_ms // self.delay_ms)
        self.pending_ms -= count * self.delay_ms
        return count

    def advance(self, frame_ms: float):
        if self.gen_finished:
            return
        try:
            for _ in range(self.steps_this_frame(frame_ms)):
                self.last_event = next(self.steps)
        except StopIteration:
            self.gen_finished = True

    def draw_hud(self):
        lines = [f"FPS: {int(self.clock.get_fps())}", f"Size: {self.grid.rows}x{self.grid.cols}"]
        if self.last_event:
            lines.extend(self.last_event.messages())
        for i, text in enumerate(lines):
            lbl = self.font.render(text, True, (255, 255, 255))
            self.surface.blit(lbl, (10, 10 + i * 20))

    def run_loop(self):
        frame_ms = 0.0
        while self.running:
            self.handle_input()
            self.advance(frame_ms)

            draw_grid(self.surface, self.grid, self.cell_size, (self.offset_x, self.offset_y))
            self.draw_hud()
            pygame.display.flip()

            frame_ms = self.clock.tick(60)

        # Closing the window mid-run cancels the generation
        if not self.gen_finished and hasattr(self.steps, "close"):
            logger.info("Window closed before generation finished")
            self.steps.close()
        pygame.quit()
