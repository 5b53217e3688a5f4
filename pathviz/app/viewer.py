# pathviz/app/viewer.py
#!/usr/bin/env python3
"""
A* Pathfinding Viewer: random grid, click to pick start/goal, run either variant.

- Mouse:
    [LEFT CLICK] -> set start, then goal (click start again to clear both,
                    click goal again to clear it)
- Keyboard:
    [I]          -> run iterative A*
    [R]          -> run recursive A*
    [G]          -> regenerate grid
    [C]          -> clear visited/path overlays
    [+]/[-]      -> reveal speed (cells/sec)
    [Q]/[ESC]    -> quit

Settings: see pathviz.core.config (PATHVIZ_* env vars or --key=value flags).
"""

# --- bootstrap import path so `from pathviz...` works when run as a script ---
import sys, time, logging, random
from pathlib import Path
_REPO_ROOT = Path(__file__).resolve().parents[2]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))
# -------------------------------------------------------------------------------

from typing import List, Tuple, Optional, Dict
import pygame

from pathviz.app.selection import Selection
from pathviz.core.astar import search
from pathviz.core.config import ViewerConfig, resolve_config, configure_logging, MAX_SPEED
from pathviz.core.errors import PathfindingError
from pathviz.core.maps import random_grid, load_map
from pathviz.core.types import Grid, Cell, CellState, SearchResult

log = logging.getLogger(__name__)

# ---------- Layout ----------
PANEL_W = 320            # right band: metrics + buttons
GRID_MARGIN = 16
CELL_GAP = 2
CELL_SIZE_DEFAULT = 24
FONT_NAME = None  # default pygame font
TOAST_SECONDS = 10.0

# Colors
WHITE        = (255,255,255)
BG_TOP       = ( 24, 26, 32)
BG_BOT       = ( 36, 40, 48)
WALKABLE_GRAY= (209,213,219)
BLOCK_DARK   = ( 23, 23, 23)
START_GREEN  = ( 34,197, 94)
GOAL_RED     = (239, 68, 68)
PATH_BLUE    = ( 59,130,246)
VISITED_YEL  = (254,240,138)

CARD_BG      = (24,28,36,220)
CARD_HI      = (255,255,255,18)
TEXT_LIGHT   = (230,235,240)
ACCENT_GOLD  = (255,210,0)
TOAST_OK     = ( 46,139, 87,235)
TOAST_FAIL   = (160, 40, 40,235)


# ---------- Toast ----------
class Toast:
    def __init__(self, title: str, description: str = "", ok: bool = True, seconds: float = TOAST_SECONDS):
        self.title = title
        self.description = description
        self.ok = ok
        self.expires_at = time.time() + seconds

    @property
    def alive(self) -> bool:
        return time.time() < self.expires_at


def result_toast(result: SearchResult, label: str, elapsed_ms: float) -> Toast:
    if result.found:
        return Toast("Path found!", f"Running time: {elapsed_ms:.2f} ms ({label})")
    return Toast("No valid path found!", ok=False)


# ---------- Simple UI Button ----------
class UIButton:
    def __init__(self, label: str, rect: pygame.Rect, callback, *, enabled=None):
        self.label = label
        self.rect = rect
        self.callback = callback
        self.hover = False
        self._enabled = enabled  # optional predicate

    @property
    def enabled(self) -> bool:
        return self._enabled() if self._enabled else True

    def draw(self, screen: pygame.Surface, font: pygame.font.Font):
        base = pygame.Surface(self.rect.size, pygame.SRCALPHA)
        bg_idle     = (36, 40, 48, 220)
        bg_hover    = (46, 50, 60, 230)
        bg_disabled = (30, 32, 38, 160)

        if not self.enabled:
            bg = bg_disabled
        elif self.hover:
            bg = bg_hover
        else:
            bg = bg_idle

        pygame.draw.rect(base, bg, base.get_rect(), border_radius=10)

        # subtle highlight top band
        hi = pygame.Surface((self.rect.width, 18), pygame.SRCALPHA)
        pygame.draw.rect(hi, (255,255,255,20), hi.get_rect(), border_radius=10)
        base.blit(hi, (0,0))

        screen.blit(base, self.rect.topleft)

        color = (235,238,242) if self.enabled else (120,124,130)
        text = font.render(self.label, True, color)
        screen.blit(text, text.get_rect(center=self.rect.center))

    def handle_mouse(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEMOTION:
            self.hover = self.rect.collidepoint(event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                if self.enabled:
                    self.callback()
                return True
        return False


# ---------- Viewer ----------
class Viewer:
    def __init__(self, config: ViewerConfig):
        pygame.init()

        self.config = config
        self.rng = random.Random(config.seed)
        self.selection = Selection()
        self.grid = self._initial_grid()

        self.font_small = pygame.font.Font(FONT_NAME, 14)
        self.font = pygame.font.Font(FONT_NAME, 18)
        self.font_big = pygame.font.Font(FONT_NAME, 22)

        self.cell_size = self._auto_cell_size(self.grid)
        grid_px_w = GRID_MARGIN*2 + self.grid.width  * self.cell_size
        grid_px_h = GRID_MARGIN*2 + self.grid.height * self.cell_size
        win_w = grid_px_w + PANEL_W
        win_h = max(grid_px_h, 620)

        self.screen = pygame.display.set_mode((win_w, win_h), pygame.RESIZABLE)
        pygame.display.set_caption("A* Pathfinding")

        self._buttons: list[UIButton] = []
        self._layout(win_w, win_h)

        self.visited: set[Cell] = set()
        self.path: List[Cell] = []
        self._pending: List[Cell] = []       # visited cells not yet revealed
        self._pending_path: List[Cell] = []
        self._last_reveal_t = 0.0

        self.clock = pygame.time.Clock()
        self.speed = config.speed
        self.state = "Idle"
        self.toast: Optional[Toast] = None
        self._pending_toast: Optional[Toast] = None  # shown once the reveal drains
        self._last_metrics: Dict = {}

    def _initial_grid(self) -> Grid:
        if self.config.map_path is not None:
            loaded = load_map(self.config.map_path)
            self.selection = Selection(start=loaded.start, goal=loaded.goal)
            return loaded.grid
        return random_grid(self.config.width, self.config.height, self.config.ratio, self.rng)

    # ---------- layout ----------
    def _layout(self, win_w: int, win_h: int):
        """Compute integer cell_size that fits window and center the grid."""
        avail_w = max(1, win_w - PANEL_W - 2 * GRID_MARGIN)
        avail_h = max(1, win_h - 2 * GRID_MARGIN)

        cs_by_w = avail_w // self.grid.width
        cs_by_h = avail_h // self.grid.height
        self.cell_size = int(max(6, min(cs_by_w, cs_by_h)))

        grid_plate_w = self.grid.width  * self.cell_size + 2 * GRID_MARGIN
        grid_plate_h = self.grid.height * self.cell_size + 2 * GRID_MARGIN

        left_x = max(0, (win_w - (grid_plate_w + PANEL_W)) // 2)
        top_y  = max(0, (win_h - grid_plate_h) // 2)

        self.canvas_rect = pygame.Rect(left_x, top_y, grid_plate_w, grid_plate_h)
        self._grid_origin = (self.canvas_rect.x + GRID_MARGIN,
                             self.canvas_rect.y + GRID_MARGIN)
        self._right_band = pygame.Rect(self.canvas_rect.right, 0,
                                       max(PANEL_W, win_w - self.canvas_rect.right),
                                       win_h)
        self._build_buttons()

    def _auto_cell_size(self, grid: Grid) -> int:
        target_h = 720 - GRID_MARGIN*2
        return max(8, min(CELL_SIZE_DEFAULT, target_h // grid.height))

    def cell_at(self, pos: Tuple[int, int]) -> Optional[Cell]:
        ox, oy = self._grid_origin
        x, y = pos
        if x < ox or y < oy:
            return None
        cell = ((y - oy) // self.cell_size, (x - ox) // self.cell_size)
        return cell if self.grid.in_bounds(cell) else None

    # ---------- main loop ----------
    def run(self):
        while True:
            self._handle_events()
            self._tick_reveal()
            self._draw()
            self.clock.tick(60)

    @property
    def busy(self) -> bool:
        return bool(self._pending) or bool(self._pending_path)

    def _tick_reveal(self):
        if not self.busy:
            return
        now = time.time()
        interval = 1.0 / max(1, self.speed)
        due = int((now - self._last_reveal_t) / interval)
        if due <= 0:
            return
        self._last_reveal_t = now
        batch, self._pending = self._pending[:due], self._pending[due:]
        self.visited.update(batch)
        if not self._pending:
            self._finish_reveal()

    def _run_search(self, variant: str):
        if self.busy or not self.selection.ready:
            return
        self._clear_overlays()
        label = variant.capitalize()
        t0 = time.perf_counter()
        try:
            result = search(self.grid, self.selection.start, self.selection.goal, variant)
        except PathfindingError as ex:
            log.error("%s search failed: %s", label, ex)
            self.toast = Toast("Search failed", str(ex), ok=False)
            self.state = "Error"
            return
        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        log.info("%s search: %s in %.2f ms (%d expanded)", label, result.status,
                 elapsed_ms, len(result.visited))

        self._last_metrics = dict(result.metrics, elapsed_ms=elapsed_ms)
        self._pending = list(result.visited)
        self._pending_path = result.path or []
        self._last_reveal_t = time.time()
        self.state = f"Running ({label})"
        self._pending_toast = result_toast(result, label, elapsed_ms)
        if not self._pending:
            self._finish_reveal()

    def _finish_reveal(self):
        self.path = self._pending_path
        self._pending_path = []
        self.state = "Done" if self.path else "No path"
        if self._pending_toast is not None:
            self.toast, self._pending_toast = self._pending_toast, None
            self.toast.expires_at = time.time() + TOAST_SECONDS

    def _handle_events(self):
        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit(0)
            elif e.type == pygame.KEYDOWN:
                if e.key in (pygame.K_ESCAPE, pygame.K_q):
                    pygame.quit(); sys.exit(0)
                elif e.key == pygame.K_i:
                    self._run_search("iterative")
                elif e.key == pygame.K_r:
                    self._run_search("recursive")
                elif e.key == pygame.K_g:
                    self._regenerate()
                elif e.key == pygame.K_c:
                    self._clear_overlays()
                elif e.key in (pygame.K_PLUS, pygame.K_EQUALS):
                    self._bump_speed(+10)
                elif e.key in (pygame.K_MINUS, pygame.K_UNDERSCORE):
                    self._bump_speed(-10)
            elif e.type == pygame.VIDEORESIZE:
                self.screen = pygame.display.set_mode((e.w, e.h), pygame.RESIZABLE)
                self._layout(e.w, e.h)
            elif e.type in (pygame.MOUSEMOTION, pygame.MOUSEBUTTONDOWN):
                consumed = False
                for b in self._buttons:
                    consumed = b.handle_mouse(e) or consumed
                if not consumed and e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
                    self._click_cell(e.pos)

    def _click_cell(self, pos):
        if self.busy:
            return
        cell = self.cell_at(pos)
        if cell is None:
            return
        self.selection.click(cell)
        self._clear_overlays()

    def _regenerate(self):
        if self.busy:
            return
        self.grid = random_grid(self.config.width, self.config.height, self.config.ratio, self.rng)
        self.selection.clear()
        self._clear_overlays()
        self._layout(*self.screen.get_size())

    def _clear_overlays(self):
        self.visited.clear()
        self.path = []
        self._pending = []
        self._pending_path = []
        self._pending_toast = None
        self._last_metrics = {}
        self.state = "Idle"

    def _bump_speed(self, dv: int):
        self.speed = int(max(1, min(MAX_SPEED, self.speed + dv)))

    # ---------- drawing ----------
    def _draw(self):
        self._draw_backdrop()
        self._draw_grid()
        self._draw_metrics_and_buttons()
        self._draw_toast()
        pygame.display.flip()

    def _draw_backdrop(self):
        w, h = self.screen.get_size()
        for y in range(h):
            t = y / max(1, h-1)
            c = tuple(int(BG_TOP[i] + (BG_BOT[i]-BG_TOP[i]) * t) for i in range(3))
            pygame.draw.line(self.screen, c, (0, y), (w, y))

    def _cell_color(self, cell: Cell, path_cells: set) -> Tuple[int, int, int]:
        if cell == self.selection.start:
            return START_GREEN
        if cell == self.selection.goal:
            return GOAL_RED
        if cell in path_cells:
            return PATH_BLUE
        if cell in self.visited:
            return VISITED_YEL
        r, c = cell
        return WALKABLE_GRAY if self.grid.state(r, c) == CellState.WALKABLE else BLOCK_DARK

    def _draw_grid(self):
        cs = self.cell_size
        ox, oy = self._grid_origin
        gap = CELL_GAP if cs > 10 else 1
        path_cells = set(self.path)
        for row in range(self.grid.height):
            for col in range(self.grid.width):
                rect = pygame.Rect(ox + col*cs, oy + row*cs, cs - gap, cs - gap)
                pygame.draw.rect(self.screen, self._cell_color((row, col), path_cells),
                                 rect, border_radius=2)

    # ---------- buttons + metrics ----------
    def _build_buttons(self):
        self._buttons.clear()
        rb = self._right_band
        x = rb.x + 16
        y = rb.y + 230  # leaves space for metrics card above
        w = max(160, rb.width - 32)
        h = 38
        gap = 10

        can_run = lambda: self.selection.ready and not self.busy
        idle = lambda: not self.busy

        def add(label, cb, enabled=None):
            nonlocal y
            self._buttons.append(UIButton(label, pygame.Rect(x, y, w, h), cb, enabled=enabled))
            y += h + gap

        add("Iterative", lambda: self._run_search("iterative"), enabled=can_run)
        add("Recursive", lambda: self._run_search("recursive"), enabled=can_run)
        add("Regenerate Grid", self._regenerate, enabled=idle)
        add("Clear", self._clear_overlays, enabled=idle)

        minus_rect = pygame.Rect(x, y, (w-8)//2, h)
        plus_rect  = pygame.Rect(x + (w-8)//2 + 8, y, (w-8)//2, h)
        self._buttons.append(UIButton("Speed −", minus_rect, lambda: self._bump_speed(-10)))
        self._buttons.append(UIButton("Speed +", plus_rect,  lambda: self._bump_speed(+10)))

    def _draw_metrics_and_buttons(self):
        rb = self._right_band

        card_h = 210
        card = pygame.Surface((rb.width - 20, card_h), pygame.SRCALPHA)
        pygame.draw.rect(card, CARD_BG, card.get_rect(), border_radius=14)
        hi = pygame.Surface((card.get_width(), 24), pygame.SRCALPHA)
        pygame.draw.rect(hi, CARD_HI, hi.get_rect(), border_radius=14)
        card.blit(hi, (0,0))
        self.screen.blit(card, (rb.x + 10, rb.y + 10))

        x0 = rb.x + 24
        y0 = rb.y + 18

        def line(text, big=False, color=TEXT_LIGHT):
            nonlocal y0
            f = self.font_big if big else self.font
            surf = f.render(text, True, color)
            self.screen.blit(surf, (x0, y0))
            y0 += surf.get_height() + 6

        line("A* Pathfinding", big=True, color=ACCENT_GOLD)
        m = self._last_metrics
        line(f"Grid: {self.grid.height} x {self.grid.width}  ({self.config.ratio}% open)")
        line(f"Start: {self.selection.start or '-'}   Goal: {self.selection.goal or '-'}")
        line(f"Expanded: {m.get('popped', 0)}")
        line(f"Path Len: {m.get('path_len', 0)}")
        if "elapsed_ms" in m:
            line(f"Time: {m['elapsed_ms']:.2f} ms ({m.get('variant', '')})")
        line(f"State: {self.state}")
        line(f"Speed: {self.speed} cells/s")

        for b in self._buttons:
            b.draw(self.screen, self.font)

    def _draw_toast(self):
        if self.toast is None:
            return
        if not self.toast.alive:
            self.toast = None
            return
        w, h = self.screen.get_size()
        title = self.font.render(self.toast.title, True, WHITE)
        desc = self.font_small.render(self.toast.description, True, WHITE) if self.toast.description else None
        tw = max(title.get_width(), desc.get_width() if desc else 0) + 32
        th = title.get_height() + (desc.get_height() + 6 if desc else 0) + 24
        box = pygame.Surface((tw, th), pygame.SRCALPHA)
        pygame.draw.rect(box, TOAST_OK if self.toast.ok else TOAST_FAIL, box.get_rect(), border_radius=12)
        box.blit(title, (16, 12))
        if desc:
            box.blit(desc, (16, 12 + title.get_height() + 6))
        self.screen.blit(box, (w - tw - 16, h - th - 16))


# ---------- main ----------
def main(argv=None):
    configure_logging()
    try:
        config = resolve_config(argv)
        viewer = Viewer(config)
    except (PathfindingError, OSError) as ex:
        log.error("Failed to start viewer: %s", ex)
        sys.exit(1)
    viewer.run()

if __name__ == "__main__":
    main()
