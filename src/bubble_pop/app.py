#!/usr/bin/env python3
"""
Bubble Pop
==========
Pop colored bubbles before the clock runs out. Popping the same color
twice in a row scores 1.5x. The best ten scores are kept.

Requirements:
    pip install pygame

Run:
    python -m bubble_pop

Controls:
    - Type your name and press Enter (or click Start) to play
    - Click a bubble to pop it
    - Press 'Esc' to leave a panel, 'Q' to quit from the menu
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

import pygame

from .config import (
    ACCENT_COLOR,
    BEST_COLOR,
    BG_BOTTOM_COLOR,
    BG_TOP_COLOR,
    BUTTON_COLOR,
    BUTTON_DISABLED_COLOR,
    BUTTON_HOVER_COLOR,
    COMBO_COLOR,
    DATA_DIR,
    FPS,
    GAME_DURATION_RANGE,
    HUD_COLOR,
    HUD_HEIGHT,
    INPUT_BG_COLOR,
    LOG_LEVEL,
    MAX_BUBBLES_RANGE,
    PANEL_COLOR,
    POPUP_DURATION,
    POPUP_RISE,
    TEXT_COLOR,
    TICK_INTERVAL_MS,
    WINDOW_HEIGHT,
    WINDOW_WIDTH,
)
from .controller import RoundController, create_controller
from .models import Bubble, LeaderboardEntry, RoundPhase, RoundSnapshot
from .storage import JsonFileStore
from .ticks import IntervalTickSource

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 15


# =============================================================================
# ANIMATIONS
# =============================================================================

@dataclass
class Animation:
    """Base animation class."""
    start_time: int
    duration: int

    def progress(self, current_time: int) -> float:
        """Returns animation progress from 0.0 to 1.0."""
        elapsed = current_time - self.start_time
        return max(0.0, min(1.0, elapsed / self.duration))

    def is_complete(self, current_time: int) -> bool:
        return self.progress(current_time) >= 1.0


@dataclass
class ScorePopup(Animation):
    """Floating '+N' shown where a bubble was popped."""
    x: float
    y: float
    points: int
    color: Tuple[int, int, int]


def pop_with_popup(
    controller: RoundController,
    index: int,
    current_time: int
) -> Optional[ScorePopup]:
    """
    Pop a bubble and build its floating score. The popup shows the
    previewed points, taken before the pop changes the combo state.
    """
    points = controller.preview_points(index)
    if points is None:
        return None
    bubble = controller.snapshot().bubbles[index]
    if controller.pop(index) is None:
        return None
    return ScorePopup(
        start_time=current_time,
        duration=POPUP_DURATION,
        x=bubble.x,
        y=bubble.y + HUD_HEIGHT,
        points=points,
        color=bubble.color.rgb
    )


class Panel(Enum):
    """Which menu panel is open while idle."""
    MENU = "menu"
    SETTINGS = "settings"
    HIGH_SCORES = "high_scores"


# =============================================================================
# RENDERER
# =============================================================================

class Renderer:
    """Handles all game rendering."""

    def __init__(self, screen: pygame.Surface):
        self.screen = screen
        self.fonts = self._load_fonts()
        self.background = self._build_background()

    def _load_fonts(self) -> Dict[str, pygame.font.Font]:
        pygame.font.init()
        return {
            'huge': pygame.font.Font(None, 160),
            'title': pygame.font.Font(None, 72),
            'large': pygame.font.Font(None, 40),
            'medium': pygame.font.Font(None, 30),
            'small': pygame.font.Font(None, 24),
        }

    def _build_background(self) -> pygame.Surface:
        """Vertical gradient, drawn once."""
        surface = pygame.Surface((WINDOW_WIDTH, WINDOW_HEIGHT))
        for y in range(WINDOW_HEIGHT):
            t = y / WINDOW_HEIGHT
            color = tuple(
                int(top + (bottom - top) * t)
                for top, bottom in zip(BG_TOP_COLOR, BG_BOTTOM_COLOR)
            )
            pygame.draw.line(surface, color, (0, y), (WINDOW_WIDTH, y))
        return surface

    def clear(self) -> None:
        self.screen.blit(self.background, (0, 0))

    def _text(self, text: str, font: str, color, **position) -> pygame.Rect:
        surface = self.fonts[font].render(text, True, color)
        rect = surface.get_rect(**position)
        self.screen.blit(surface, rect)
        return rect

    def _draw_button(self, rect: pygame.Rect, label: str, enabled: bool = True) -> pygame.Rect:
        if not enabled:
            color = BUTTON_DISABLED_COLOR
        elif rect.collidepoint(pygame.mouse.get_pos()):
            color = BUTTON_HOVER_COLOR
        else:
            color = BUTTON_COLOR
        pygame.draw.rect(self.screen, color, rect, border_radius=12)
        pygame.draw.rect(self.screen, TEXT_COLOR, rect, 2, border_radius=12)
        self._text(label, 'medium', TEXT_COLOR, center=rect.center)
        return rect

    def _draw_panel(self, width: int, height: int) -> pygame.Rect:
        overlay = pygame.Surface((WINDOW_WIDTH, WINDOW_HEIGHT), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 140))
        self.screen.blit(overlay, (0, 0))

        rect = pygame.Rect(0, 0, width, height)
        rect.center = (WINDOW_WIDTH // 2, WINDOW_HEIGHT // 2)
        pygame.draw.rect(self.screen, PANEL_COLOR, rect, border_radius=20)
        pygame.draw.rect(self.screen, ACCENT_COLOR, rect, 2, border_radius=20)
        return rect

    def _draw_bubble(self, bubble: Bubble) -> None:
        """Shaded circle with a small highlight, like a glossy bubble."""
        center_x = int(bubble.x)
        center_y = int(bubble.y) + HUD_HEIGHT
        radius = int(bubble.diameter // 2)
        color = bubble.color.rgb

        for i in range(radius, 0, -2):
            ratio = i / radius
            shade = tuple(
                min(255, int(c + (255 - c) * (1 - ratio) * 0.5)) for c in color
            )
            pygame.draw.circle(self.screen, shade, (center_x, center_y), i)

        pygame.draw.circle(self.screen, (255, 255, 255), (center_x, center_y), radius, 2)
        pygame.draw.circle(
            self.screen,
            (255, 255, 255),
            (center_x - radius // 3, center_y - radius // 3),
            max(1, radius // 5)
        )

    def _draw_scores_list(self, entries: Sequence[LeaderboardEntry], top: int) -> None:
        if not entries:
            self._text("No scores yet", 'medium', TEXT_COLOR, centerx=WINDOW_WIDTH // 2, y=top)
            return
        for i, entry in enumerate(entries):
            line = f"{i + 1:>2}. {entry.name[:MAX_NAME_LENGTH]:<15} {entry.score:>6}"
            self._text(line, 'small', TEXT_COLOR, centerx=WINDOW_WIDTH // 2, y=top + i * 24)

    def draw_menu(self, name_text: str, can_start: bool) -> Dict[str, pygame.Rect]:
        """Title, name entry and menu buttons. Returns button rects."""
        self._text("BubblePop", 'title', TEXT_COLOR, centerx=WINDOW_WIDTH // 2, y=90)

        input_rect = pygame.Rect(0, 0, 420, 50)
        input_rect.center = (WINDOW_WIDTH // 2, 260)
        pygame.draw.rect(self.screen, INPUT_BG_COLOR, input_rect, border_radius=15)
        pygame.draw.rect(self.screen, TEXT_COLOR, input_rect, 2, border_radius=15)
        if name_text:
            self._text(name_text + "_", 'medium', TEXT_COLOR, midleft=(input_rect.x + 15, input_rect.centery))
        else:
            self._text("Enter your name", 'medium', BUTTON_DISABLED_COLOR,
                       midleft=(input_rect.x + 15, input_rect.centery))

        start = pygame.Rect(0, 0, 220, 55)
        start.center = (WINDOW_WIDTH // 2, 350)
        settings = pygame.Rect(0, 0, 170, 45)
        settings.center = (WINDOW_WIDTH // 2 - 100, 430)
        scores = pygame.Rect(0, 0, 170, 45)
        scores.center = (WINDOW_WIDTH // 2 + 100, 430)

        return {
            'start': self._draw_button(start, "Start Game", can_start),
            'settings': self._draw_button(settings, "Settings"),
            'high_scores': self._draw_button(scores, "High Scores"),
        }

    def draw_settings(self, duration: int, max_bubbles: int) -> Dict[str, pygame.Rect]:
        """Settings panel with steppers. Returns button rects."""
        panel = self._draw_panel(520, 400)
        self._text("Settings", 'large', ACCENT_COLOR, centerx=panel.centerx, y=panel.y + 25)

        buttons = {}
        rows = [
            ('duration', f"Game Duration: {duration} s", panel.y + 110),
            ('max_bubbles', f"Maximum Bubbles: {max_bubbles}", panel.y + 180),
        ]
        for key, label, y in rows:
            self._text(label, 'medium', TEXT_COLOR, midleft=(panel.x + 40, y))
            minus = pygame.Rect(panel.right - 140, y - 20, 40, 40)
            plus = pygame.Rect(panel.right - 80, y - 20, 40, 40)
            buttons[key + '_down'] = self._draw_button(minus, "-")
            buttons[key + '_up'] = self._draw_button(plus, "+")

        low, high = GAME_DURATION_RANGE
        self._text(f"Game duration must be between {low} and {high} seconds", 'small',
                   TEXT_COLOR, centerx=panel.centerx, y=panel.y + 230)
        low, high = MAX_BUBBLES_RANGE
        self._text(f"Maximum bubbles must be between {low} and {high}", 'small',
                   TEXT_COLOR, centerx=panel.centerx, y=panel.y + 255)

        save = pygame.Rect(0, 0, 160, 45)
        save.center = (panel.centerx - 90, panel.bottom - 50)
        back = pygame.Rect(0, 0, 160, 45)
        back.center = (panel.centerx + 90, panel.bottom - 50)
        buttons['save'] = self._draw_button(save, "Save")
        buttons['back'] = self._draw_button(back, "Back")
        return buttons

    def draw_high_scores(self, entries: Sequence[LeaderboardEntry]) -> Dict[str, pygame.Rect]:
        panel = self._draw_panel(460, 420)
        self._text("High Scores", 'large', ACCENT_COLOR, centerx=panel.centerx, y=panel.y + 25)
        self._draw_scores_list(entries, panel.y + 80)

        back = pygame.Rect(0, 0, 160, 45)
        back.center = (panel.centerx, panel.bottom - 40)
        return {'back': self._draw_button(back, "Back")}

    def draw_countdown(self, number: int) -> None:
        self._text(str(number), 'huge', TEXT_COLOR, center=(WINDOW_WIDTH // 2, WINDOW_HEIGHT // 2))

    def draw_hud(self, snapshot: RoundSnapshot) -> None:
        pygame.draw.rect(self.screen, HUD_COLOR, (0, 0, WINDOW_WIDTH, HUD_HEIGHT))
        self._text(f"Score: {snapshot.score}", 'medium', TEXT_COLOR, midleft=(20, HUD_HEIGHT // 2))
        if snapshot.best_score is not None:
            self._text(f"Best: {snapshot.best_score}", 'medium', BEST_COLOR,
                       center=(WINDOW_WIDTH // 2, HUD_HEIGHT // 2))
        self._text(f"Time: {snapshot.time_remaining}", 'medium', TEXT_COLOR,
                   midright=(WINDOW_WIDTH - 20, HUD_HEIGHT // 2))

        if snapshot.combo_streak > 0:
            self._text(f"Combo x{snapshot.combo_streak + 1}", 'medium', COMBO_COLOR,
                       center=(WINDOW_WIDTH // 2, HUD_HEIGHT + 25))

    def draw_bubbles(self, bubbles: Sequence[Bubble]) -> None:
        for bubble in bubbles:
            self._draw_bubble(bubble)

    def draw_popups(self, popups: Sequence[ScorePopup], current_time: int) -> None:
        for popup in popups:
            progress = popup.progress(current_time)
            surface = self.fonts['large'].render(f"+{popup.points}", True, popup.color)
            surface.set_alpha(int(255 * (1.0 - progress)))
            rect = surface.get_rect(center=(int(popup.x), int(popup.y - POPUP_RISE * progress)))
            self.screen.blit(surface, rect)

    def draw_game_over(self, snapshot: RoundSnapshot) -> Dict[str, pygame.Rect]:
        panel = self._draw_panel(480, 520)
        self._text("Game Over!", 'title', ACCENT_COLOR, centerx=panel.centerx, y=panel.y + 20)
        self._text(f"Your Score: {snapshot.score}", 'large', TEXT_COLOR,
                   centerx=panel.centerx, y=panel.y + 90)
        self._text("High Scores", 'medium', TEXT_COLOR, centerx=panel.centerx, y=panel.y + 140)
        self._draw_scores_list(snapshot.leaderboard, panel.y + 170)

        new_game = pygame.Rect(0, 0, 180, 50)
        new_game.center = (panel.centerx, panel.bottom - 40)
        return {'new_game': self._draw_button(new_game, "New Game")}


# =============================================================================
# INPUT HANDLER
# =============================================================================

class InputHandler:
    """Handles user input."""

    @staticmethod
    def bubble_at(bubbles: Sequence[Bubble], pos: Tuple[int, int]) -> Optional[int]:
        """
        Index of the bubble under a window position, or None.
        Later bubbles are drawn on top, so they win.
        """
        x, y = pos[0], pos[1] - HUD_HEIGHT
        for index in range(len(bubbles) - 1, -1, -1):
            if bubbles[index].contains(x, y):
                return index
        return None

    @staticmethod
    def step(value: int, delta: int, bounds: Tuple[int, int]) -> int:
        low, high = bounds
        return max(low, min(high, value + delta))


# =============================================================================
# GAME CONTROLLER
# =============================================================================

class Game:
    """Main game loop wiring pygame to the round controller."""

    def __init__(self, data_dir: str = DATA_DIR):
        pygame.init()
        pygame.display.set_caption("BubblePop")

        self.screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
        self.clock = pygame.time.Clock()
        self.renderer = Renderer(self.screen)
        self.input_handler = InputHandler()

        self.ticker = IntervalTickSource(TICK_INTERVAL_MS)
        self.controller = create_controller(JsonFileStore(data_dir), tick_source=self.ticker)
        self.snapshot = self.controller.snapshot()
        self.controller.subscribe(self._on_snapshot)

        self.panel = Panel.MENU
        self.name_text = ""
        self.draft_duration = self.snapshot.settings.game_duration
        self.draft_max_bubbles = self.snapshot.settings.max_bubbles
        self.popups: List[ScorePopup] = []
        self.buttons: Dict[str, pygame.Rect] = {}
        self.running = True
        logger.info("using data directory %s", data_dir)

    def _on_snapshot(self, snapshot: RoundSnapshot) -> None:
        self.snapshot = snapshot

    def handle_events(self) -> None:
        """Process all pending events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._handle_click(event.pos)

    def _handle_key(self, event: pygame.event.Event) -> None:
        phase = self.snapshot.phase
        if phase is RoundPhase.OVER and event.key == pygame.K_RETURN:
            self._new_game()
            return
        if phase is not RoundPhase.IDLE:
            return

        if self.panel is not Panel.MENU:
            if event.key == pygame.K_ESCAPE:
                self.panel = Panel.MENU
            return

        if event.key == pygame.K_RETURN:
            self.controller.begin_countdown(self.name_text)
        elif event.key == pygame.K_BACKSPACE:
            self.name_text = self.name_text[:-1]
        elif event.key == pygame.K_q and not self.name_text:
            self.running = False
        elif len(self.name_text) < MAX_NAME_LENGTH and event.unicode.isprintable():
            self.name_text += event.unicode

    def _clicked(self, pos: Tuple[int, int]) -> Optional[str]:
        for name, rect in self.buttons.items():
            if rect.collidepoint(pos):
                return name
        return None

    def _handle_click(self, pos: Tuple[int, int]) -> None:
        phase = self.snapshot.phase

        if phase is RoundPhase.ACTIVE:
            index = self.input_handler.bubble_at(self.snapshot.bubbles, pos)
            if index is None:
                return
            popup = pop_with_popup(self.controller, index, pygame.time.get_ticks())
            if popup is not None:
                self.popups.append(popup)
            return

        button = self._clicked(pos)
        if button is None:
            return

        if phase is RoundPhase.OVER:
            if button == 'new_game':
                self._new_game()
        elif self.panel is Panel.MENU:
            self._handle_menu_button(button)
        elif self.panel is Panel.SETTINGS:
            self._handle_settings_button(button)
        elif button == 'back':
            self.panel = Panel.MENU

    def _handle_menu_button(self, button: str) -> None:
        if button == 'start':
            self.controller.begin_countdown(self.name_text)
        elif button == 'settings':
            self.draft_duration = self.snapshot.settings.game_duration
            self.draft_max_bubbles = self.snapshot.settings.max_bubbles
            self.panel = Panel.SETTINGS
        elif button == 'high_scores':
            self.panel = Panel.HIGH_SCORES

    def _handle_settings_button(self, button: str) -> None:
        steps = {
            'duration_down': ('draft_duration', -1, GAME_DURATION_RANGE),
            'duration_up': ('draft_duration', 1, GAME_DURATION_RANGE),
            'max_bubbles_down': ('draft_max_bubbles', -1, MAX_BUBBLES_RANGE),
            'max_bubbles_up': ('draft_max_bubbles', 1, MAX_BUBBLES_RANGE),
        }
        if button in steps:
            attr, delta, bounds = steps[button]
            setattr(self, attr, self.input_handler.step(getattr(self, attr), delta, bounds))
        elif button == 'save':
            if self.controller.update_settings(self.draft_duration, self.draft_max_bubbles):
                self.controller.save_settings()
            self.panel = Panel.MENU
        elif button == 'back':
            self.panel = Panel.MENU

    def _new_game(self) -> None:
        self.controller.reset()
        self.panel = Panel.MENU
        self.popups = []

    def update(self, dt: int) -> None:
        """Advance the round clock and expire finished popups."""
        self.ticker.update(dt)
        current_time = pygame.time.get_ticks()
        self.popups = [p for p in self.popups if not p.is_complete(current_time)]

    def render(self) -> None:
        """Render the current game state."""
        self.renderer.clear()
        snapshot = self.snapshot
        self.buttons = {}

        if snapshot.phase is RoundPhase.IDLE:
            self.buttons = self.renderer.draw_menu(self.name_text, bool(self.name_text.strip()))
            if self.panel is Panel.SETTINGS:
                self.buttons = self.renderer.draw_settings(self.draft_duration, self.draft_max_bubbles)
            elif self.panel is Panel.HIGH_SCORES:
                self.buttons = self.renderer.draw_high_scores(snapshot.leaderboard)
        elif snapshot.phase is RoundPhase.COUNTDOWN:
            self.renderer.draw_countdown(snapshot.countdown)
        elif snapshot.phase is RoundPhase.ACTIVE:
            self.renderer.draw_bubbles(snapshot.bubbles)
            self.renderer.draw_hud(snapshot)
            self.renderer.draw_popups(self.popups, pygame.time.get_ticks())
        else:
            self.buttons = self.renderer.draw_game_over(snapshot)

        pygame.display.flip()

    def run(self) -> None:
        """Main game loop."""
        while self.running:
            dt = self.clock.tick(FPS)
            self.handle_events()
            self.update(dt)
            self.render()

        pygame.quit()


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def main():
    """Main entry point."""
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    print("=" * 50)
    print("BubblePop")
    print("=" * 50)
    print("\nControls:")
    print("  - Type your name, press Enter to start")
    print("  - Click bubbles to pop them")
    print("  - Same color twice in a row scores 1.5x")
    print(f"\nScores and settings are saved in {DATA_DIR}")
    print("=" * 50)

    game = Game()
    game.run()


if __name__ == "__main__":
    main()
