"""Pygame drawing of a GameSession: board, snake, food, obstacles, side panel, overlays."""
from abc import ABC, abstractmethod

import pygame

from .config import (
    BG, BOARD_PX, FOOD, GRID, GRID_SIZE, HEAD, OBSTACLE, SNAKE,
    TEXT, TEXT_DIM, TILE_SIZE, UI_DIM, WINDOW_H,
)


class Renderer(ABC):
    @abstractmethod
    def render(self, session):
        """Draw the current state of 'session'."""


def grid_to_px(cell):
    """Convert a (x, y) grid coordinate to a pygame.Rect in pixels."""
    x, y = cell
    return pygame.Rect(x * TILE_SIZE, y * TILE_SIZE, TILE_SIZE, TILE_SIZE)


def leaderboard_lines(entries):
    if not entries:
        return ["No scores yet"]
    return [f"{i}. {e.score:>3}  {e.name}" for i, e in enumerate(entries, start=1)]


class PygameRenderer(Renderer):
    def __init__(self, screen):
        self.screen = screen
        self.font = pygame.font.SysFont("consolas", 18, bold=True)
        self.font_small = pygame.font.SysFont("consolas", 15)
        self.font_big = pygame.font.SysFont("consolas", 26, bold=True)
        self.name_draft = None

    def render(self, session):
        self.screen.fill(BG)
        self.draw_grid()

        game = session.game
        if game.food is not None:
            r = grid_to_px(game.food).inflate(-6, -6)
            pygame.draw.ellipse(self.screen, FOOD, r)

        for cell in game.obstacles:
            pygame.draw.rect(self.screen, OBSTACLE, grid_to_px(cell).inflate(-4, -4))

        for i, cell in enumerate(game.snake):
            color = HEAD if i == 0 else SNAKE
            pygame.draw.rect(self.screen, color, grid_to_px(cell).inflate(-2, -2), border_radius=4)

        self.draw_panel(session)
        if session.overlay_visible:
            self.draw_overlay(session)

        pygame.display.flip()

    def draw_grid(self):
        for i in range(GRID_SIZE + 1):
            p = i * TILE_SIZE
            pygame.draw.line(self.screen, GRID, (p, 0), (p, BOARD_PX), 1)
            pygame.draw.line(self.screen, GRID, (0, p), (BOARD_PX, p), 1)

    def draw_text(self, text, pos, font=None, color=TEXT):
        surf = (font or self.font).render(text, True, color)
        self.screen.blit(surf, pos)
        return surf.get_height()

    def draw_panel(self, session):
        x, y = BOARD_PX + 14, 14
        cfg = session.config
        y += self.draw_text(f"Score: {session.game.score}", (x, y)) + 4
        y += self.draw_text(f"Best:  {session.high_score}", (x, y)) + 14
        y += self.draw_text(f"Speed: {session.speed_label}", (x, y), self.font_small) + 4
        obstacles = f"{cfg.obstacle_limit}" if cfg.obstacles_enabled else "off"
        y += self.draw_text(f"Obstacles: {obstacles}", (x, y), self.font_small) + 4
        if self.name_draft is not None:
            y += self.draw_text(f"Name: {self.name_draft}_", (x, y), self.font_small, HEAD) + 2
            y += self.draw_text("Enter save, Esc cancel", (x, y), self.font_small, TEXT_DIM) + 18
        else:
            y += self.draw_text(f"Player: {cfg.player_name}", (x, y), self.font_small) + 18

        y += self.draw_text("Leaderboard", (x, y)) + 6
        for line in leaderboard_lines(session.leaderboard):
            color = TEXT_DIM if not session.leaderboard else TEXT
            y += self.draw_text(line, (x, y), self.font_small, color) + 2

        help_lines = ["Arrows/WASD move", "P pause  R restart", "F give up  +/- speed",
                      "O obstacles  [ ] limit", "N edit name"]
        y = WINDOW_H - len(help_lines) * 18 - 10
        for line in help_lines:
            y += self.draw_text(line, (x, y), self.font_small, TEXT_DIM)

    def draw_overlay(self, session):
        overlay = pygame.Surface((BOARD_PX, BOARD_PX), pygame.SRCALPHA)
        overlay.fill(UI_DIM)
        self.screen.blit(overlay, (0, 0))
        lines = [session.message]
        if session.can_restart:
            lines.append("Press R or click to play again")
        for i, text in enumerate(lines):
            font = self.font_big if i == 0 else self.font
            surf = font.render(text, True, TEXT)
            if surf.get_width() > BOARD_PX - 20:
                surf = self.font_small.render(text, True, TEXT)
            rect = surf.get_rect(center=(BOARD_PX // 2, BOARD_PX // 2 + i * 36))
            self.screen.blit(surf, rect)
