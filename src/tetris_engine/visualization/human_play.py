from __future__ import annotations

import argparse
import logging
from typing import Dict, Optional

import pygame

from tetris_engine.game import Action, GameConfig, ManualGravityClock, TetrisGame
from .renderer import Renderer
from .sound import ToneBank


KEY_TO_ACTION: Dict[int, Action] = {
    pygame.K_LEFT: Action.LEFT,
    pygame.K_RIGHT: Action.RIGHT,
    pygame.K_UP: Action.ROTATE,
    pygame.K_SPACE: Action.ROTATE,
    pygame.K_DOWN: Action.SOFT_DROP,
    pygame.K_RETURN: Action.HARD_DROP,
}


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play the falling-block game with the keyboard")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--cell_size", type=int, default=28)
    p.add_argument("--mute", action="store_true")
    p.add_argument("--verbose", action="store_true")
    return p


def run(argv: Optional[list[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    pygame.init()
    try:
        clock = pygame.time.Clock()
        gravity = ManualGravityClock()
        game = TetrisGame(GameConfig(random_seed=args.seed), scheduler=gravity)
        if not args.mute:
            game.add_listener(ToneBank())
        renderer = Renderer(cell_size=args.cell_size)
        screen = pygame.display.set_mode(renderer.window_size)
        pygame.display.set_caption("Tetris - Human Play")
        font = pygame.font.SysFont(None, 24)

        game.start()
        running = True
        while running:
            # Input handling
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.WINDOWFOCUSLOST:
                    game.stop()
                elif event.type == pygame.WINDOWFOCUSGAINED:
                    if not game.is_game_over:
                        game.start()
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_r:
                        game.restart()
                    else:
                        action = KEY_TO_ACTION.get(event.key)
                        if action is not None:
                            game.step(action)

            # Gravity; clock.tick returns the frame time in milliseconds
            gravity.advance(clock.tick(60) / 1000.0)
            renderer.draw(screen, game, font)
        game.stop()
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
