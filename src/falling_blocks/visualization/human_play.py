from __future__ import annotations

import argparse
import logging
import os
from typing import Dict

import pygame

from falling_blocks.game import Command, GameConfig, GameEngine
from falling_blocks.storage import HighScoreStore
from .renderer import CellSize, Renderer, RenderSettings

logger = logging.getLogger(__name__)

KEY_TO_COMMAND: Dict[int, Command] = {
    pygame.K_LEFT: Command.MOVE_LEFT,
    pygame.K_RIGHT: Command.MOVE_RIGHT,
    pygame.K_UP: Command.ROTATE,
    pygame.K_DOWN: Command.SOFT_DROP,
    pygame.K_SPACE: Command.HARD_DROP,
}

DEFAULT_SCORE_FILE = os.path.join(os.path.expanduser("~"), ".falling_blocks", "highscore.json")


def run(settings: RenderSettings | None = None, score_file: str = DEFAULT_SCORE_FILE,
        config: GameConfig | None = None) -> None:
    store = HighScoreStore(score_file)
    engine = GameEngine(config)
    engine.high_score = store.load()
    state = engine.reset()

    pygame.init()
    try:
        clock = pygame.time.Clock()
        renderer = Renderer(settings)
        screen = pygame.display.set_mode(renderer.window_size(state))
        pygame.display.set_caption("Falling Blocks")

        last_tick = pygame.time.get_ticks()
        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_RETURN:
                        state = engine.start(state)
                        last_tick = pygame.time.get_ticks()
                    elif event.key == pygame.K_r:
                        state = engine.reset(state)
                    elif event.key == pygame.K_p:
                        state = engine.pause_toggle(state)
                        last_tick = pygame.time.get_ticks()
                    elif event.key == pygame.K_g:
                        renderer.settings.ghost_enabled = not renderer.settings.ghost_enabled
                    else:
                        command = KEY_TO_COMMAND.get(event.key)
                        if command is not None:
                            state, events = engine.step(state, command)
                            store.record(events)

            # Gravity: ticks are only scheduled while the game accepts input
            now = pygame.time.get_ticks()
            if state.accepts_input and now - last_tick >= engine.drop_interval(state):
                state, events = engine.step(state, Command.TICK)
                store.record(events)
                last_tick = now

            renderer.draw(screen, state, engine.ghost_position(state))
            clock.tick(60)
    finally:
        pygame.quit()


def main() -> None:
    p = argparse.ArgumentParser(description="Play Falling Blocks")
    p.add_argument("--cell-size", choices=[c.name.lower() for c in CellSize], default="medium")
    p.add_argument("--no-ghost", action="store_true")
    p.add_argument("--score-file", type=str, default=DEFAULT_SCORE_FILE)
    p.add_argument("--width", type=int, default=10)
    p.add_argument("--height", type=int, default=20)
    p.add_argument("--log-level", type=str, default="INFO")
    args = p.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    settings = RenderSettings(ghost_enabled=not args.no_ghost, cell_size=CellSize[args.cell_size.upper()])
    run(settings, args.score_file, GameConfig(width=args.width, height=args.height))


if __name__ == "__main__":  # pragma: no cover
    main()
