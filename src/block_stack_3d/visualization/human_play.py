from __future__ import annotations

import logging
from typing import Dict, Tuple

import pygame

from block_stack_3d.game import (
    MOVE_BACKWARD,
    MOVE_DOWN,
    MOVE_FORWARD,
    MOVE_LEFT,
    MOVE_RIGHT,
    Axis,
    BlockStackGame,
    FallTimer,
    GameState,
)
from .renderer import Renderer


KEY_TO_MOVE: Dict[int, Tuple[int, int, int]] = {
    pygame.K_LEFT: MOVE_LEFT,
    pygame.K_a: MOVE_LEFT,
    pygame.K_RIGHT: MOVE_RIGHT,
    pygame.K_d: MOVE_RIGHT,
    pygame.K_UP: MOVE_FORWARD,
    pygame.K_w: MOVE_FORWARD,
    pygame.K_DOWN: MOVE_BACKWARD,
    pygame.K_s: MOVE_BACKWARD,
    pygame.K_SPACE: MOVE_DOWN,
}

KEY_TO_ROTATION: Dict[int, Tuple[Axis, int]] = {
    pygame.K_q: (Axis.Y, 1),
    pygame.K_e: (Axis.Y, -1),
    pygame.K_r: (Axis.X, 1),
    pygame.K_t: (Axis.X, -1),
    pygame.K_f: (Axis.Z, 1),
    pygame.K_g: (Axis.Z, -1),
}


def handle_key(game: BlockStackGame, key: int) -> None:
    if key == pygame.K_RETURN:
        if game.state is GameState.PLAYING:
            game.pause_game()
        elif game.state is GameState.PAUSED:
            game.resume_game()
        else:
            game.start_game()
        return
    if game.state is not GameState.PLAYING:
        return
    if key in KEY_TO_MOVE:
        game.move_piece(KEY_TO_MOVE[key])
    elif key in KEY_TO_ROTATION:
        axis, direction = KEY_TO_ROTATION[key]
        game.rotate_piece(axis, direction)
    elif key == pygame.K_TAB:
        game.drop_piece()


def run() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    pygame.init()
    try:
        clock = pygame.time.Clock()
        game = BlockStackGame()
        timer = FallTimer(game)
        renderer = Renderer(cell_size=24)

        screen = pygame.display.set_mode(renderer.window_size(game.grid.shape))
        pygame.display.set_caption("Block Stack 3D")

        running = True
        while running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    else:
                        handle_key(game, event.key)

            timer.update(pygame.time.get_ticks())
            renderer.draw(screen, game.snapshot())
            clock.tick(60)
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
