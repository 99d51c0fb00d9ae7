from __future__ import annotations

from statemachine import State, StateMachine

from snakecalc.api.models import SnakeGame


def phase_of(game: SnakeGame) -> str:
    if game.active:
        return "running"
    # A stopped game keeps its body; only the zero record has none.
    return "over" if game.body else "idle"


class GameFSM(StateMachine):
    """Lifecycle guard around one SnakeGame.

    - idle: never started
    - running: accepting moves and calculator boosts
    - over: the snake died; only a restart leaves this state

    Restarting is allowed from every phase, including while running.
    """

    idle = State("idle", value="idle", initial=True)
    running = State("running", value="running")
    over = State("over", value="over")

    started = idle.to(running) | over.to(running) | running.to.itself()
    died = running.to(over)

    def __init__(self, game: SnakeGame):
        self.game = game
        super().__init__(start_value=phase_of(game))

    @property
    def is_running(self) -> bool:
        return self.current_state == self.running

    def sync_phase_to_model(self) -> None:
        self.game.active = self.is_running
