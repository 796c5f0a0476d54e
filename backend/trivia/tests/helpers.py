"""Test builders for games, states and room events."""

from typing import Any

from trivia.logic.enums import GamePhase
from trivia.logic.models import Board, Category, Clue, Game, Player
from trivia.logic.state import GameState, create_initial_state
from trivia.messaging.events import RoomEvent

ROOM_ID = 7

# ============================================================================
# Game Builders
# ============================================================================

# Two rounds: round 0 is 1 category x 2 clues, round 1 is 1 category x 1 clue.
MOCK_GAME = Game(
    id="mock",
    title="Mock Game",
    boards=(
        Board(
            category_names=("Round 1, Category 1",),
            categories=(
                Category(
                    name="Round 1, Category 1",
                    clues=(
                        Clue(clue="a", answer="b", value=200),
                        Clue(clue="c", answer="d", value=400),
                    ),
                ),
            ),
        ),
        Board(
            category_names=("Round 2, Category 1",),
            categories=(
                Category(
                    name="Round 2, Category 1",
                    clues=(Clue(clue="e", answer="f", value=400),),
                ),
            ),
        ),
    ),
)


def make_game(num_categories: int = 2, clues_per_category: int = 3, num_rounds: int = 2) -> Game:
    """Create a rectangular game with predictable clue text ("r{round}c{col}q{row}")."""
    boards = []
    for round_number in range(num_rounds):
        categories = tuple(
            Category(
                name=f"Category {col}",
                clues=tuple(
                    Clue(
                        clue=f"r{round_number}c{col}q{row}",
                        answer=f"r{round_number}c{col}a{row}",
                        value=(row + 1) * 200 * (round_number + 1),
                    )
                    for row in range(clues_per_category)
                ),
            )
            for col in range(num_categories)
        )
        boards.append(Board(category_names=tuple(c.name for c in categories), categories=categories))
    return Game(id="generated", title="Generated", boards=tuple(boards))


# ============================================================================
# State and Event Builders
# ============================================================================


def create_game_state(
    game: Game = MOCK_GAME,
    *,
    phase: GamePhase = GamePhase.PREVIEW,
    active_clue: tuple[int, int] | None = None,
    players: tuple[Player, ...] = (),
    board_control: str | None = None,
) -> GameState:
    """Create a round-0 GameState with sensible defaults for testing."""
    state = create_initial_state(game)
    return state.model_copy(
        update={
            "phase": phase,
            "active_clue": active_clue,
            "players": players,
            "board_control": board_control,
        },
    )


def make_room_event(
    event_id: int,
    event_type: str,
    payload: Any,
    *,
    room_id: int = ROOM_ID,
) -> RoomEvent:
    return RoomEvent(
        id=event_id,
        timestamp=f"2024-01-01T00:00:{event_id:02d}Z",
        room_id=room_id,
        type=event_type,
        payload=payload,
    )


def join_event(event_id: int, user_id: str, name: str | None = None) -> RoomEvent:
    return make_room_event(event_id, "join", {"userId": user_id, "name": name or user_id.upper()})


def start_round_event(event_id: int, round_number: int) -> RoomEvent:
    return make_room_event(event_id, "start_round", {"round": round_number})


def choose_clue_event(event_id: int, user_id: str, i: int, j: int) -> RoomEvent:
    return make_room_event(event_id, "choose_clue", {"userId": user_id, "i": i, "j": j})
