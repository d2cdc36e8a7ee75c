"""
Action Effects - The five Action card effects.

Each effect is a plain function (game, player, context) held in the
fixed ACTION_EFFECTS lookup, keyed by ActionType. Effects run
synchronously when the card is played.

Every effect checks its context before touching the board, so a
rejected effect never leaves a partial mutation behind.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from .cards import ActionType, InfluenceCard, PatricianType, Player
from .errors import CardNotFoundError, MalformedInputError

if TYPE_CHECKING:
    from .game import Game

logger = logging.getLogger(__name__)


@dataclass
class ActionContext:
    """
    Parameters an Action card needs.

    - Assassination: patrician_type_1, card_index
    - Scout, Wrath of the Gods: patrician_type_1
    - Castling: both groups and both redistributed lists
    - Veto: draw_from_influence picks the replacement deck
    """
    patrician_type_1: PatricianType | None = None
    patrician_type_2: PatricianType | None = None
    card_index: int | None = None
    redistributed_cards_for_type_1: list[InfluenceCard] | None = None
    redistributed_cards_for_type_2: list[InfluenceCard] | None = None
    draw_from_influence: bool = True


@dataclass
class ActionRecord:
    """An Action card that was played, kept for a later Veto."""
    action_type: ActionType
    player: Player
    context: ActionContext = field(default_factory=ActionContext)


def _require_group(context: ActionContext, action_type: ActionType) -> PatricianType:
    if context.patrician_type_1 is None:
        raise MalformedInputError(f"{action_type.name} requires a target patrician group")
    if not isinstance(context.patrician_type_1, PatricianType):
        raise MalformedInputError(f"Unknown patrician group: {context.patrician_type_1}")
    return context.patrician_type_1


def assassination(game: Game, player: Player, context: ActionContext) -> None:
    """Remove one of the opponent's played cards by index and discard it."""
    patrician_type = _require_group(context, ActionType.ASSASSINATION)
    if context.card_index is None:
        raise MalformedInputError("ASSASSINATION requires a card index")
    opponent = player.opponent
    removed = game.ledger.remove_influence(patrician_type, opponent, context.card_index)
    game.discard(removed)
    logger.info(
        "%s assassinated %s's %s on %s",
        player.value, opponent.value, removed.card_id, patrician_type.value,
    )


def scout(game: Game, player: Player, context: ActionContext) -> None:
    """Turn the opponent's played cards on one group face up."""
    patrician_type = _require_group(context, ActionType.SCOUT)
    game.ledger.reveal_influence(patrician_type, player.opponent)


def wrath_of_the_gods(game: Game, player: Player, context: ActionContext) -> None:
    """Discard every played card on one group, for both players."""
    patrician_type = _require_group(context, ActionType.WRATH_OF_THE_GODS)
    for card in game.ledger.clear_influence(patrician_type):
        game.discard(card)


def castling(game: Game, player: Player, context: ActionContext) -> None:
    """
    Replace the acting player's played lists on two groups, face down.

    Nothing is discarded: the replacement lists are expected to account
    for the cards they supersede.
    """
    first = context.patrician_type_1
    second = context.patrician_type_2
    if first is None or second is None:
        raise MalformedInputError("CASTLING requires two patrician groups")
    for group in (first, second):
        if not isinstance(group, PatricianType):
            raise MalformedInputError(f"Unknown patrician group: {group}")
    if first == second:
        raise MalformedInputError("CASTLING requires two different patrician groups")
    cards_1 = context.redistributed_cards_for_type_1
    cards_2 = context.redistributed_cards_for_type_2
    if cards_1 is None or cards_2 is None:
        raise MalformedInputError("CASTLING requires a card list for each group")
    game.ledger.replace_influence(player, first, list(cards_1))
    game.ledger.replace_influence(player, second, list(cards_2))


def veto(game: Game, player: Player, context: ActionContext) -> None:
    """
    Veto the opponent's most recent Action card.

    The opponent's card is already on the discard pile; the veto marks
    it negated and hands it to the game's veto hook. The acting player
    then draws one replacement card.
    """
    record = game.last_action_of(player.opponent)
    if record is None:
        raise CardNotFoundError(f"{player.opponent.value} has no Action card to veto")
    game.record_veto(player, record)
    game.decks.draw(player, context.draw_from_influence)


ActionEffect = Callable[["Game", Player, ActionContext], None]

ACTION_EFFECTS: dict[ActionType, ActionEffect] = {
    ActionType.ASSASSINATION: assassination,
    ActionType.SCOUT: scout,
    ActionType.WRATH_OF_THE_GODS: wrath_of_the_gods,
    ActionType.CASTLING: castling,
    ActionType.VETO: veto,
}


def apply_effect(game: Game, player: Player, action_type: ActionType, context: ActionContext) -> None:
    ACTION_EFFECTS[action_type](game, player, context)
