"""
Tests for Action card effects.

Tests:
- Each of the five effects
- Context validation and rollback of rejected effects
- In-turn and out-of-turn Veto
"""

import pytest

from ..engine_core.cards import ActionCard, ActionType, InfluenceCard, InfluenceType, PatricianType, Player
from ..engine_core.effects import ACTION_EFFECTS, ActionContext
from ..engine_core.errors import CardNotFoundError, IllegalStateError, MalformedInputError
from ..engine_core.game import Game, TurnPhase

CAESAR = Player.CAESAR
CLEOPATRA = Player.CLEOPATRA
ONE = InfluenceCard(InfluenceType.ONE)
TWO = InfluenceCard(InfluenceType.TWO)
THREE = InfluenceCard(InfluenceType.THREE)
VETO = ActionCard(ActionType.VETO)


def _finish_turn(game: Game, player: Player) -> None:
    """Skip, vote on an empty group and draw."""
    game.skip_to_vote(player)
    game.execute_vote_of_confidence(player, PatricianType.CENSOR)
    game.draw_to_hand_limit(player, from_influence=True)


def test_every_action_type_has_an_effect():
    assert set(ACTION_EFFECTS) == set(ActionType)


class TestAssassination:
    """Tests for Assassination."""

    def test_removes_opponent_card(self, standard_game, give_action):
        game = standard_game
        give_action(game, CAESAR, ActionType.ASSASSINATION)

        game.play_card(
            CAESAR, "assassination",
            context=ActionContext(patrician_type_1=PatricianType.PRAETOR, card_index=0),
        )

        assert game.ledger.played_cards(PatricianType.PRAETOR, CLEOPATRA) == []
        assert game.discard_pile == [TWO, ActionCard(ActionType.ASSASSINATION)]
        assert game.turn_phase == TurnPhase.SECOND_CARD_SELECTION

    def test_bad_index_rolls_back(self, standard_game, give_action):
        game = standard_game
        give_action(game, CAESAR, ActionType.ASSASSINATION)
        hand_before = game.hand(CAESAR)

        with pytest.raises(CardNotFoundError):
            game.play_card(
                CAESAR, "assassination",
                context=ActionContext(patrician_type_1=PatricianType.PRAETOR, card_index=3),
            )

        assert game.hand(CAESAR) == hand_before
        assert game.discard_pile == []
        assert game.cards_played_this_turn == 0
        assert not game.action_card_played_this_turn
        assert game.turn_phase == TurnPhase.FIRST_CARD_SELECTION

    def test_missing_context_is_malformed(self, standard_game, give_action):
        game = standard_game
        give_action(game, CAESAR, ActionType.ASSASSINATION)
        with pytest.raises(MalformedInputError):
            game.play_card(CAESAR, "assassination")
        assert game.hand(CAESAR)[0] == ActionCard(ActionType.ASSASSINATION)


class TestScoutAndWrath:
    """Tests for Scout and Wrath of the Gods."""

    def test_scout_reveals_opponent_cards(self, standard_game, give_action):
        game = standard_game
        give_action(game, CAESAR, ActionType.SCOUT)

        game.play_card(CAESAR, "scout", context=ActionContext(patrician_type_1=PatricianType.PRAETOR))

        assert all(p.face_up for p in game.ledger.played_influence(PatricianType.PRAETOR, CLEOPATRA))
        assert not any(p.face_up for p in game.ledger.played_influence(PatricianType.PRAETOR, CAESAR))

    def test_wrath_clears_group(self, standard_game, give_action):
        game = standard_game
        give_action(game, CAESAR, ActionType.WRATH_OF_THE_GODS)

        game.play_card(
            CAESAR, "wrath_of_the_gods",
            context=ActionContext(patrician_type_1=PatricianType.PRAETOR),
        )

        for player in Player:
            assert game.ledger.played_influence(PatricianType.PRAETOR, player) == ()
        assert THREE in game.discard_pile
        assert TWO in game.discard_pile
        assert game.ledger.remaining(PatricianType.PRAETOR) == 5

    def test_raw_group_name_is_malformed(self, standard_game, give_action):
        game = standard_game
        give_action(game, CAESAR, ActionType.WRATH_OF_THE_GODS)
        hand = game.hand(CAESAR)

        with pytest.raises(MalformedInputError):
            game.play_card(CAESAR, "wrath_of_the_gods", context=ActionContext(patrician_type_1="praetor"))

        assert game.hand(CAESAR) == hand
        assert game.ledger.played_cards(PatricianType.PRAETOR, CLEOPATRA) == [TWO]
        assert game.discard_pile == []


class TestCastling:
    """Tests for Castling."""

    def test_replaces_own_lists(self, standard_game, give_action):
        game = standard_game
        give_action(game, CAESAR, ActionType.CASTLING)

        game.play_card(
            CAESAR, "castling",
            context=ActionContext(
                patrician_type_1=PatricianType.PRAETOR,
                patrician_type_2=PatricianType.CONSUL,
                redistributed_cards_for_type_1=[],
                redistributed_cards_for_type_2=[THREE],
            ),
        )

        assert game.ledger.played_cards(PatricianType.PRAETOR, CAESAR) == []
        assert game.ledger.played_cards(PatricianType.CONSUL, CAESAR) == [THREE]
        assert game.ledger.played_cards(PatricianType.PRAETOR, CLEOPATRA) == [TWO]
        assert game.discard_pile == [ActionCard(ActionType.CASTLING)]

    def test_same_group_twice_rejected(self, standard_game, give_action):
        game = standard_game
        give_action(game, CAESAR, ActionType.CASTLING)
        with pytest.raises(MalformedInputError):
            game.play_card(
                CAESAR, "castling",
                context=ActionContext(
                    patrician_type_1=PatricianType.PRAETOR,
                    patrician_type_2=PatricianType.PRAETOR,
                    redistributed_cards_for_type_1=[],
                    redistributed_cards_for_type_2=[],
                ),
            )
        assert game.ledger.played_cards(PatricianType.PRAETOR, CAESAR) == [THREE]

    def test_raw_group_name_rejected(self, standard_game, give_action):
        game = standard_game
        give_action(game, CAESAR, ActionType.CASTLING)
        with pytest.raises(MalformedInputError):
            game.play_card(
                CAESAR, "castling",
                context=ActionContext(
                    patrician_type_1=PatricianType.PRAETOR,
                    patrician_type_2="consul",
                    redistributed_cards_for_type_1=[],
                    redistributed_cards_for_type_2=[THREE],
                ),
            )
        assert game.ledger.played_cards(PatricianType.PRAETOR, CAESAR) == [THREE]
        assert game.ledger.played_cards(PatricianType.CONSUL, CAESAR) == []


class TestVeto:
    """Tests for the Veto card."""

    def test_veto_without_target_is_rejected(self, standard_game):
        game = standard_game
        hand_before = game.hand(CAESAR)
        with pytest.raises(CardNotFoundError):
            game.play_card(CAESAR, "veto")
        assert game.hand(CAESAR) == hand_before

    def test_veto_previous_turn_action(self, standard_game, give_action):
        game = standard_game
        give_action(game, CAESAR, ActionType.SCOUT)
        game.play_card(CAESAR, "scout", context=ActionContext(patrician_type_1=PatricianType.PRAETOR))
        _finish_turn(game, CAESAR)
        assert game.last_action_of(CAESAR) is not None

        game.play_card(CLEOPATRA, "veto", context=ActionContext(draw_from_influence=False))

        assert [r.action_type for r in game.vetoed_actions] == [ActionType.SCOUT]
        assert game.last_action_of(CAESAR) is None
        # Veto left the hand and one replacement came from the action deck
        assert len(game.hand(CLEOPATRA)) == 6
        assert game.decks.deck_counts(CLEOPATRA)["action"] == 8
        assert game.discard_pile[-1] == VETO

    def test_on_veto_hook(self):
        calls = []
        game = Game(seed=5, on_veto=lambda g, player, record: calls.append((player, record.action_type)))
        game.place_initial_influence(CAESAR, {PatricianType.PRAETOR: ONE})
        game.place_initial_influence(CLEOPATRA, {PatricianType.PRAETOR: ONE})
        game.decks.set_hand(CAESAR, [ActionCard(ActionType.SCOUT), TWO])
        game.play_card(CAESAR, "scout", context=ActionContext(patrician_type_1=PatricianType.PRAETOR))

        game.veto_pending_action(CLEOPATRA)

        assert calls == [(CLEOPATRA, ActionType.SCOUT)]

    def test_out_of_turn_veto(self, standard_game, give_action):
        game = standard_game
        give_action(game, CAESAR, ActionType.SCOUT)
        game.play_card(CAESAR, "scout", context=ActionContext(patrician_type_1=PatricianType.PRAETOR))
        assert game.pending_action is not None

        record = game.veto_pending_action(CLEOPATRA, from_influence=True)

        assert record.action_type == ActionType.SCOUT
        assert game.pending_action is None
        assert VETO not in game.hand(CLEOPATRA)
        assert len(game.hand(CLEOPATRA)) == 6
        assert game.discard_pile[-1] == VETO
        # The active player's turn carries on
        assert game.current_player is CAESAR
        assert game.turn_phase == TurnPhase.SECOND_CARD_SELECTION

    def test_active_player_cannot_veto(self, standard_game, give_action):
        game = standard_game
        give_action(game, CAESAR, ActionType.SCOUT)
        game.play_card(CAESAR, "scout", context=ActionContext(patrician_type_1=PatricianType.PRAETOR))
        with pytest.raises(IllegalStateError):
            game.veto_pending_action(CAESAR)

    def test_nothing_to_veto(self, standard_game):
        with pytest.raises(IllegalStateError):
            standard_game.veto_pending_action(CLEOPATRA)

    def test_veto_needs_veto_card(self, standard_game, give_action):
        game = standard_game
        give_action(game, CAESAR, ActionType.SCOUT)
        game.play_card(CAESAR, "scout", context=ActionContext(patrician_type_1=PatricianType.PRAETOR))
        game.decks.set_hand(CLEOPATRA, [ONE])
        with pytest.raises(CardNotFoundError):
            game.veto_pending_action(CLEOPATRA)
        assert game.pending_action is not None
