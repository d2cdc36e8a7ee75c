"""
Tests for the game state machine.

Tests:
- Initial influence placement
- Turn phases and per-turn limits
- Vote of Confidence through the game
- Draw phase and turn hand-off
- Rejected calls leave the game unchanged
"""

import pytest

from ..engine_core.cards import ActionType, InfluenceCard, InfluenceType, PatricianType, Player
from ..engine_core.decks import MAX_HAND_SIZE
from ..engine_core.effects import ActionContext
from ..engine_core.errors import CardNotFoundError, IllegalStateError, MalformedInputError
from ..engine_core.game import Game, GameMode, TurnPhase

CAESAR = Player.CAESAR
CLEOPATRA = Player.CLEOPATRA
ONE = InfluenceCard(InfluenceType.ONE)
TWO = InfluenceCard(InfluenceType.TWO)
THREE = InfluenceCard(InfluenceType.THREE)
FIVE = InfluenceCard(InfluenceType.FIVE)


def _snapshot(game: Game):
    return (
        game.mode,
        game.turn_phase,
        game.current_player,
        game.cards_played_this_turn,
        game.action_card_played_this_turn,
        {player: game.hand(player) for player in Player},
        {
            (t, player): game.ledger.played_influence(t, player)
            for t in PatricianType
            for player in Player
        },
        game.ledger.board_state(),
        list(game.discard_pile),
    )


class TestInitialPlacement:
    """Tests for initial influence placement."""

    def test_new_game(self, game):
        assert game.mode == GameMode.INITIAL_INFLUENCE_PLACEMENT
        assert game.current_player is CAESAR
        assert game.is_waiting_for_initial_influence()
        assert len(game.hand(CAESAR)) == MAX_HAND_SIZE

    def test_placement_is_face_down(self, game):
        game.place_initial_influence(CAESAR, {PatricianType.PRAETOR: THREE, PatricianType.CONSUL: ONE})

        played = game.ledger.played_influence(PatricianType.PRAETOR, CAESAR)
        assert [p.card for p in played] == [THREE]
        assert not played[0].face_up
        assert len(game.hand(CAESAR)) == MAX_HAND_SIZE - 2
        assert game.current_player is CLEOPATRA
        assert game.mode == GameMode.INITIAL_INFLUENCE_PLACEMENT

    def test_second_placement_starts_standard_play(self, standard_game):
        game = standard_game
        assert game.mode == GameMode.STANDARD_PLAY
        assert game.turn_phase == TurnPhase.FIRST_CARD_SELECTION
        assert game.current_player is CAESAR
        assert game.turn_number == 1
        # Fresh starting hands, placed cards stay on the board
        assert len(game.hand(CAESAR)) == MAX_HAND_SIZE
        assert len(game.hand(CLEOPATRA)) == MAX_HAND_SIZE
        assert game.ledger.played_cards(PatricianType.PRAETOR, CLEOPATRA) == [TWO]

    def test_placing_twice_is_rejected(self, game):
        game.place_initial_influence(CAESAR, {PatricianType.PRAETOR: THREE})
        with pytest.raises(IllegalStateError):
            game.place_initial_influence(CAESAR, {PatricianType.AEDILE: ONE})

    def test_placing_out_of_turn_is_rejected(self, game):
        with pytest.raises(IllegalStateError):
            game.place_initial_influence(CLEOPATRA, {PatricianType.PRAETOR: THREE})

    def test_philosopher_not_allowed(self, game):
        with pytest.raises(MalformedInputError):
            game.place_initial_influence(
                CAESAR, {PatricianType.PRAETOR: InfluenceCard(InfluenceType.PHILOSOPHER)}
            )

    def test_cards_not_held_leave_hand_untouched(self, game):
        before = _snapshot(game)
        with pytest.raises(CardNotFoundError):
            game.place_initial_influence(CAESAR, {PatricianType.PRAETOR: THREE, PatricianType.AEDILE: THREE})
        assert _snapshot(game) == before
        assert not game.has_placed_initial_influence(CAESAR)

    def test_empty_placement_rejected(self, game):
        with pytest.raises(MalformedInputError):
            game.place_initial_influence(CAESAR, {})

    def test_no_standard_play_during_placement(self, game):
        with pytest.raises(IllegalStateError):
            game.play_card(CAESAR, "one", PatricianType.PRAETOR)
        with pytest.raises(IllegalStateError):
            game.skip_to_vote(CAESAR)


class TestCardSelection:
    """Tests for the card-selection phases."""

    def test_first_card_face_down_second_face_up(self, standard_game):
        game = standard_game
        game.play_card(CAESAR, "one", PatricianType.CONSUL)
        assert game.turn_phase == TurnPhase.SECOND_CARD_SELECTION
        game.play_card(CAESAR, "two", PatricianType.CONSUL)

        played = game.ledger.played_influence(PatricianType.CONSUL, CAESAR)
        assert [p.face_up for p in played] == [False, True]
        assert game.cards_played_this_turn == 2
        assert not game.can_play_more_cards()

    def test_third_card_rejected(self, standard_game):
        game = standard_game
        game.play_card(CAESAR, "one", PatricianType.CONSUL)
        game.play_card(CAESAR, "two", PatricianType.CONSUL)
        before = _snapshot(game)

        with pytest.raises(IllegalStateError):
            game.play_card(CAESAR, "four", PatricianType.CONSUL)
        assert _snapshot(game) == before

    def test_wrong_player_rejected(self, standard_game):
        before = _snapshot(standard_game)
        with pytest.raises(IllegalStateError):
            standard_game.play_card(CLEOPATRA, "one", PatricianType.CONSUL)
        assert _snapshot(standard_game) == before

    def test_card_not_in_hand(self, standard_game):
        with pytest.raises(CardNotFoundError):
            standard_game.play_card(CAESAR, "philosopher", PatricianType.CONSUL)

    def test_influence_needs_a_group(self, standard_game):
        before = _snapshot(standard_game)
        with pytest.raises(MalformedInputError):
            standard_game.play_card(CAESAR, "one")
        assert _snapshot(standard_game) == before

    def test_one_action_per_turn(self, standard_game, give_action):
        game = standard_game
        give_action(game, CAESAR, ActionType.SCOUT)
        give_action(game, CAESAR, ActionType.SCOUT)
        game.play_card(CAESAR, "scout", context=ActionContext(patrician_type_1=PatricianType.PRAETOR))
        assert game.action_card_played_this_turn
        with pytest.raises(IllegalStateError):
            game.play_card(CAESAR, "scout", context=ActionContext(patrician_type_1=PatricianType.AEDILE))

    def test_skip_needs_second_phase(self, standard_game):
        with pytest.raises(IllegalStateError):
            standard_game.skip_to_vote(CAESAR)

    def test_vote_needs_vote_phase(self, standard_game):
        standard_game.play_card(CAESAR, "one", PatricianType.CONSUL)
        with pytest.raises(IllegalStateError):
            standard_game.execute_vote_of_confidence(CAESAR, PatricianType.CONSUL)


class TestFullTurn:
    """Tests for a complete turn."""

    def _play_to_vote(self, game):
        game.play_card(CAESAR, "one", PatricianType.CONSUL)
        game.play_card(CAESAR, "two", PatricianType.CONSUL)
        game.skip_to_vote(CAESAR)

    def test_vote_claims_and_discards(self, standard_game):
        game = standard_game
        self._play_to_vote(game)
        assert game.turn_phase == TurnPhase.VOTE_OF_CONFIDENCE

        result = game.execute_vote_of_confidence(CAESAR, PatricianType.CONSUL)

        assert result.winner is CAESAR
        assert game.claimed_counts(CAESAR)[PatricianType.CONSUL] == 1
        assert game.ledger.remaining(PatricianType.CONSUL) == 2
        assert game.discard_pile == [TWO]
        assert game.turn_phase == TurnPhase.DRAW_PHASE

    def test_tie_still_reaches_draw_phase(self, standard_game):
        game = standard_game
        self._play_to_vote(game)

        result = game.execute_vote_of_confidence(CAESAR, PatricianType.CENSOR)

        assert result.is_tie
        assert game.turn_phase == TurnPhase.DRAW_PHASE
        assert game.claimed_counts(CAESAR) == {t: 0 for t in PatricianType}

    def test_draw_ends_turn(self, standard_game):
        game = standard_game
        self._play_to_vote(game)
        game.execute_vote_of_confidence(CAESAR, PatricianType.PRAETOR)

        drawn = game.draw_to_hand_limit(CAESAR, from_influence=True)

        assert len(drawn) == 2
        assert len(game.hand(CAESAR)) == MAX_HAND_SIZE
        assert game.decks.deck_counts(CAESAR)["influence"] == 25
        assert game.current_player is CLEOPATRA
        assert game.turn_phase == TurnPhase.FIRST_CARD_SELECTION
        assert game.cards_played_this_turn == 0
        assert game.turn_number == 2

    def test_action_turn_resets_flags(self, standard_game, give_action):
        game = standard_game
        give_action(game, CAESAR, ActionType.SCOUT)
        game.play_card(CAESAR, "scout", context=ActionContext(patrician_type_1=PatricianType.PRAETOR))
        assert game.action_card_played_this_turn
        assert game.pending_action is not None

        game.play_card(CAESAR, "one", PatricianType.CONSUL)
        game.skip_to_vote(CAESAR)
        game.execute_vote_of_confidence(CAESAR, PatricianType.PRAETOR)
        game.draw_to_hand_limit(CAESAR, from_influence=False)

        assert game.cards_played_this_turn == 0
        assert not game.action_card_played_this_turn
        assert game.pending_action is None
        assert game.current_player is CLEOPATRA
        assert game.turn_phase == TurnPhase.FIRST_CARD_SELECTION

    def test_draw_only_in_draw_phase(self, standard_game):
        with pytest.raises(IllegalStateError):
            standard_game.draw_to_hand_limit(CAESAR, from_influence=True)

    def test_single_card_turn(self, standard_game):
        game = standard_game
        game.play_card(CAESAR, "five", PatricianType.AEDILE)
        game.skip_to_vote(CAESAR)
        result = game.execute_vote_of_confidence(CAESAR, PatricianType.AEDILE)

        assert result.winner is CAESAR
        assert game.discard_pile == [FIVE]


class TestBookkeepingHelpers:
    """Tests for the unchecked helpers."""

    def test_discard_ignores_none(self, game):
        game.discard(None)
        game.discard(ONE)
        assert game.discard_pile == [ONE]

    def test_draw_bust(self, game):
        piece = game.draw_bust()
        assert piece is not None
        assert piece not in game.bust_bag.contents

    def test_resolve_without_phase_checks(self, game):
        game.ledger.add_influence(PatricianType.QUAESTOR, CLEOPATRA, THREE, face_up=False)

        result = game.resolve_vote_of_confidence(PatricianType.QUAESTOR)

        assert result.winner is CLEOPATRA
        assert game.claimed_counts(CLEOPATRA)[PatricianType.QUAESTOR] == 1
        assert game.discard_pile == [THREE]

    def test_same_seed_same_decks(self):
        first = Game(seed=11)
        second = Game(seed=11)
        for game in (first, second):
            game.decks.set_hand(CAESAR, [])
        assert first.draw(CAESAR, True) == second.draw(CAESAR, True)
