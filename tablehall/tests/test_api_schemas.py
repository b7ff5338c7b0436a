"""
Tests for API schemas.

Tests:
- Error codes cover every rule rejection
- Request validation
- Response serialization
- OpenAPI schema generation
"""

import pytest
from pydantic import ValidationError

from ..api.schemas import (
    ActionResponse,
    BossInfo,
    CardInfo,
    CardsRequest,
    CreateSessionRequest,
    ErrorCode,
    ErrorResponse,
    GameOverInfo,
    GameStateResponse,
    NextPlayerRequest,
    PlayerInfo,
    SessionStatus,
)
from ..engine_core.action import RejectionKind
from ..games.campaign.cards import Suit, make_card


class TestErrorCodes:
    """Tests for ErrorCode."""

    @pytest.mark.parametrize("kind", list(RejectionKind))
    def test_every_rejection_has_a_code(self, kind):
        assert ErrorCode(kind.name).value == kind.name

    def test_error_response_serializes_code(self):
        response = ErrorResponse(error="No such table", error_code=ErrorCode.SESSION_NOT_FOUND)
        data = response.model_dump(mode="json")
        assert data["error_code"] == "SESSION_NOT_FOUND"
        assert data["api_version"] == "v1"
        assert data["details"] is None


class TestRequests:
    """Tests for request validation."""

    def test_empty_session_key_rejected(self):
        with pytest.raises(ValidationError):
            CreateSessionRequest(session_key="", host_id="alice")

    def test_indices_optional(self):
        """Omitted indices mean the stored selection."""
        assert CardsRequest(player_id="alice").indices is None
        assert CardsRequest(player_id="alice", indices=[0, 2]).indices == [0, 2]

    def test_negative_target_rejected(self):
        with pytest.raises(ValidationError):
            NextPlayerRequest(player_id="alice", target_index=-1)


class TestResponses:
    """Tests for response models."""

    def test_boss_info_from_card(self):
        jack = make_card(11, Suit.CLUBS)
        info = BossInfo(
            rank=jack.rank,
            suit=jack.suit.value,
            name=jack.name,
            health=jack.health,
            max_health=jack.max_health,
            attack_value=jack.attack_value,
        )
        assert info.name == "Jack of Clubs"
        assert info.health == 20
        assert info.attack_value == 10

    def test_action_response_defaults(self):
        response = ActionResponse(session_key="c1", outcome="continue")
        data = response.model_dump()
        assert data["cards_played"] == []
        assert data["game_over"] is None
        assert not data["session_closed"]

    def test_action_response_game_over(self):
        response = ActionResponse(
            session_key="c1",
            outcome="game_over",
            game_over=GameOverInfo(won=True, reason="castle_cleared", victory="gold"),
            session_closed=True,
        )
        data = response.model_dump(mode="json")
        assert data["game_over"] == {"won": True, "reason": "castle_cleared", "victory": "gold"}

    def test_game_state_hides_other_hands(self):
        state = GameStateResponse(
            session_key="c1",
            status=SessionStatus.ACTIVE,
            phase="attack",
            boss=BossInfo(rank=11, suit="clubs", name="Jack of Clubs",
                          health=20, max_health=20, attack_value=10),
            players=[
                PlayerInfo(player_id="alice", is_host=True, hand_size=7,
                           hand=[CardInfo(name="2 of Hearts", rank=2, suit="hearts",
                                          kind="number", attack_value=2)]),
                PlayerInfo(player_id="bob", hand_size=7),
            ],
        )
        data = state.model_dump(mode="json")
        assert data["status"] == "active"
        assert data["players"][0]["hand"][0]["name"] == "2 of Hearts"
        assert data["players"][1]["hand"] is None


class TestOpenAPI:
    """Tests for the generated OpenAPI schema."""

    @pytest.fixture
    def schema(self):
        from fastapi.openapi.utils import get_openapi
        from ..api.app import create_app

        app = create_app()
        return get_openapi(title=app.title, version=app.version, routes=app.routes)

    def test_openapi_schema_generates(self, schema):
        """OpenAPI schema generates without errors."""
        assert "paths" in schema
        assert "schemas" in schema["components"]

    def test_response_models_in_schema(self, schema):
        schemas = schema["components"]["schemas"]
        for name in ("SessionResponse", "ActionResponse", "GameStateResponse", "ErrorResponse"):
            assert name in schemas, f"Missing schema: {name}"

    def test_main_endpoints_present(self, schema):
        paths = schema["paths"]
        assert "post" in paths["/api/v1/sessions"]
        assert "201" in paths["/api/v1/sessions"]["post"]["responses"]
        assert "post" in paths["/api/v1/sessions/{session_key}/play"]
        assert "get" in paths["/api/v1/sessions/{session_key}/state"]
        assert "put" in paths["/api/v1/guilds/{guild_id}/prefix"]
