"""Message catalog: type tags and pydantic models for message bodies

Only the messages the client needs for its lifecycle and the example request
calls are modelled. Unknown fields in replies are preserved.
"""

from enum import IntEnum

from pydantic import BaseModel, ConfigDict, Field


class EMsg(IntEnum):
    """Client (non-coordinator) message tags"""

    CLIENT_GAMES_PLAYED = 742


class GCMsg(IntEnum):
    """Game-coordinator message tags"""

    CLIENT_WELCOME = 4004
    CLIENT_HELLO = 4006

    DEV_PLAYTEST_STATUS = 9049
    SPECTATE_LOBBY = 9035
    SPECTATE_LOBBY_RESPONSE = 9036
    GET_MATCH_HISTORY = 9063
    GET_MATCH_HISTORY_RESPONSE = 9064
    GET_MATCH_META_DATA = 9145
    GET_MATCH_META_DATA_RESPONSE = 9146
    GET_ACTIVE_MATCHES = 9203
    GET_ACTIVE_MATCHES_RESPONSE = 9204


class EResult(IntEnum):
    """Subset of result codes reported by logon and coordinator replies"""

    OK = 1
    FAIL = 2
    NO_CONNECTION = 3
    INVALID_PASSWORD = 5
    ACCESS_DENIED = 15
    EXPIRED = 27
    INVALID_SIGNATURE = 83


class GCMessage(BaseModel):
    """Base for coordinator message bodies"""

    model_config = ConfigDict(extra="allow")


class GamePlayed(BaseModel):
    game_id: int = Field(..., gt=0, description="App id of the running game")


class GamesPlayed(GCMessage):
    """Declares which app the client is running"""

    games_played: list[GamePlayed] = Field(default_factory=list)


class ClientHello(GCMessage):
    region_mode: int = Field(0, ge=0, description="Matchmaking region mode")


class ClientWelcome(GCMessage):
    """First coordinator message after a hello"""

    version: int = Field(..., ge=0, description="Client version advertised by the GC")


class DevPlaytestStatus(GCMessage):
    playtest_active: bool | None = None


class GetMatchMetaData(GCMessage):
    match_id: int = Field(..., gt=0)


class GetMatchMetaDataResponse(GCMessage):
    result: int | None = None
    replay_salt: int = Field(..., ge=0)
    metadata_salt: int = Field(..., ge=0)
    cluster_id: int = Field(..., ge=0)


class SpectateLobby(GCMessage):
    lobby_id: int = Field(..., gt=0)
    client_version: int = Field(0, ge=0)


class SpectateLobbyResponse(GCMessage):
    result: int | None = None


class GetMatchHistory(GCMessage):
    account_id: int = Field(..., gt=0)


class GetMatchHistoryResponse(GCMessage):
    result: int | None = None
    matches: list[dict] = Field(default_factory=list)


class GetActiveMatches(GCMessage):
    pass


class GetActiveMatchesResponse(GCMessage):
    active_matches: list[dict] = Field(default_factory=list)
