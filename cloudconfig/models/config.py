"""Configuration models"""
import json
from types import MappingProxyType
from typing import Any, Dict, Literal, Mapping, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    FieldSerializationInfo,
    field_serializer,
    field_validator,
)

# Remember to use HTTPS for these in production builds
CHAINED_CLOUD_CONFIG_URL = "http://config.getiantem.org/cloud-android.yaml.gz"
FRONTED_CLOUD_CONFIG_URL = "http://d2wi0vwulmtn99.cloudfront.net/cloud.yaml.gz"


class ChainedServer(BaseModel):
    """Chained proxy server entry. Opaque apart from being present."""
    model_config = ConfigDict(frozen=True, extra="allow")

    name: Optional[str] = None
    addr: str = ""
    cert: str = ""
    authtoken: str = ""
    pipelined: bool = False
    weight: int = 0
    qos: int = 0
    trusted: bool = False


class Masquerade(BaseModel):
    """Front domain and the IP address it is reached through"""
    model_config = ConfigDict(frozen=True, extra="allow")

    domain: str
    ipaddress: str = ""


class TrustedCA(BaseModel):
    """Certificate authority trusted for fronted connections"""
    model_config = ConfigDict(frozen=True, extra="allow")

    commonname: str = ""
    cert: str


class ClientConfig(BaseModel):
    """Client block: chained servers and masquerade sets"""
    model_config = ConfigDict(frozen=True, extra="allow")

    chained_servers: tuple[ChainedServer, ...] = Field(
        default=(),
        validation_alias=AliasChoices("chainedServers", "chainedservers", "chained_servers"),
        serialization_alias="chainedServers",
    )
    # Read-only after validation
    masquerade_sets: Dict[str, tuple[Masquerade, ...]] = Field(
        default_factory=dict,
        validate_default=True,
        validation_alias=AliasChoices("masqueradeSets", "masqueradesets", "masquerade_sets"),
        serialization_alias="masqueradeSets",
    )

    @field_validator("chained_servers", mode="before")
    @classmethod
    def _flatten_named_servers(cls, value: Any) -> Any:
        """Accept both a list of servers and a name -> server mapping"""
        if value is None:
            return ()
        if isinstance(value, dict):
            servers = []
            for name, server in value.items():
                if isinstance(server, dict):
                    server = {"name": str(name), **server}
                servers.append(server)
            return servers
        return value

    @field_validator("masquerade_sets", mode="before")
    @classmethod
    def _empty_masquerade_sets(cls, value: Any) -> Any:
        if value is None:
            return {}
        if isinstance(value, Mapping):
            return dict(value)
        return value

    @field_validator("masquerade_sets", mode="after")
    @classmethod
    def _freeze_masquerade_sets(cls, value: Dict[str, tuple[Masquerade, ...]]) -> Mapping[str, tuple[Masquerade, ...]]:
        return MappingProxyType(value)

    @field_serializer("masquerade_sets")
    def _dump_masquerade_sets(self, value: Mapping[str, tuple[Masquerade, ...]], info: FieldSerializationInfo) -> dict:
        return {
            name: [m.model_dump(mode=info.mode, by_alias=info.by_alias) for m in masquerades]
            for name, masquerades in value.items()
        }


class Configuration(BaseModel):
    """Authoritative client settings snapshot.

    Instances are frozen: a new document always produces a new object which
    replaces the live one as a whole.
    """
    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    client: ClientConfig = Field(default_factory=ClientConfig)
    trusted_cas: tuple[TrustedCA, ...] = Field(default=(), alias="trustedcas")
    instance_id: str = Field(default="", alias="instanceid")
    firetweet_version: str = Field(default="", alias="firetweetversion")

    @field_validator("client", mode="before")
    @classmethod
    def _empty_client(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("trusted_cas", mode="before")
    @classmethod
    def _empty_trusted_cas(cls, value: Any) -> Any:
        return () if value is None else value

    @field_validator("instance_id", "firetweet_version", mode="before")
    @classmethod
    def _opaque_string(cls, value: Any) -> Any:
        if value is None:
            return ""
        # Callers building from Python data may pass numeric versions
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def is_usable(self) -> bool:
        """A configuration is only usable with at least one chained server"""
        return len(self.client.chained_servers) > 0

    def trusted_certs(self) -> list[str]:
        """PEM strings of the trusted CAs, in document order"""
        return [ca.cert for ca in self.trusted_cas]

    def fingerprint(self) -> str:
        """Canonical serialization used for change detection.

        Mapping keys are sorted; list order is kept, so reordering servers or
        CAs counts as a change.
        """
        data = self.model_dump(mode="json", by_alias=True)
        return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)

    def same_content(self, other: "Configuration") -> bool:
        """Deep structural equality based on the canonical serialization"""
        return self.fingerprint() == other.fingerprint()


class RefreshSettings(BaseModel):
    """Settings of the refresher itself"""
    config_url: str = CHAINED_CLOUD_CONFIG_URL
    fronted_url: str = FRONTED_CLOUD_CONFIG_URL
    request_timeout_secs: float = Field(default=60.0, gt=0)
    refresh_interval_secs: float = Field(default=60.0, gt=0)
    # When the ETag of a 200 response becomes the cached validator:
    # "on_response" as soon as it arrives, "on_apply" only once the body was accepted
    etag_commit: Literal["on_response", "on_apply"] = "on_response"
    verify_ssl: bool = True
    log_level: str = "INFO"
    log_file: Optional[str] = "logs/cloudconfig.log"
