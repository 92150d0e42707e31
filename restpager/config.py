"""Configuration models for restpager."""

from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from restpager.utils.config_loader import load_yaml_with_env

INDEX_PLACEHOLDER = "{pagination.index}"


class PaginationType(str, Enum):
    """Supported pagination conventions."""

    NONE = "none"
    LINK_IN_RESPONSE_HEADER = "link_in_response_header"
    LINK_IN_RESPONSE_BODY = "link_in_response_body"
    TOKEN_IN_RESPONSE_BODY = "token_in_response_body"
    INCREMENT_AN_INDEX = "increment_an_index"
    CUSTOM = "custom"


class TokenLocation(str, Enum):
    """Where a continuation token is placed in the next request."""

    QUERY = "query"
    HEADER = "header"
    BODY = "body"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class LoggingConfig(BaseModel):
    """
    Logging configuration.

    Example:
    ```yaml
    logging:
      level: "INFO"
      structured: true
    ```
    """

    level: LogLevel = LogLevel.INFO
    structured: bool = Field(default=False, description="Output JSON logs")

    model_config = {"frozen": True}


class SourceConfig(BaseModel):
    """
    Description of a paginated REST endpoint.

    Only the fields of the selected `pagination_type` are used; the rest are ignored.

    Scenario: GitHub style Link header
    ```yaml
    url: "https://api.github.com/orgs/acme/repos"
    headers:
      Authorization: "Bearer ${GITHUB_TOKEN}"
    pagination_type: link_in_response_header
    link_header_name: Link
    link_rel: next
    ```

    Scenario: continuation token
    ```yaml
    url: "https://api.example.com/v1/events"
    pagination_type: token_in_response_body
    next_page_token_path: meta.next_token
    next_page_token_param: page_token
    token_location: query
    ```

    Scenario: offset walk
    ```yaml
    url: "https://api.example.com/items?offset={pagination.index}&limit=100"
    pagination_type: increment_an_index
    index_start: 0
    index_increment: 100
    index_max: 10000
    results_path: items
    ```

    Scenario: custom script
    ```yaml
    url: "https://api.example.com/items"
    pagination_type: custom
    custom_script: |
      import json
      def get_next_page_url(url, page, headers):
          nxt = json.loads(page).get("continuation")
          return f"https://api.example.com/items?c={nxt}" if nxt else None
    ```
    """

    url: str = Field(description="Base URL of the first request")
    method: HttpMethod = HttpMethod.GET
    headers: Dict[str, str] = Field(default_factory=dict)
    body: Optional[str] = Field(default=None, description="Request body sent verbatim")
    pagination_type: PaginationType = PaginationType.NONE

    # link_in_response_header
    link_header_name: str = Field(default="Link", description="Response header holding the next URL")
    link_rel: str = Field(default="next", description="rel to follow when the header is RFC 5988")

    # link_in_response_body
    next_page_field_path: Optional[str] = Field(
        default=None, description="Path of the next URL in the body (dotted or JSON pointer)"
    )

    # token_in_response_body
    next_page_token_path: Optional[str] = Field(
        default=None, description="Path of the continuation token in the body"
    )
    next_page_token_param: Optional[str] = Field(
        default=None, description="Name of the parameter that carries the token"
    )
    token_location: TokenLocation = TokenLocation.QUERY

    # increment_an_index
    index_param: Optional[str] = Field(
        default=None, description="Query parameter for the index; otherwise {pagination.index}"
    )
    index_start: int = 0
    index_increment: int = Field(default=1, ge=1)
    index_max: Optional[int] = Field(default=None, description="Inclusive upper bound of the index")
    stop_on_empty_page: bool = True
    results_path: Optional[str] = Field(
        default=None, description="Path of the record list used to detect empty pages"
    )

    # custom
    custom_script: Optional[str] = Field(
        default=None, description="Python source defining get_next_page_url(url, page, headers)"
    )
    custom_script_path: Optional[str] = None

    wait_time_between_pages_ms: int = Field(default=0, ge=0)
    max_pages: Optional[int] = Field(default=None, ge=1, description="Stop after this many pages")
    timeout_s: float = Field(default=30.0, gt=0)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True, "extra": "forbid"}

    @field_validator("pagination_type", mode="before")
    @classmethod
    def normalize_pagination_type(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @model_validator(mode="after")
    def check_strategy_parameters(self):
        ptype = self.pagination_type

        if ptype == PaginationType.LINK_IN_RESPONSE_HEADER and not self.link_header_name.strip():
            raise ValueError("link_in_response_header pagination requires 'link_header_name'")

        if ptype == PaginationType.LINK_IN_RESPONSE_BODY and not self.next_page_field_path:
            raise ValueError("link_in_response_body pagination requires 'next_page_field_path'")

        if ptype == PaginationType.TOKEN_IN_RESPONSE_BODY:
            missing = [
                name
                for name in ("next_page_token_path", "next_page_token_param")
                if not getattr(self, name)
            ]
            if missing:
                raise ValueError(
                    f"token_in_response_body pagination requires {', '.join(missing)}"
                )

        if ptype == PaginationType.INCREMENT_AN_INDEX:
            if not self.index_param and INDEX_PLACEHOLDER not in self.url:
                raise ValueError(
                    f"increment_an_index pagination requires 'index_param' or a "
                    f"'{INDEX_PLACEHOLDER}' placeholder in 'url'"
                )
            if not self.stop_on_empty_page and self.index_max is None:
                raise ValueError("increment_an_index needs stop_on_empty_page or index_max")
            if self.index_max is not None and self.index_max < self.index_start:
                raise ValueError(
                    f"index_max ({self.index_max}) is lower than index_start ({self.index_start})"
                )

        if ptype == PaginationType.CUSTOM and not (self.custom_script or self.custom_script_path):
            raise ValueError("custom pagination requires 'custom_script' or 'custom_script_path'")

        return self

    def load_custom_script(self) -> str:
        """Return the custom pagination script source, reading the file if needed."""
        if self.custom_script:
            return self.custom_script
        if self.custom_script_path:
            return Path(self.custom_script_path).read_text(encoding="utf-8")
        return ""

    @classmethod
    def from_yaml(cls, path: str, env: Optional[str] = None) -> "SourceConfig":
        """Load and validate a source definition from a YAML file."""
        data = load_yaml_with_env(path, env=env)
        return cls.model_validate(data)
