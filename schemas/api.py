from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class ApiInfoResponse(BaseModel):
    api: str


class TurnToken(BaseModel):
    """Twilio token, read from the REST body and sent in the SDK's camelCase shape."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    account_sid: Optional[str] = Field(None, serialization_alias="accountSid")
    date_created: Optional[str] = Field(None, serialization_alias="dateCreated")
    date_updated: Optional[str] = Field(None, serialization_alias="dateUpdated")
    ice_servers: Optional[List[Dict[str, Any]]] = Field(None, serialization_alias="iceServers")
    password: Optional[str] = None
    ttl: Optional[Union[str, int]] = None
    username: Optional[str] = None


class TurnCredentialsResponse(BaseModel):
    token: Dict[str, Any]
