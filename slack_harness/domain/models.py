"""
Domain Layer - Platform Records

Records the harness stores on behalf of the platform, as opposed to the
renderable trees in blocks.py.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class SlackUser(BaseModel):
    """
    A workspace member, returned verbatim by users.info.

    Attributes:
        id: User ID the application sees in events and callbacks.
        name: Handle.
        real_name: Display name.
        is_admin: Workspace admin flag; bots often gate features on it.
        team_id: Set from the harness team when left empty.
    """
    model_config = ConfigDict(extra="allow")

    id: str
    name: str = ""
    real_name: str = ""
    is_admin: bool = False
    is_bot: bool = False
    team_id: Optional[str] = None
