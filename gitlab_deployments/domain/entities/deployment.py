"""Deployment records as returned by ``GET /projects/:id/deployments``."""
from datetime import datetime, timezone
from typing import Annotated, Any, Dict, Optional, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, StrictBool, StrictFloat, StrictInt, StrictStr


def _to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UTCDateTime = Annotated[datetime, AfterValidator(_to_utc)]

# GitLab sends these as string, number, boolean or null depending on the
# instance version; the value is kept exactly as sent.
LooseScalar = Optional[Union[StrictBool, StrictInt, StrictFloat, StrictStr]]


class GitLabEntity(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class Commit(GitLabEntity):
    id: str = ""
    short_id: str = ""
    title: str = ""
    message: str = ""
    author_name: str = ""
    author_email: str = ""
    created_at: Optional[UTCDateTime] = None


class DeployableUser(GitLabEntity):
    """Full profile of the user who triggered the deployable job."""

    id: int = 0
    username: str = ""
    name: str = ""
    state: str = ""
    avatar_url: str = ""
    web_url: str = ""
    created_at: Optional[UTCDateTime] = None
    # opaque JSON, shape is not documented upstream
    bio: Any = None
    location: LooseScalar = None
    skype: str = ""
    linkedin: str = ""
    twitter: str = ""
    website_url: str = ""


class DeploymentUser(GitLabEntity):
    """Abbreviated profile of the user who created the deployment."""

    id: int = 0
    username: str = ""
    name: str = ""
    state: str = ""
    avatar_url: str = ""
    web_url: str = ""


class Deployable(GitLabEntity):
    """The CI job that produced the deployment."""

    id: int = 0
    name: str = ""
    stage: str = ""
    status: str = ""
    ref: str = ""
    tag: bool = False
    created_at: Optional[UTCDateTime] = None
    started_at: LooseScalar = None
    finished_at: Optional[UTCDateTime] = None
    coverage: LooseScalar = None
    runner: Any = None
    commit: Optional[Commit] = None
    user: Optional[DeployableUser] = None


class Environment(GitLabEntity):
    id: int = 0
    name: str = ""
    external_url: str = ""


class Deployment(GitLabEntity):
    """Read-only snapshot of one deployment of a project."""

    id: int
    iid: int
    ref: str = ""
    sha: str = ""
    created_at: Optional[UTCDateTime] = None
    deployable: Deployable
    environment: Environment
    user: Optional[DeploymentUser] = None

    def to_json(self) -> Dict[str, Any]:
        """Re-encode the deployment to its wire shape."""
        return self.model_dump(mode="json")
