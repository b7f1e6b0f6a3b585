"""Pydantic models for the subset of the GitHub push event payload the pipeline reads."""

from pydantic import BaseModel, ConfigDict, Field


class _PayloadModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class AccountModel(_PayloadModel):
    """A GitHub user or organization account."""

    login: str


class PusherModel(_PayloadModel):
    """The git identity that pushed the commits."""

    name: str | None = None
    email: str | None = None


class RepositoryModel(_PayloadModel):
    """The repository that received the push."""

    name: str
    full_name: str
    owner: AccountModel


class CommitModel(_PayloadModel):
    """A commit included in the push, with the paths it touched."""

    id: str
    added: list[str] = Field(default_factory=list)
    modified: list[str] = Field(default_factory=list)
    removed: list[str] = Field(default_factory=list)


class PushEvent(_PayloadModel):
    """A push event as delivered by GitHub."""

    ref: str
    before: str
    after: str
    repository: RepositoryModel
    organization: AccountModel | None = None
    sender: AccountModel | None = None
    pusher: PusherModel | None = None
    commits: list[CommitModel] = Field(default_factory=list)
    head_commit: CommitModel | None = None

    @property
    def organization_login(self) -> str:
        """Login of the organization owning the repository."""
        if self.organization is not None:
            return self.organization.login
        return self.repository.owner.login
