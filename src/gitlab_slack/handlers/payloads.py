"""Typed views of the GitLab webhook payloads the handlers understand.

Each event kind is its own model, tagged by `object_kind`. Fields a handler
needs are required; the rest are optional. Unknown fields are ignored.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter


# =============================================================================
# Shared pieces
# =============================================================================

class UserRef(BaseModel):
    """The user attached to an event."""

    username: str
    name: str | None = None
    email: str | None = None


class ProjectRef(BaseModel):
    """The project block most events carry."""

    id: int | None = None
    name: str = ""
    path_with_namespace: str = ""
    web_url: str = ""


class RepositoryRef(BaseModel):
    name: str = ""


class LabelRef(BaseModel):
    """In webhooks, labels are objects with a display title."""

    title: str
    color: str | None = None


class CommitAuthor(BaseModel):
    name: str = ""
    email: str = ""


class Commit(BaseModel):
    id: str
    message: str = ""
    url: str = ""
    author: CommitAuthor = Field(default_factory=CommitAuthor)


class CommitRef(BaseModel):
    message: str = ""
    url: str = ""


# =============================================================================
# Issue
# =============================================================================

class IssueAttributes(BaseModel):
    id: int
    iid: int
    project_id: int
    author_id: int
    title: str
    description: str | None = None
    url: str = ""
    state: str = "opened"
    action: str | None = None
    milestone_id: int | None = None


class IssueEvent(BaseModel):
    object_kind: Literal["issue"]
    user: UserRef
    project: ProjectRef = Field(default_factory=ProjectRef)
    repository: RepositoryRef = Field(default_factory=RepositoryRef)
    object_attributes: IssueAttributes
    labels: list[LabelRef] = Field(default_factory=list)
    assignees: list[UserRef] = Field(default_factory=list)
    assignee: UserRef | None = None  # older GitLab versions

    @property
    def first_assignee(self) -> UserRef | None:
        if self.assignees:
            return self.assignees[0]
        return self.assignee


# =============================================================================
# Push and tag push
# =============================================================================

class PushEvent(BaseModel):
    object_kind: Literal["push"]
    before: str
    after: str
    ref: str
    user_username: str
    user_email: str | None = None
    project_id: int | None = None
    project: ProjectRef = Field(default_factory=ProjectRef)
    commits: list[Commit] = Field(default_factory=list)
    total_commits_count: int = 0

    @property
    def branch(self) -> str:
        return self.ref.removeprefix("refs/heads/")


class TagPushEvent(BaseModel):
    object_kind: Literal["tag_push"]
    before: str
    after: str
    ref: str
    user_username: str
    message: str | None = None
    project_id: int | None = None
    project: ProjectRef = Field(default_factory=ProjectRef)
    repository: RepositoryRef = Field(default_factory=RepositoryRef)

    @property
    def tag(self) -> str:
        return self.ref[self.ref.rfind("/") + 1:]


# =============================================================================
# Merge request
# =============================================================================

class MergeRequestAttributes(BaseModel):
    iid: int
    title: str
    description: str | None = None
    url: str = ""
    action: str | None = None
    source_branch: str
    target_branch: str
    source: ProjectRef = Field(default_factory=ProjectRef)
    target: ProjectRef = Field(default_factory=ProjectRef)


class MergeRequestEvent(BaseModel):
    object_kind: Literal["merge_request"]
    user: UserRef
    project: ProjectRef = Field(default_factory=ProjectRef)
    object_attributes: MergeRequestAttributes
    assignees: list[UserRef] = Field(default_factory=list)
    assignee: UserRef | None = None

    @property
    def first_assignee(self) -> UserRef | None:
        if self.assignees:
            return self.assignees[0]
        return self.assignee


# =============================================================================
# Wiki page
# =============================================================================

class WikiPageAttributes(BaseModel):
    slug: str
    url: str = ""
    title: str | None = None
    action: str | None = None


class WikiPageEvent(BaseModel):
    object_kind: Literal["wiki_page"]
    user: UserRef
    project: ProjectRef = Field(default_factory=ProjectRef)
    object_attributes: WikiPageAttributes


# =============================================================================
# Pipeline and build (job)
# =============================================================================

class PipelineAttributes(BaseModel):
    id: int
    status: str
    ref: str | None = None


class PipelineEvent(BaseModel):
    object_kind: Literal["pipeline"]
    user: UserRef
    project: ProjectRef = Field(default_factory=ProjectRef)
    object_attributes: PipelineAttributes
    commit: CommitRef | None = None


class BuildEvent(BaseModel):
    object_kind: Literal["build"]
    build_id: int
    build_name: str
    build_status: str
    project_id: int | None = None
    project_name: str = ""
    user: UserRef
    project: ProjectRef = Field(default_factory=ProjectRef)


WebhookEvent = Annotated[
    Union[
        IssueEvent,
        PushEvent,
        TagPushEvent,
        MergeRequestEvent,
        WikiPageEvent,
        PipelineEvent,
        BuildEvent,
    ],
    Field(discriminator="object_kind"),
]

webhook_event_adapter = TypeAdapter(WebhookEvent)

KNOWN_KINDS = frozenset({"issue", "push", "tag_push", "merge_request", "wiki_page", "pipeline", "build"})
