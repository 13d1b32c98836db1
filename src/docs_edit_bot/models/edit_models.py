"""Models describing proposed documentation edits."""

from pydantic import BaseModel, ConfigDict, Field


class FileEdit(BaseModel):
    """Full replacement content for a single repo-relative path."""

    model_config = ConfigDict(frozen=False, populate_by_name=True)

    path: str = Field(min_length=1)
    content: str
    commit_message: str | None = Field(default=None, alias="commitMessage")


class EditPlan(BaseModel):
    """Ordered file edits plus metadata for the resulting pull request."""

    model_config = ConfigDict(frozen=False, populate_by_name=True)

    files: list[FileEdit] = Field(default_factory=list)
    pr_title: str | None = Field(default=None, alias="prTitle")
    pr_body: str | None = Field(default=None, alias="prBody")

    @property
    def is_actionable(self) -> bool:
        return len(self.files) > 0

    def to_wire(self) -> dict:
        """Serialize with the camelCase keys clients send and receive."""
        return self.model_dump(by_alias=True)
