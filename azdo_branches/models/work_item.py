"""Work item model, its type/state enums and fetch status variants"""
from enum import Enum
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union


class WorkItemKind(Enum):
    """Known work item types. OTHER keeps the server's name in WorkItemType.name."""
    BUG = ("bug", "Bug", "🐞")
    PRODUCT_BACKLOG_ITEM = ("product backlog item", "Product Backlog Item", "📘")
    USER_STORY = ("user story", "User Story", "📖")
    TASK = ("task", "Task", "📒")
    FEATURE = ("feature", "Feature", "🏆")
    EPIC = ("epic", "Epic", "👑")
    OTHER = ("", "", "📄")

    def __init__(self, key: str, display_name: str, icon: str):
        self.key = key
        self.display_name = display_name
        self.icon = icon


class StateKind(Enum):
    """Known workflow states. OTHER keeps the server's name in WorkItemState.name."""
    NEW = ("new", "New", "🆕", "grey70")
    APPROVED = ("approved", "Approved", "👍", "grey70")
    COMMITTED = ("committed", "Committed", "🎯", "blue")
    ACTIVE = ("active", "Active", "🔵", "cyan")
    RESOLVED = ("resolved", "Resolved", "☑️", "yellow")
    CLOSED = ("closed", "Closed", "✔️", "green")
    REMOVED = ("removed", "Removed", "🗑️", "grey42")
    DONE = ("done", "Done", "✅", "green")
    OTHER = ("", "", "⚪", "white")

    def __init__(self, key: str, display_name: str, icon: str, color: str):
        self.key = key
        self.display_name = display_name
        self.icon = icon
        self.color = color


@dataclass(frozen=True)
class WorkItemType:
    """Work item type: a known kind, or OTHER carrying the original name."""
    kind: WorkItemKind
    name: str

    @classmethod
    def parse(cls, value: str) -> "WorkItemType":
        lowered = value.strip().lower()
        for kind in WorkItemKind:
            if kind is not WorkItemKind.OTHER and kind.key == lowered:
                return cls(kind, kind.display_name)
        return cls(WorkItemKind.OTHER, value)

    @property
    def display_name(self) -> str:
        return self.name

    @property
    def icon(self) -> str:
        return self.kind.icon


@dataclass(frozen=True)
class WorkItemState:
    """Workflow state: a known kind, or OTHER carrying the original name."""
    kind: StateKind
    name: str

    @classmethod
    def parse(cls, value: str) -> "WorkItemState":
        lowered = value.strip().lower()
        for kind in StateKind:
            if kind is not StateKind.OTHER and kind.key == lowered:
                return cls(kind, kind.display_name)
        return cls(StateKind.OTHER, value)

    @property
    def display_name(self) -> str:
        return self.name

    @property
    def icon(self) -> str:
        return self.kind.icon

    @property
    def color(self) -> str:
        return self.kind.color


@dataclass(frozen=True)
class RichTextField:
    """A named HTML field of a work item."""
    name: str
    value: str


# Field reference name -> display name, in display order
RICH_TEXT_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("System.Description", "Description"),
    ("Microsoft.VSTS.Common.AcceptanceCriteria", "Acceptance Criteria"),
    ("Microsoft.VSTS.TCM.ReproSteps", "Repro Steps"),
    ("Microsoft.VSTS.TCM.SystemInfo", "System Info"),
    ("Microsoft.VSTS.Common.Resolution", "Resolution"),
    ("Microsoft.VSTS.Build.FoundIn", "Found In"),
    ("Microsoft.VSTS.Build.IntegrationBuild", "Integration Build"),
)


@dataclass(frozen=True)
class WorkItem:
    """A work item as returned by the lookup service."""
    id: int
    title: str
    work_item_type: WorkItemType
    state: WorkItemState
    assigned_to: Optional[str] = None
    url: Optional[str] = None
    tags: Tuple[str, ...] = ()
    rich_text_fields: Tuple[RichTextField, ...] = field(default_factory=tuple)

    @classmethod
    def from_json(cls, payload: Dict[str, Any], work_item_id: int) -> "WorkItem":
        """
        Build a work item from the REST API payload.

        Args:
            payload: Decoded JSON body of ``_apis/wit/workitems/{id}``
            work_item_id: Id that was requested

        Returns:
            WorkItem

        Raises:
            ValueError: If a required field is missing
        """
        fields = payload.get("fields")
        if not isinstance(fields, dict):
            raise ValueError("Missing 'fields' in work item response")

        def required(name: str) -> str:
            value = fields.get(name)
            if not isinstance(value, str):
                raise ValueError(f"Missing '{name}' field")
            return value

        title = required("System.Title")
        work_item_type = WorkItemType.parse(required("System.WorkItemType"))
        state = WorkItemState.parse(required("System.State"))

        assigned_to = None
        assignee = fields.get("System.AssignedTo")
        if isinstance(assignee, dict) and isinstance(assignee.get("displayName"), str):
            assigned_to = assignee["displayName"]

        url = None
        html_link = (payload.get("_links") or {}).get("html") or {}
        if isinstance(html_link.get("href"), str):
            url = html_link["href"]

        tags: Tuple[str, ...] = ()
        raw_tags = fields.get("System.Tags")
        if isinstance(raw_tags, str):
            tags = tuple(tag.strip() for tag in raw_tags.split(";") if tag.strip())

        rich_text_fields = tuple(
            RichTextField(display_name, fields[reference])
            for reference, display_name in RICH_TEXT_FIELDS
            if isinstance(fields.get(reference), str) and fields[reference].strip()
        )

        return cls(
            id=work_item_id,
            title=title,
            work_item_type=work_item_type,
            state=state,
            assigned_to=assigned_to,
            url=url,
            tags=tags,
            rich_text_fields=rich_text_fields,
        )


@dataclass(frozen=True)
class NotFetched:
    """No fetch has been issued for this id (or it was reset)."""


@dataclass(frozen=True)
class Loading:
    """A fetch is in flight."""


@dataclass(frozen=True)
class Loaded:
    work_item: WorkItem


@dataclass(frozen=True)
class FetchFailed:
    message: str


WorkItemStatus = Union[NotFetched, Loading, Loaded, FetchFailed]

NOT_FETCHED = NotFetched()
LOADING = Loading()
