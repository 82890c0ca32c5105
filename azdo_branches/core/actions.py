"""Side-effecting actions produced by key handling and run by the session."""
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class DeleteBranch:
    branch_name: str


@dataclass(frozen=True)
class CheckoutBranch:
    branch_name: str


@dataclass(frozen=True)
class RefreshWorkItem:
    work_item_id: int


@dataclass(frozen=True)
class OpenWorkItem:
    """Open the selected branch's work item in the browser."""


Action = Union[DeleteBranch, CheckoutBranch, RefreshWorkItem, OpenWorkItem]
