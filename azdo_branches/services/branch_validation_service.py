"""Branch validation service for azdo-branches."""

from typing import Optional

from azdo_branches.exceptions import BranchProtectedError, CurrentBranchError
from azdo_branches.models.branch import BranchInfo


class BranchValidationService:
    """Service for validating branch operations."""

    @staticmethod
    def deletion_refusal(branch: BranchInfo) -> Optional[str]:
        """
        Explain why a branch cannot be deleted.

        Args:
            branch: Branch as shown in the list

        Returns:
            Message for the user, or None if the branch is deletable
        """
        if branch.is_current:
            return str(CurrentBranchError(branch.name))
        if branch.is_protected:
            return str(BranchProtectedError(branch.name))
        return None
