"""Tests for branch deletion checks"""
from azdo_branches.models.branch import BranchInfo
from azdo_branches.services.branch_validation_service import BranchValidationService


class TestDeletionRefusal:
    """Test why a branch may not be deleted."""

    def test_plain_branch_is_deletable(self):
        assert BranchValidationService.deletion_refusal(BranchInfo("feature/1")) is None

    def test_current_branch(self):
        branch = BranchInfo("feature/1", is_current=True, is_protected=True)
        assert BranchValidationService.deletion_refusal(branch) == "Cannot delete current branch"

    def test_protected_branch(self):
        branch = BranchInfo("releases/v1", is_protected=True)
        assert BranchValidationService.deletion_refusal(branch) == "Cannot delete protected branch 'releases/v1'"

    def test_only_refusal_check_is_offered(self):
        public = {name for name in vars(BranchValidationService) if not name.startswith("_")}
        assert public == {"deletion_refusal"}
