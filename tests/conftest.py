"""Pytest fixtures for azdo-branches tests"""
import tempfile
from pathlib import Path
from unittest.mock import Mock
import pytest
import git

from azdo_branches.models.work_item import WorkItem


def commit_file(repo, name, content, message):
    """Write a file in the working tree and commit it."""
    path = Path(repo.working_dir) / name
    path.write_text(content)
    repo.index.add([name])
    return repo.index.commit(message)


@pytest.fixture
def commit():
    """The commit_file helper, for tests that add commits of their own."""
    return commit_file


@pytest.fixture
def temp_dir():
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def git_repo(temp_dir):
    """Create a real Git repository with one commit on main."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()

    repo = git.Repo.init(repo_path)

    # Configure git user for commits
    repo.config_writer().set_value("user", "name", "Test User").release()
    repo.config_writer().set_value("user", "email", "test@example.com").release()

    commit_file(repo, "README.md", "# Test Repository\n", "Initial commit")
    repo.git.branch('-M', 'main')

    yield repo

    repo.close()


@pytest.fixture
def git_repo_with_branches(git_repo):
    """Create a Git repository with work item branches and a release branch."""
    repo = git_repo

    repo.git.checkout('-b', 'feature/123-login')
    commit_file(repo, "login.txt", "Login\n", "Add login")

    repo.git.checkout('main')
    repo.git.checkout('-b', 'bugfix/456-crash')
    commit_file(repo, "crash.txt", "Fix\n", "Fix crash")

    repo.git.checkout('main')
    repo.git.branch('releases/v1')
    repo.git.branch('chore/cleanup')

    repo.git.checkout('main')

    yield repo


@pytest.fixture
def tracked_repo(temp_dir, git_repo):
    """Repository whose main and feature/123-x track a bare 'origin'."""
    origin_path = temp_dir / "origin.git"
    origin = git.Repo.init(origin_path, bare=True)

    repo = git_repo
    repo.create_remote('origin', str(origin_path))
    repo.git.push('-u', 'origin', 'main')

    repo.git.checkout('-b', 'feature/123-x')
    commit_file(repo, "x.txt", "x\n", "Add x")
    repo.git.push('-u', 'origin', 'feature/123-x')
    repo.git.checkout('main')

    yield repo

    origin.close()


@pytest.fixture
def work_item_payload():
    """A work item as returned by the Azure DevOps REST API."""
    return {
        "id": 123,
        "fields": {
            "System.Title": "Login page crashes on submit",
            "System.WorkItemType": "Bug",
            "System.State": "Active",
            "System.AssignedTo": {"displayName": "Jane Doe", "uniqueName": "jane@example.com"},
            "System.Tags": "frontend; urgent ;",
            "System.Description": "<p>Steps are in <b>repro</b>.</p>",
            "Microsoft.VSTS.TCM.ReproSteps": "<ol><li>Open login</li><li>Submit</li></ol>",
            "Microsoft.VSTS.Common.AcceptanceCriteria": "   ",
        },
        "_links": {
            "html": {"href": "https://dev.azure.com/org/project/_workitems/edit/123"},
        },
    }


@pytest.fixture
def sample_work_item(work_item_payload):
    return WorkItem.from_json(work_item_payload, 123)


@pytest.fixture
def mock_client(sample_work_item):
    """Work item client that returns the sample work item for any id."""
    client = Mock()
    client.get_work_item = Mock(return_value=sample_work_item)
    return client


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()
