import io
import random
import subprocess

from git_automate.config import CONFIG_FILENAME, Settings, load_settings
from git_automate.domain import CommandResult, GitOperation, Invocation, ResultStatus
from git_automate.errors import ConfigError, GitError, GitLaunchError, NotARepositoryError
from git_automate.logging_utils import Reporter
from git_automate.orchestrator import GitAutomation, run

from tests.fakes import FakeRunner, failed, ok


def _reporter():
    out = io.StringIO()
    err = io.StringIO()
    return Reporter(out=out, err=err), out, err


def _automation(runner, settings=None, dry_run=False):
    reporter, out, err = _reporter()
    automation = GitAutomation(
        settings or Settings(),
        runner,
        reporter,
        dry_run=dry_run,
        rng=random.Random(0),
    )
    return automation, out, err


def test_commit_and_push_runs_full_sequence():
    runner = FakeRunner(
        responses={
            GitOperation.STATUS: ok(" M foo.py\n"),
            GitOperation.CURRENT_BRANCH: ok("main\n"),
        }
    )
    automation, out, _ = _automation(runner)

    assert automation.commit_and_push() is True

    assert runner.operations == [
        GitOperation.PULL,
        GitOperation.ADD,
        GitOperation.STATUS,
        GitOperation.COMMIT,
        GitOperation.CURRENT_BRANCH,
        GitOperation.PUSH,
    ]
    assert runner.find(GitOperation.PULL).remote == "origin"
    assert runner.find(GitOperation.ADD).paths == (".",)

    generated = runner.find(GitOperation.COMMIT).message
    assert generated
    assert not generated.startswith("feat: ")

    push = runner.find(GitOperation.PUSH)
    assert (push.remote, push.branch) == ("origin", "main")
    assert f"Committed and pushed main to origin: {generated}" in out.getvalue()


def test_commit_and_push_uses_explicit_message_verbatim():
    runner = FakeRunner(responses={GitOperation.STATUS: ok("?? new.txt\n")})
    automation, _, _ = _automation(runner)

    automation.commit_and_push(message="  wip: keep   spacing ", conventional=True)

    assert runner.find(GitOperation.COMMIT).message == "  wip: keep   spacing "
    assert runner.find(GitOperation.PUSH).branch == "main"


def test_commit_and_push_conventional_message_has_feat_prefix():
    runner = FakeRunner(responses={GitOperation.STATUS: ok(" M foo.py\n")})
    automation, _, _ = _automation(runner, settings=Settings(commit_template="chore: {}"))

    automation.commit_and_push(conventional=True)

    assert runner.find(GitOperation.COMMIT).message.startswith("feat: ")


def test_commit_and_push_stages_explicit_files():
    runner = FakeRunner(responses={GitOperation.STATUS: ok("M  a.txt\n")})
    automation, _, _ = _automation(runner)

    automation.commit_and_push(files=["a.txt", "docs/b.md"])

    assert runner.find(GitOperation.ADD).paths == ("a.txt", "docs/b.md")


def test_commit_and_push_stops_when_nothing_changed():
    runner = FakeRunner()
    automation, out, err = _automation(runner)

    assert automation.commit_and_push() is False

    assert runner.operations == [GitOperation.PULL, GitOperation.ADD, GitOperation.STATUS]
    assert "No changes to commit" in err.getvalue()
    assert out.getvalue() == ""


def test_commit_and_push_skips_pull_when_disabled():
    runner = FakeRunner(responses={GitOperation.STATUS: ok(" M foo.py\n")})
    automation, _, _ = _automation(runner, settings=Settings(auto_pull=False))

    automation.commit_and_push()

    assert GitOperation.PULL not in runner.operations


def test_commit_and_push_uses_configured_remote():
    runner = FakeRunner(
        responses={
            GitOperation.STATUS: ok(" M foo.py\n"),
            GitOperation.CURRENT_BRANCH: ok("topic\n"),
        }
    )
    automation, _, _ = _automation(runner, settings=Settings(default_remote="upstream"))

    automation.commit_and_push()

    assert runner.find(GitOperation.PULL).remote == "upstream"
    push = runner.find(GitOperation.PUSH)
    assert (push.remote, push.branch) == ("upstream", "topic")


def test_commit_and_push_aborts_when_pull_fails():
    runner = FakeRunner(
        responses={GitOperation.PULL: failed("fatal: 'origin' does not appear to be a git repository")}
    )
    automation, _, _ = _automation(runner)

    try:
        automation.commit_and_push()
    except GitError as exc:
        assert "does not appear to be a git repository" in str(exc)
        assert "git pull origin" in str(exc)
    else:
        raise AssertionError("expected GitError to be raised")

    assert runner.operations == [GitOperation.PULL]


def test_commit_and_push_aborts_when_commit_fails():
    runner = FakeRunner(
        responses={
            GitOperation.STATUS: ok(" M foo.py\n"),
            GitOperation.COMMIT: failed("Author identity unknown"),
        }
    )
    automation, _, _ = _automation(runner)

    try:
        automation.commit_and_push(message="msg")
    except GitError as exc:
        assert "Author identity unknown" in str(exc)
    else:
        raise AssertionError("expected GitError to be raised")

    assert GitOperation.PUSH not in runner.operations
    assert GitOperation.CURRENT_BRANCH not in runner.operations


def test_ensure_repository_rejects_non_repository():
    runner = FakeRunner(
        responses={
            GitOperation.IS_INSIDE_WORK_TREE: failed(
                "fatal: not a git repository (or any of the parent directories): .git",
                returncode=128,
            )
        }
    )
    automation, _, _ = _automation(runner)

    try:
        automation.ensure_repository()
    except NotARepositoryError as exc:
        assert "not in a git repository" in str(exc)
    else:
        raise AssertionError("expected NotARepositoryError to be raised")


def test_ensure_repository_rejects_git_dir_itself():
    # Inside .git, rev-parse succeeds but prints "false".
    runner = FakeRunner(responses={GitOperation.IS_INSIDE_WORK_TREE: ok("false\n")})
    automation, _, _ = _automation(runner)

    try:
        automation.ensure_repository()
    except NotARepositoryError:
        pass
    else:
        raise AssertionError("expected NotARepositoryError to be raised")


def test_ensure_repository_reports_missing_git():
    runner = FakeRunner(
        responses={
            GitOperation.IS_INSIDE_WORK_TREE: CommandResult(
                status=ResultStatus.NOT_LAUNCHED,
                args=[],
                stderr="[Errno 2] No such file or directory: 'git'",
            )
        }
    )
    automation, _, _ = _automation(runner)

    try:
        automation.ensure_repository()
    except GitLaunchError as exc:
        assert "No such file or directory" in str(exc)
    else:
        raise AssertionError("expected GitLaunchError to be raised")


def test_current_branch_falls_back_for_unborn_branch():
    runner = FakeRunner(
        responses={
            GitOperation.CURRENT_BRANCH: failed("fatal: ambiguous argument 'HEAD'", returncode=128),
            GitOperation.UNBORN_BRANCH: ok("main\n"),
        }
    )
    automation, _, _ = _automation(runner)

    assert automation.current_branch() == "main"


def test_current_branch_reports_original_error_when_fallback_fails():
    runner = FakeRunner(
        responses={
            GitOperation.CURRENT_BRANCH: failed("fatal: ambiguous argument 'HEAD'", returncode=128),
            GitOperation.UNBORN_BRANCH: failed("fatal: ref HEAD is not a symbolic ref", returncode=128),
        }
    )
    automation, _, _ = _automation(runner)

    try:
        automation.current_branch()
    except GitError as exc:
        assert "ambiguous argument 'HEAD'" in str(exc)
    else:
        raise AssertionError("expected GitError to be raised")


def test_status_reports_branch_and_changes():
    runner = FakeRunner(
        responses={
            GitOperation.CURRENT_BRANCH: ok("feature\n"),
            GitOperation.STATUS: ok("?? notes.txt\n"),
        }
    )
    automation, _, _ = _automation(runner)

    status = automation.status()
    assert status.branch == "feature"
    assert status.has_changes is True
    assert status.lines() == ["Current branch: feature", "Has uncommitted changes: true"]
    assert all(not op.mutating for op in runner.operations)


def test_branch_operations_pass_through():
    runner = FakeRunner()
    automation, out, _ = _automation(runner)

    automation.create_branch("topic")
    automation.switch_branch("main")
    automation.delete_branch("topic")

    assert runner.operations == [
        GitOperation.CREATE_BRANCH,
        GitOperation.SWITCH_BRANCH,
        GitOperation.DELETE_BRANCH,
    ]
    assert [r.branch for r in runner.requests] == ["topic", "main", "topic"]
    assert "Deleted branch topic" in out.getvalue()


def test_branch_delete_failure_is_raised():
    runner = FakeRunner(
        responses={GitOperation.DELETE_BRANCH: failed("error: branch 'topic' not found.")}
    )
    automation, _, _ = _automation(runner)

    try:
        automation.delete_branch("topic")
    except GitError as exc:
        assert "branch 'topic' not found" in str(exc)
    else:
        raise AssertionError("expected GitError to be raised")


def test_run_checks_repository_before_anything_else(tmp_path):
    runner = FakeRunner(responses={GitOperation.IS_INSIDE_WORK_TREE: failed("fatal", returncode=128)})
    reporter, _, _ = _reporter()

    try:
        run(
            Invocation(action="commit"),
            reporter=reporter,
            runner=runner,
            settings_path=tmp_path / CONFIG_FILENAME,
        )
    except NotARepositoryError:
        pass
    else:
        raise AssertionError("expected NotARepositoryError to be raised")

    assert runner.operations == [GitOperation.IS_INSIDE_WORK_TREE]


def test_run_fails_on_bad_settings_before_running_git(tmp_path):
    path = tmp_path / CONFIG_FILENAME
    path.write_text("auto_pull = [\n")
    runner = FakeRunner()
    reporter, _, _ = _reporter()

    try:
        run(Invocation(action="status"), reporter=reporter, runner=runner, settings_path=path)
    except ConfigError:
        pass
    else:
        raise AssertionError("expected ConfigError to be raised")

    assert runner.requests == []


def test_run_status_prints_two_lines(tmp_path):
    runner = FakeRunner(responses={GitOperation.CURRENT_BRANCH: ok("main\n")})
    reporter, out, _ = _reporter()

    run(
        Invocation(action="status"),
        reporter=reporter,
        runner=runner,
        settings_path=tmp_path / CONFIG_FILENAME,
    )

    assert out.getvalue().splitlines() == [
        "Current branch: main",
        "Has uncommitted changes: false",
    ]


def test_run_init_writes_default_settings(tmp_path):
    path = tmp_path / CONFIG_FILENAME
    path.write_text(
        'default_remote = "upstream"\n'
        'commit_template = "chore: {}"\n'
        "auto_pull = false\n"
    )
    reporter, out, _ = _reporter()

    run(Invocation(action="init"), reporter=reporter, runner=FakeRunner(), settings_path=path)

    assert load_settings(path) == Settings()
    assert "Initialized configuration file" in out.getvalue()


def test_run_init_in_dry_run_leaves_file_alone(tmp_path):
    path = tmp_path / CONFIG_FILENAME
    reporter, out, _ = _reporter()

    run(
        Invocation(action="init", dry_run=True),
        reporter=reporter,
        runner=FakeRunner(),
        settings_path=path,
    )

    assert not path.exists()
    assert "[dry run]" in out.getvalue()


def test_run_applies_settings_file(tmp_path):
    path = tmp_path / CONFIG_FILENAME
    path.write_text(
        'default_remote = "upstream"\n'
        'commit_template = "chore: {}"\n'
        "auto_pull = false\n"
    )
    runner = FakeRunner(
        responses={
            GitOperation.STATUS: ok(" M foo.py\n"),
            GitOperation.CURRENT_BRANCH: ok("main\n"),
        }
    )
    reporter, _, _ = _reporter()

    run(Invocation(action="commit", message="msg"), reporter=reporter, runner=runner, settings_path=path)

    assert GitOperation.PULL not in runner.operations
    assert runner.find(GitOperation.PUSH).remote == "upstream"


def test_run_dispatches_branch_actions(tmp_path):
    runner = FakeRunner()
    reporter, _, _ = _reporter()

    run(
        Invocation(action="branch", branch_action="switch", name="release"),
        reporter=reporter,
        runner=runner,
        settings_path=tmp_path / CONFIG_FILENAME,
    )

    assert runner.operations == [GitOperation.IS_INSIDE_WORK_TREE, GitOperation.SWITCH_BRANCH]
    assert runner.find(GitOperation.SWITCH_BRANCH).branch == "release"


def test_dry_run_commit_only_runs_read_only_commands(monkeypatch, tmp_path):
    calls = []

    def fake_run(cmd, **kwargs):
        calls.append(cmd[1:])
        stdout = {
            "rev-parse --is-inside-work-tree": "true\n",
            "status --porcelain": " M foo.py\n",
            "rev-parse --abbrev-ref HEAD": "main\n",
        }.get(" ".join(cmd[1:]), "")
        return subprocess.CompletedProcess(args=cmd, returncode=0, stdout=stdout, stderr="")

    monkeypatch.setattr("git_automate.git_adapter.subprocess.run", fake_run)
    reporter, out, _ = _reporter()

    run(
        Invocation(action="commit", message="msg", dry_run=True),
        reporter=reporter,
        settings_path=tmp_path / CONFIG_FILENAME,
    )

    assert calls == [
        ["rev-parse", "--is-inside-work-tree"],
        ["status", "--porcelain"],
        ["rev-parse", "--abbrev-ref", "HEAD"],
    ]
    lines = out.getvalue().splitlines()
    assert "[dry run] git pull origin" in lines
    assert "[dry run] git add ." in lines
    assert "[dry run] git commit -m msg" in lines
    assert "[dry run] git push origin main" in lines


def test_run_init_replaces_malformed_settings(tmp_path):
    path = tmp_path / CONFIG_FILENAME
    path.write_text("auto_pull = [\n")
    reporter, _, _ = _reporter()

    run(Invocation(action="init"), reporter=reporter, runner=FakeRunner(), settings_path=path)

    assert load_settings(path) == Settings()
