import os
import signal

import pytest

from tmux_tutorial.lifecycle import NamespaceLease, TerminationRequested
from tmux_tutorial.steps import AwaitAttach, Build, CreateSession, Scenario


def test_qualify_and_owns(lease):
    assert lease.qualify("panes") == "tut-panes"
    assert lease.qualify("tut-panes") == "tut-panes"
    assert lease.owns("tut-x")
    assert not lease.owns("tut")
    assert not lease.owns("my-tut-notes")


def test_sweep_kills_only_namespaced_sessions(lease, fake_tmux, injector, message_dir):
    for name in ("work", "tut", "my-tut-notes", "tut-basics", "tut-panes"):
        fake_tmux.add_session(name)
    injector.prepare(["hello"])

    result = lease.sweep()

    assert sorted(result.sessions_killed) == ["tut-basics", "tut-panes"]
    assert list(fake_tmux.sessions) == ["work", "tut", "my-tut-notes"]
    assert result.artifacts_removed == 1
    assert list(message_dir.iterdir()) == []


def test_sweep_is_idempotent(lease, fake_tmux):
    fake_tmux.add_session("tut-a")
    fake_tmux.add_session("work")

    lease.sweep()
    second = lease.sweep()

    assert second.sessions_killed == []
    assert second.sessions_failed == []
    assert list(fake_tmux.sessions) == ["work"]


def test_sweep_with_no_server(lease):
    result = lease.sweep()
    assert result.sessions_killed == []
    assert result.to_dict()["sessions_failed"] == 0


def test_sweep_keeps_going_after_a_failed_kill(lease, fake_tmux):
    fake_tmux.add_session("tut-a")
    fake_tmux.add_session("tut-b")
    fake_tmux.fail_next("kill-session", stderr="permission denied")

    result = lease.sweep()

    assert result.sessions_failed == ["tut-a"]
    assert result.sessions_killed == ["tut-b"]


def test_sweep_survives_list_failure(lease, fake_tmux, injector, message_dir):
    fake_tmux.add_session("tut-a")
    fake_tmux.fail_next("list-sessions", stderr="protocol version mismatch")
    injector.prepare(["x"])

    result = lease.sweep()

    assert result.sessions_killed == []
    assert result.artifacts_removed == 1


def test_scope_sweeps_on_normal_exit(driver, fake_tmux):
    with NamespaceLease(driver) as lease:
        driver.create_session(lease.qualify("a"))
    assert fake_tmux.sessions == {}


def test_scope_sweeps_on_error_and_propagates(driver, fake_tmux):
    with pytest.raises(RuntimeError):
        with NamespaceLease(driver) as lease:
            driver.create_session(lease.qualify("a"))
            raise RuntimeError("boom")
    assert fake_tmux.sessions == {}


def test_interrupt_during_attach_leaves_no_namespaced_sessions(engine, lease, fake_tmux, message_dir):
    fake_tmux.add_session("work")

    def interrupted(tmux, session):
        raise KeyboardInterrupt

    fake_tmux.on_attach(interrupted)
    scenario = Scenario(1, "Interrupted", (
        Build((CreateSession("a", message=("hello",)),)),
        AwaitAttach("a"),
    ))

    with pytest.raises(KeyboardInterrupt):
        with lease:
            engine.run_scenario(scenario)

    assert list(fake_tmux.sessions) == ["work"]
    assert list(message_dir.iterdir()) == []


def test_sigterm_becomes_termination_requested_and_sweeps(driver, fake_tmux):
    previous = signal.getsignal(signal.SIGTERM)

    with pytest.raises(TerminationRequested) as excinfo:
        with NamespaceLease(driver) as lease:
            driver.create_session(lease.qualify("a"))
            os.kill(os.getpid(), signal.SIGTERM)

    assert excinfo.value.signum == signal.SIGTERM
    assert isinstance(excinfo.value, KeyboardInterrupt)
    assert fake_tmux.sessions == {}
    assert signal.getsignal(signal.SIGTERM) is previous
