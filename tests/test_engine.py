import pytest

from tmux_tutorial.engine import Stage
from tmux_tutorial.scenarios import SCENARIOS, scenario
from tmux_tutorial.steps import (
    AwaitAttach,
    Build,
    CreateSession,
    Explain,
    FocusWindow,
    Report,
    Scenario,
    SessionExists,
    Verify,
    WindowCountAtLeast,
)

USER_SESSIONS = ("work", "tut", "my-tut-notes")


@pytest.fixture
def user_sessions(fake_tmux):
    for name in USER_SESSIONS:
        fake_tmux.add_session(name)


def assert_only_user_sessions_left(fake_tmux):
    assert sorted(fake_tmux.sessions) == sorted(USER_SESSIONS)
    assert all(name.startswith("tut-") for name in fake_tmux.created)
    assert all(name.startswith("tut-") for name in fake_tmux.killed)


def test_scenarios_are_numbered_in_order():
    assert [s.number for s in SCENARIOS] == list(range(1, 9))
    assert scenario(4).title == "Panes (Split Screen)"
    with pytest.raises(KeyError):
        scenario(9)


def test_chapter_1_kills_its_session_and_saves(engine, fake_tmux, progress, user_sessions, message_dir):
    outcome = engine.run_scenario(scenario(1))

    assert fake_tmux.attaches == ["tut-basics"]
    assert [c.passed for c in outcome.checks] == [True]
    assert progress.load() == 1
    assert outcome.stages[-1] is Stage.PERSISTED
    assert_only_user_sessions_left(fake_tmux)
    assert list(message_dir.iterdir()) == []


def test_chapter_2_rename_is_detected(engine, fake_tmux, progress):
    fake_tmux.on_attach(lambda tmux, session: None)
    fake_tmux.on_attach(lambda tmux, session: tmux.rename_session(session, "tut-my-project"))

    outcome = engine.run_scenario(scenario(2))

    assert fake_tmux.attaches == ["tut-project-a", "tut-rename-me"]
    assert outcome.all_passed
    assert progress.load() == 2


def test_attach_falls_back_to_renamed_session(engine, fake_tmux):
    renamed_early = Scenario(2, "Fallback", (
        Build((CreateSession("my-project"),)),
        AwaitAttach("rename-me", fallbacks=("my-project",)),
    ))

    engine.run_scenario(renamed_early)

    assert fake_tmux.attaches == ["tut-my-project"]


def test_chapter_2_without_rename_fails_but_persists(engine, fake_tmux, progress):
    outcome = engine.run_scenario(scenario(2))

    assert [c.passed for c in outcome.checks] == [False]
    assert progress.load() == 2


def test_chapter_3_builds_named_windows(engine, fake_tmux):
    seen = {}

    def look(tmux, session):
        seen["windows"] = tmux.window_names(session)
        seen["current"] = tmux.sessions[session].current

    def do_challenge(tmux, session):
        tmux.new_window(session, "bash")
        tmux.rename_window(session, "bash", "new-window")
        tmux.close_window(session, "delete-me")

    fake_tmux.on_attach(look)
    fake_tmux.on_attach(do_challenge)

    outcome = engine.run_scenario(scenario(3))

    assert seen == {"windows": ["editor", "server", "logs"], "current": 0}
    assert [c.passed for c in outcome.checks] == [True, True]
    assert outcome.reported


def test_chapter_3_partial_challenge_skips_report(engine, fake_tmux):
    fake_tmux.on_attach(lambda tmux, session: None)
    fake_tmux.on_attach(lambda tmux, session: tmux.new_window(session, "new-window"))

    outcome = engine.run_scenario(scenario(3))

    assert [c.passed for c in outcome.checks] == [True, False]
    assert not outcome.reported


def test_chapter_4_counts_panes(engine, fake_tmux):
    seen = {}
    fake_tmux.on_attach(lambda tmux, session: seen.update(tmux.pane_counts(session)))
    fake_tmux.on_attach(lambda tmux, session: tmux.split(session, times=3))

    outcome = engine.run_scenario(scenario(4))

    assert seen == {"bash": 3}
    assert outcome.checks[0].passed
    assert outcome.checks[0].actual == 4


def test_chapter_4_soft_failure_still_persists(engine, fake_tmux, progress):
    fake_tmux.on_attach(lambda tmux, session: None)
    fake_tmux.on_attach(lambda tmux, session: tmux.split(session))

    outcome = engine.run_scenario(scenario(4))

    assert not outcome.checks[0].passed
    assert outcome.checks[0].actual == 2
    assert progress.load() == 4


def test_chapter_4_sessions_are_sized(engine, fake_tmux, settings):
    engine.run_scenario(scenario(4))

    new_sessions = [call for call in fake_tmux.calls if call[1] == "new-session"]
    assert new_sessions
    for call in new_sessions:
        assert call[call.index("-x") + 1] == str(settings.width)
        assert call[call.index("-y") + 1] == str(settings.height)


def test_chapter_5_injects_scrollback(engine, fake_tmux, message_dir):
    contents = []
    fake_tmux.on_attach(lambda tmux, session: contents.extend(p.read_text() for p in message_dir.iterdir()))

    engine.run_scenario(scenario(5))

    [text] = contents
    assert "Line 1: The quick brown fox jumps over the lazy dog" in text
    assert "Line 100: The quick brown fox" in text
    assert 'Find "Line 50"' in text


@pytest.mark.parametrize("number", [5, 6, 7])
def test_single_attach_chapters(engine, fake_tmux, progress, number, user_sessions):
    outcome = engine.run_scenario(scenario(number))

    assert len(fake_tmux.attaches) == 1
    assert outcome.checks == []
    assert progress.load() == number
    assert_only_user_sessions_left(fake_tmux)


def test_chapter_8_workspace_and_capstone(engine, fake_tmux, pauses, progress):
    seen = {}

    def look(tmux, session):
        seen["windows"] = tmux.window_names(session)
        seen["panes"] = tmux.pane_counts(session)
        seen["layout"] = tmux.sessions[session].window("monitor").layout
        seen["current"] = tmux.sessions[session].current

    def capstone(tmux, session):
        tmux.new_window(session, "second")
        tmux.split(session, "second")

    fake_tmux.on_attach(look)
    fake_tmux.on_attach(capstone)

    outcome = engine.run_scenario(scenario(8))

    assert seen == {
        "windows": ["editor", "server", "monitor"],
        "panes": {"editor": 1, "server": 2, "monitor": 4},
        "layout": "tiled",
        "current": 0,
    }
    assert [(c.passed, c.actual) for c in outcome.checks] == [(True, None), (True, 2), (True, 3)]
    assert outcome.reported
    assert progress.load() == 8
    # Last chapter does not pause at the end
    assert "Press Enter to continue..." not in pauses


def test_chapter_8_killed_final_session_is_informational(engine, fake_tmux):
    fake_tmux.on_attach(lambda tmux, session: None)
    fake_tmux.on_attach(lambda tmux, session: tmux.sessions.pop(session))

    outcome = engine.run_scenario(scenario(8))

    # The gate fails and the count checks are skipped
    assert [c.passed for c in outcome.checks] == [False]
    assert not outcome.reported


def test_every_chapter_leaves_user_sessions_alone(engine, fake_tmux, user_sessions, message_dir):
    outcomes = engine.run_from(1)

    assert [o.number for o in outcomes] == list(range(1, 9))
    assert all(o.persisted for o in outcomes)
    assert_only_user_sessions_left(fake_tmux)
    assert list(message_dir.iterdir()) == []


def test_run_from_starts_midway(engine, fake_tmux):
    outcomes = engine.run_from(7)
    assert [o.number for o in outcomes] == [7, 8]


def test_first_construction_failure_skips_rest_of_scenario(engine, fake_tmux, progress, pauses):
    fake_tmux.fail_next("new-session")

    outcome = engine.run_scenario(scenario(3))

    assert outcome.aborted
    assert fake_tmux.attaches == []
    assert outcome.checks == []
    assert progress.load() == 3
    assert pauses == ["Press Enter to continue..."]


def test_advisory_failure_is_not_fatal(engine, fake_tmux):
    fake_tmux.fail_next("select-window")
    custom = Scenario(1, "Advisory", (
        Build((CreateSession("a", window="one"), FocusWindow("a", "missing"))),
        AwaitAttach("a"),
        Verify(SessionExists("a"), passed="ok"),
    ))

    outcome = engine.run_scenario(custom)

    assert not outcome.aborted
    assert fake_tmux.attaches == ["tut-a"]
    assert outcome.all_passed


def test_later_construction_failure_continues(engine, fake_tmux):
    custom = Scenario(1, "Later failure", (
        Build((CreateSession("a"),)),
        AwaitAttach("a"),
        Build((CreateSession("b"),)),
        AwaitAttach("b"),
    ))
    fake_tmux.on_attach(lambda tmux, session: tmux.fail_next("new-session"))

    outcome = engine.run_scenario(custom)

    assert not outcome.aborted
    # tut-b was never created, so its attach is skipped as not found
    assert fake_tmux.attaches == ["tut-a"]


def test_unwritable_message_dir_degrades_to_plain_shell(engine, fake_tmux, message_dir):
    message_dir.rmdir()

    outcome = engine.run_scenario(Scenario(1, "No messages", (
        Build((CreateSession("a", message=("hello",)),)),
        AwaitAttach("a"),
    )))

    assert not outcome.aborted
    assert fake_tmux.attaches == ["tut-a"]
    assert fake_tmux.startup_commands == []


def test_report_requires_every_check_in_segment(engine, fake_tmux):
    custom = Scenario(1, "Report", (
        Build((CreateSession("a"),)),
        Verify(SessionExists("a")),
        Verify(WindowCountAtLeast("a", 2)),
        Report("all good"),
        Build((CreateSession("b"),)),
        Verify(SessionExists("b")),
        Report("segment two good"),
    ))

    outcome = engine.run_scenario(custom)

    assert [c.passed for c in outcome.checks] == [True, False, True]
    assert outcome.reported


def test_explain_only_scenario_still_persists(engine, progress):
    outcome = engine.run_scenario(Scenario(6, "Talk", (Explain(("hello",)),)))
    assert outcome.persisted
    assert progress.load() == 6
