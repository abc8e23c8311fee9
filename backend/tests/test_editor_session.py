"""Unit tests for the schedule editor session"""

from callsheet.models import Schedule
from callsheet.services import CascadeService, ScheduleEditorSession
from tests.fixtures import RecordingPersistence, make_scenes


def _open(schedule, scenes=None):
    persistence = RecordingPersistence(schedule, scenes)
    session = ScheduleEditorSession(
        schedule,
        scenes or [],
        persistence,
        scene_duration=30,
        cut_duration=10,
    )
    return session, persistence


def _cascaded(gather_time, *durations):
    return CascadeService.recalculate(gather_time, make_scenes(*durations)).scenes


def test_end_to_end_quick_add_and_edit():
    """Test three quick-added scenes edited to 20/40/100 minutes end at 08:40"""
    schedule = Schedule(id="day1", project_id="proj1", gather_time="06:00")
    session, persistence = _open(schedule)

    added = [session.add_scene() for _ in range(3)]
    for scene, duration in zip(added, (20, 40, 100)):
        session.update_scene_duration(scene.id, duration)

    scenes = session.scenes
    assert [s.order for s in scenes] == [0, 1, 2]
    assert [s.scene_number for s in scenes] == ["1", "2", "3"]
    assert [(s.start_time, s.end_time) for s in scenes] == [
        ("06:00", "06:20"),
        ("06:20", "07:00"),
        ("07:00", "08:40"),
    ]
    assert scenes[-1].end_time == "08:40"
    assert session.schedule.shooting_end_time == "08:40"
    assert persistence.scenes[scenes[-1].id].end_time == "08:40"


def test_recalculate_twice_writes_once(schedule):
    """Test an unchanged recompute triggers no persistence write"""
    session, persistence = _open(schedule, make_scenes(30, 45, 60))

    assert session.recalculate() is True
    assert session.recalculate() is False

    assert len(persistence.writes("save_scenes")) == 1


def test_gather_time_change_shifts_every_scene(schedule):
    session, persistence = _open(schedule, _cascaded("07:00", 30, 45))

    assert session.set_gather_time("0800") is True

    assert [(s.start_time, s.end_time) for s in session.scenes] == [
        ("08:00", "08:30"),
        ("08:30", "09:15"),
    ]
    assert persistence.writes("save_scenes") == [[s.id for s in session.scenes]]
    assert persistence.schedule.gather_time == "08:00"


def test_blank_or_same_gather_time_is_ignored(schedule):
    session, persistence = _open(schedule, _cascaded("07:00", 30))

    assert session.set_gather_time("") is False
    assert session.set_gather_time("7") is False
    assert persistence.calls == []


def test_duration_edit_batches_changed_scenes(schedule):
    """Test one save call carries the edited scene and every later one"""
    scenes = _cascaded("07:00", 30, 45, 60)
    session, persistence = _open(schedule, scenes)

    session.update_scene_duration(scenes[1].id, "1h")

    assert persistence.writes("save_scenes") == [[scenes[1].id, scenes[2].id]]
    assert session.scenes[2].end_time == "09:30"


def test_unparsed_duration_text_keeps_previous_value(schedule):
    scenes = _cascaded("07:00", 30)
    session, persistence = _open(schedule, scenes)

    assert session.update_scene_duration(scenes[0].id, "soon") is False

    assert session.scenes[0].estimated_duration == 30
    assert persistence.calls == []


def test_move_scene_sets_order_and_recascades(schedule):
    scenes = _cascaded("07:00", 30, 45, 60)
    session, persistence = _open(schedule, scenes)

    assert session.move_scene(2, 0) is True

    moved = session.scenes
    assert [s.id for s in moved] == [scenes[2].id, scenes[0].id, scenes[1].id]
    assert [s.order for s in moved] == [0, 1, 2]
    assert moved[0].start_time == "07:00"
    assert moved[0].end_time == "08:00"
    assert persistence.writes("set_order") == [[s.id for s in moved]]


def test_move_scene_to_same_place_is_noop(schedule):
    session, persistence = _open(schedule, _cascaded("07:00", 30, 45))

    assert session.move_scene(1, 1) is False
    assert persistence.calls == []


def test_delete_scene_closes_up_order(schedule):
    scenes = _cascaded("07:00", 30, 45, 60)
    session, persistence = _open(schedule, scenes)

    assert session.delete_scene(scenes[0].id) is True

    remaining = session.scenes
    assert [s.order for s in remaining] == [0, 1]
    assert remaining[0].start_time == "07:00"
    assert persistence.writes("delete_scene") == [scenes[0].id]
    assert session.delete_scene("missing") is False


def test_observers_notified_only_on_change(schedule):
    session, _ = _open(schedule, _cascaded("07:00", 30))
    seen = []
    unsubscribe = session.subscribe(seen.append)

    session.recalculate()
    session.add_scene()
    unsubscribe()
    session.add_scene()

    assert len(seen) == 1
    assert len(seen[0]) == 2


def test_cut_edits_do_not_shift_scene_times(schedule):
    scenes = _cascaded("07:00", 30, 45)
    session, persistence = _open(schedule, scenes)

    cut = session.add_cut(scenes[0].id)
    session.update_cut(scenes[0].id, cut.id, estimated_duration="15m", description="wide")
    session.move_cut(scenes[0].id, 1, 0)

    first = session.scenes[0]
    assert [c.cut_number for c in first.cuts] == ["2", "1"]
    assert first.cuts[0].estimated_duration == 15
    assert first.cuts[0].description == "wide"
    assert (first.start_time, first.end_time) == ("07:00", "07:30")
    assert all(ids == [scenes[0].id] for ids in persistence.writes("save_scenes"))

    assert session.delete_cut(scenes[0].id, cut.id) is True
    assert len(session.scenes[0].cuts) == 1


def test_cuts_are_not_shared_between_scenes(schedule):
    scenes = _cascaded("07:00", 30, 45)
    session, _ = _open(schedule, scenes)

    session.update_cut(scenes[0].id, scenes[0].cuts[0].id, description="changed")

    assert session.scenes[1].cuts[0].description == ""


def test_negative_cut_duration_is_clamped(schedule):
    scenes = _cascaded("07:00", 30)
    session, _ = _open(schedule, scenes)

    cut_id = scenes[0].cuts[0].id
    session.update_cut(scenes[0].id, cut_id, estimated_duration=10)
    session.update_cut(scenes[0].id, cut_id, estimated_duration=-5)

    assert session.scenes[0].cuts[0].estimated_duration == 0
    assert session.scenes[0].total_cut_duration == 0


def test_recalculate_repairs_stale_end_time(schedule):
    """Test current scene times with a stale stored end time only rewrite the schedule"""
    schedule.shooting_end_time = "12:00"
    session, persistence = _open(schedule, _cascaded("07:00", 30, 45))

    assert session.recalculate() is True

    assert session.schedule.shooting_end_time == "08:15"
    assert persistence.writes("save_scenes") == []
    assert len(persistence.writes("save")) == 1
    assert session.recalculate() is False
