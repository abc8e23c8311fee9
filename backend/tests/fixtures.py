"""Test data builders and fakes"""

from callsheet.models import Cut, Scene, SceneList, Schedule


class RecordingPersistence:
    """In-memory persistence that records every write"""

    def __init__(self, schedule: Schedule, scenes: list[Scene] | None = None):
        self.schedule = schedule
        self.scenes = {s.id: s.model_copy(deep=True) for s in scenes or []}
        self.calls: list[tuple[str, object]] = []

    def save(self, schedule):
        self.calls.append(("save", schedule.gather_time))
        self.schedule = schedule.model_copy()

    def save_scenes(self, schedule_id, scenes):
        self.calls.append(("save_scenes", [s.id for s in scenes]))
        for scene in scenes:
            self.scenes[scene.id] = scene.model_copy(deep=True)
        return len(scenes)

    def create_scene(self, schedule_id, scene):
        self.calls.append(("create_scene", scene.id))
        self.scenes[scene.id] = scene.model_copy(deep=True)
        return scene

    def delete_scene(self, schedule_id, scene_id):
        self.calls.append(("delete_scene", scene_id))
        return self.scenes.pop(scene_id, None) is not None

    def set_order(self, schedule_id, scene_ids):
        self.calls.append(("set_order", list(scene_ids)))
        for index, scene_id in enumerate(scene_ids):
            self.scenes[scene_id].order = index

    def load(self, schedule_id):
        return self.schedule.model_copy()

    def load_scenes(self, schedule_id):
        scene_list = SceneList(scenes=[s.model_copy(deep=True) for s in self.scenes.values()])
        scene_list.sort()
        return scene_list

    def writes(self, name):
        return [payload for call, payload in self.calls if call == name]


def make_scene(order: int, duration: int, **fields) -> Scene:
    fields.setdefault("scene_number", str(order + 1))
    fields.setdefault("cuts", [Cut(cut_number="1")])
    return Scene(order=order, estimated_duration=duration, **fields)


def make_scenes(*durations: int) -> list[Scene]:
    return [make_scene(i, d) for i, d in enumerate(durations)]
