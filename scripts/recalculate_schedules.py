#!/usr/bin/env python3
"""
recalculate_schedules.py — Re-run the scene time cascade over stored schedules.

Useful after editing scenes.json files by hand or restoring a backup, when
stored start/end times may no longer chain from the gather time.

Usage examples
--------------
# Report which schedules are out of date, write nothing
  python recalculate_schedules.py --dry-run

# Fix every schedule of one project
  python recalculate_schedules.py --project 3f2a9c1b7d40

# Fix a single schedule
  python recalculate_schedules.py --schedule 8e1d02aa4b19
"""

from __future__ import annotations

import argparse
import sys

from callsheet.config import settings
from callsheet.services import CascadeService, ProjectService, ScheduleEditorSession, ScheduleService
from callsheet.services.project_service import validate_record_id


def _schedule_ids(args: argparse.Namespace) -> list[str]:
    if args.schedule:
        return [args.schedule]
    if args.project:
        validate_record_id(args.project, "project")
        return [s.id for s in ScheduleService.list_for_project(args.project)]
    ids: list[str] = []
    for project in ProjectService.list_all():
        ids.extend(s.id for s in ScheduleService.list_for_project(project.id))
    return ids


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Recompute scene start/end times from gather times.")
    target = parser.add_mutually_exclusive_group()
    target.add_argument("--project", help="only schedules of this project id")
    target.add_argument("--schedule", help="only this schedule id")
    parser.add_argument("--dry-run", action="store_true", help="report without writing")
    args = parser.parse_args(argv)

    print(f"Data directory: {settings.data_dir}")
    try:
        schedule_ids = _schedule_ids(args)
    except ValueError as exc:
        print(f"  {exc}", file=sys.stderr)
        return 1

    stale = 0
    for schedule_id in schedule_ids:
        try:
            schedule = ScheduleService.load(schedule_id)
        except ValueError as exc:
            print(f"  {schedule_id}: {exc}", file=sys.stderr)
            continue
        if schedule is None:
            print(f"  {schedule_id}: not found", file=sys.stderr)
            continue

        scenes = ScheduleService.load_scenes(schedule_id).scenes
        result = CascadeService.recalculate(schedule.gather_time, scenes)
        end_time = CascadeService.shooting_end_time(schedule.gather_time, result.scenes)
        if not result.changed and end_time == schedule.shooting_end_time:
            print(f"  {schedule_id}: up to date ({len(scenes)} scene(s))")
            continue

        stale += 1
        print(f"  {schedule_id}: {len(result.changed_ids)} scene(s) out of date, end time {end_time or '-'}")
        if args.dry_run:
            continue

        with ScheduleService.lock(schedule_id):
            session = ScheduleEditorSession.open(schedule_id)
            if session is not None:
                session.recalculate()

    print(f"{stale} schedule(s) {'need' if args.dry_run else 'were'} recalculated")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
