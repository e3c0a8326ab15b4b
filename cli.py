import argparse
import datetime
import logging
import shutil

from config import YamlConfig
from db import SessionRepository, open_store
from models import WorkoutType
from tools import WeightConverter
from tracker_service import TrackerService


def _tracker(db_path: str, yaml_path: str = "settings.yaml") -> TrackerService:
    settings = YamlConfig(yaml_path).settings()
    return TrackerService(open_store(db_path), settings)


def export_workouts(db_path: str, fmt: str, output_path: str) -> None:
    repo = SessionRepository(open_store(db_path))
    sessions = repo.load()
    if fmt == "csv":
        data = repo.export_csv(sessions)
    else:
        data = repo.export_json(sessions)
    with open(output_path, "w", encoding="utf-8", newline="") as f:
        f.write(data)


def backup_db(db_path: str, backup_path: str) -> None:
    shutil.copy(db_path, backup_path)


def restore_db(backup_path: str, db_path: str) -> None:
    shutil.copy(backup_path, db_path)


def list_workouts(db_path: str) -> list[str]:
    tracker = _tracker(db_path)
    lines = []
    for s in tracker.statistics.history():
        lines.append(
            f"{s.id}  {s.date.date().isoformat()}  {s.type.value:<5}  "
            f"{len(s.exercises)} exercises  {s.total_sets} sets"
        )
    return lines


def progress_report(db_path: str, exercise: str) -> list[str]:
    summary = _tracker(db_path).progression_summary(exercise)
    if not summary["points"]:
        return [f"No progression data for {exercise}"]
    lines = [f"{p['date'][:10]}  {p['weight']:g}" for p in summary["points"]]
    lines.append(f"Highest: {summary['max_weight']:g}  Progress: {summary['label']}")
    return lines


def demo_data(db_path: str, yaml_path: str) -> bool:
    """Populate the store with a demo workout if it holds none."""
    tracker = _tracker(db_path, yaml_path)
    if tracker.list_sessions():
        print("Database already contains workouts")
        return False
    tracker.create_draft(WorkoutType.UPPER, ["Bench Press", "Pull ups"])
    tracker.add_set_to_draft(0, 135, 8)
    tracker.add_set_to_draft(0, 145, 6)
    tracker.add_set_to_draft(1, 0, 10)
    tracker.commit_draft(save=True)
    tracker.add_custom_exercise(WorkoutType.PUSH, "Cable Crossover")
    print("Demo data inserted")
    return True


def main() -> None:
    parser = argparse.ArgumentParser(description="Gym tracker utility commands")
    parser.add_argument("--yaml", default="settings.yaml")
    sub = parser.add_subparsers(dest="cmd", required=True)

    srv = sub.add_parser("serve")
    srv.add_argument("--db", default=None)
    srv.add_argument("--host", default="127.0.0.1")
    srv.add_argument("--port", type=int, default=8000)

    lst = sub.add_parser("list")
    lst.add_argument("--db", default="workout.db")

    exp = sub.add_parser("export")
    exp.add_argument("--db", default="workout.db")
    exp.add_argument("--fmt", choices=["csv", "json"], default="json")
    exp.add_argument("--out", default=None)

    bkp = sub.add_parser("backup")
    bkp.add_argument("--db", default="workout.db")
    bkp.add_argument("--out", default="backup.db")

    rst = sub.add_parser("restore")
    rst.add_argument("--in", dest="src", default="backup.db")
    rst.add_argument("--db", default="workout.db")

    demo = sub.add_parser("demo")
    demo.add_argument("--db", default="workout.db")

    prog = sub.add_parser("progress")
    prog.add_argument("exercise")
    prog.add_argument("--db", default="workout.db")

    conv = sub.add_parser("convert")
    conv.add_argument("--weight", type=float, required=True)
    conv.add_argument("--unit", choices=["kg", "lb"], required=True)

    args = parser.parse_args()
    settings = YamlConfig(args.yaml).settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.cmd == "serve":
        import uvicorn
        from rest_api import create_app

        uvicorn.run(create_app(args.db, args.yaml), host=args.host, port=args.port)
    elif args.cmd == "list":
        for line in list_workouts(args.db):
            print(line)
    elif args.cmd == "export":
        out = args.out or f"workouts_{datetime.date.today().isoformat()}.{args.fmt}"
        export_workouts(args.db, args.fmt, out)
        print(f"Exported to {out}")
    elif args.cmd == "backup":
        backup_db(args.db, args.out)
    elif args.cmd == "restore":
        restore_db(args.src, args.db)
    elif args.cmd == "demo":
        demo_data(args.db, args.yaml)
    elif args.cmd == "progress":
        for line in progress_report(args.db, args.exercise):
            print(line)
    elif args.cmd == "convert":
        if args.unit == "kg":
            print(f"{args.weight} kg = {WeightConverter.kg_to_lb(args.weight)} lb")
        else:
            print(f"{args.weight} lb = {WeightConverter.lb_to_kg(args.weight)} kg")


if __name__ == "__main__":
    main()
