"""CLI for applying editor operations to the stored project."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from manuscript.adapters.observability import configure_runtime_logging
from manuscript.adapters.project_snapshot import load_project_json, save_project_json
from manuscript.adapters.project_store_factory import create_project_store
from manuscript.application.editor import DocumentEditor, EditOutcome
from manuscript.application.inspector import read_inspector, word_count
from manuscript.domain.ports import PersistenceError


def _add_selection_args(parser: argparse.ArgumentParser, *, scene: bool = True) -> None:
    parser.add_argument("--chapter", type=int, default=None, help="1-based chapter position.")
    if scene:
        parser.add_argument(
            "--scene",
            type=int,
            default=None,
            help="1-based scene position inside the selected chapter.",
        )


def build_arg_parser() -> argparse.ArgumentParser:
    """Define CLI subcommands for project editing."""
    parser = argparse.ArgumentParser(description="Edit chapters and scenes of a manuscript.")
    parser.add_argument(
        "--db-path",
        default="",
        help="Snapshot store path (default: MANUSCRIPT_DB_PATH or work/local/manuscript.db).",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("show", help="Print the chapter and scene tree.")
    inspect = commands.add_parser("inspect", help="Print the inspector readout.")
    _add_selection_args(inspect)

    commands.add_parser("add-chapter", help="Append a chapter with one empty scene.")
    delete_chapter = commands.add_parser("delete-chapter", help="Delete a chapter.")
    _add_selection_args(delete_chapter, scene=False)

    add_scene = commands.add_parser("add-scene", help="Append an empty scene to a chapter.")
    _add_selection_args(add_scene, scene=False)
    delete_scene = commands.add_parser("delete-scene", help="Delete a scene.")
    _add_selection_args(delete_scene)

    edit = commands.add_parser("edit", help="Replace a scene's content.")
    _add_selection_args(edit)
    content = edit.add_mutually_exclusive_group(required=True)
    content.add_argument("--content", default=None, help="New scene content.")
    content.add_argument("--content-file", default=None, help="Read new content from a file.")

    export = commands.add_parser("export", help="Write the project snapshot to a JSON file.")
    export.add_argument("--output", required=True, help="Destination JSON path.")
    import_ = commands.add_parser("import", help="Replace the stored project from a JSON file.")
    import_.add_argument("--input", required=True, help="Source JSON path.")
    return parser


def _select_positions(editor: DocumentEditor, chapter: int | None, scene: int | None) -> None:
    if chapter is not None:
        chapters = editor.project.chapters
        if not 1 <= chapter <= len(chapters):
            raise SystemExit(f"Chapter {chapter} does not exist (project has {len(chapters)}).")
        _require_persisted(editor.select_chapter(chapters[chapter - 1].node_id))
    if scene is not None:
        scenes = editor.active_chapter.scenes
        if not 1 <= scene <= len(scenes):
            raise SystemExit(
                f"Scene {scene} does not exist in '{editor.active_chapter.title}' "
                f"(chapter has {len(scenes)})."
            )
        _require_persisted(editor.select_scene(scenes[scene - 1].node_id))


def _require_persisted(outcome: EditOutcome) -> EditOutcome:
    if outcome.commit_error is not None:
        raise SystemExit(f"Could not persist project: {outcome.commit_error}")
    return outcome


def _print_tree(editor: DocumentEditor) -> None:
    state = editor.state
    print(state.project.title)
    for chapter_index, chapter in enumerate(state.project.chapters, start=1):
        marker = "*" if chapter.node_id == state.selection.chapter_id else " "
        print(f"{marker} {chapter_index}. {chapter.title}")
        for scene_index, scene in enumerate(chapter.scenes, start=1):
            scene_marker = "*" if scene.node_id == state.selection.scene_id else " "
            words = word_count(scene.content)
            print(f"    {scene_marker} {scene_index}. {scene.title} ({words} words)")


def _print_inspector(editor: DocumentEditor) -> None:
    readout = read_inspector(editor.state)
    print(f"Chapter: {readout.chapter_title}")
    print(f"Scene: {readout.scene_title if readout.scene_title is not None else '-'}")
    print(f"Word Count: {readout.word_count}")


def _read_content(parsed: argparse.Namespace) -> str:
    if parsed.content_file is not None:
        return Path(str(parsed.content_file)).read_text(encoding="utf-8")
    return str(parsed.content)


def main(argv: list[str] | None = None) -> None:
    """Open the stored project, apply one operation, and print the result."""
    configure_runtime_logging()
    parser = build_arg_parser()
    parsed = parser.parse_args(argv)
    db_path_value = str(parsed.db_path).strip()
    db_path = Path(db_path_value) if db_path_value else None

    store = create_project_store(db_path=db_path)

    command = str(parsed.command)
    if command == "import":
        try:
            project = load_project_json(Path(str(parsed.input)))
            store.commit(project)
        except (OSError, PersistenceError) as exc:
            raise SystemExit(f"Could not import project: {exc}") from exc
        print(f"Imported project '{project.title}' ({len(project.chapters)} chapters)")
        return

    editor = DocumentEditor.open(store)
    if editor.startup_error is not None:
        raise SystemExit(f"Could not load stored project: {editor.startup_error}")

    _select_positions(
        editor,
        getattr(parsed, "chapter", None),
        getattr(parsed, "scene", None),
    )

    if command == "show":
        _print_tree(editor)
    elif command == "inspect":
        _print_inspector(editor)
    elif command == "add-chapter":
        _require_persisted(editor.add_chapter())
        print(f"Added {editor.active_chapter.title}")
    elif command == "delete-chapter":
        title = editor.active_chapter.title
        _require_persisted(editor.delete_chapter())
        print(f"Deleted {title}; active chapter is {editor.active_chapter.title}")
    elif command == "add-scene":
        _require_persisted(editor.add_scene())
        scene = editor.active_scene
        print(f"Added {scene.title if scene else '-'} to {editor.active_chapter.title}")
    elif command == "delete-scene":
        scene = editor.active_scene
        if scene is None:
            print(f"{editor.active_chapter.title} has no scenes", file=sys.stderr)
            return
        _require_persisted(editor.delete_scene())
        print(f"Deleted {scene.title} from {editor.active_chapter.title}")
    elif command == "edit":
        scene = editor.active_scene
        if scene is None:
            raise SystemExit(f"{editor.active_chapter.title} has no scene to edit.")
        _require_persisted(editor.edit_scene_content(_read_content(parsed)))
        _print_inspector(editor)
    elif command == "export":
        output_path = Path(str(parsed.output))
        try:
            save_project_json(output_path, editor.project)
        except OSError as exc:
            raise SystemExit(f"Could not export project: {exc}") from exc
        print(f"Wrote project snapshot: {output_path}")


if __name__ == "__main__":
    main()
