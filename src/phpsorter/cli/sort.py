"""
CLI Sort Command

sort: reorder imports, trait uses, constants and properties in PHP files.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional

import typer

from phpsorter.diagnostics import diagnostics_for_file, load_diagnostics
from phpsorter.exceptions import ConfigError, DiagnosticsError, PhpSorterError
from phpsorter.logging_config import logger
from phpsorter.mutation import FileEditor
from phpsorter.parser.config import validate_extension
from phpsorter.paths import get_paths
from phpsorter.schemas import SorterConfig
from phpsorter.sorting import ElementSorter
from phpsorter.user_config import get_user_config
from .config import CLIConfig
from .output import get_console, print_error, print_json

console = get_console()


def discover_files(paths: List[Path], recursive: bool, extensions: List[str]) -> List[Path]:
    """
    Expand CLI paths into the files to sort.

    Explicit files are taken as given; directories contribute files with a
    configured extension (their subdirectories only with recursive).
    """
    for extension in extensions:
        validate_extension(extension)

    found: List[Path] = []
    seen = set()
    for path in paths:
        if path.is_file():
            candidates = [path]
        else:
            pattern = "**/*" if recursive else "*"
            candidates = sorted(
                p for p in path.glob(pattern)
                if p.is_file() and p.suffix.lower() in extensions
            )
        for candidate in candidates:
            key = candidate.resolve()
            if key not in seen:
                seen.add(key)
                found.append(candidate)
    return found


def sort_file(
    path: Path,
    config: SorterConfig,
    editor: FileEditor,
    diagnostics: Optional[Dict[str, list]],
    write: bool,
    show_diff: bool,
) -> Dict[str, Any]:
    """
    Sort one file and optionally write it back.

    Returns:
        Result entry for the command output
    """
    buffer, original = editor.load(str(path))
    provider = diagnostics_for_file(diagnostics, str(path)) if diagnostics is not None else None

    report = ElementSorter(buffer, config, provider).sort_elements()
    modified = editor.render(buffer)
    changed = report.changed and modified != original

    result: Dict[str, Any] = {
        "file": str(path),
        "changed": changed,
        "written": False,
        "report": report.model_dump(exclude={"file_path"}),
    }

    if changed and show_diff:
        result["diff"] = editor.generate_unified_diff(
            str(path), original, modified, max_diff_lines=CLIConfig.DEFAULT_MAX_DIFF_LINES
        )

    if changed and write:
        success, backup_path = editor.save(str(path), buffer)
        if not success:
            raise OSError(f"failed to write {path}")
        result["written"] = True
        if backup_path:
            result["backup"] = backup_path

    return result


def sort_cmd(
    paths: List[Path] = typer.Argument(..., help="PHP files or directories to sort", exists=True),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="Recursively sort subdirectories"),
    check: bool = typer.Option(False, "--check", help="Write nothing; exit 1 if a file would change"),
    diff: bool = typer.Option(False, "--diff", help="Show a unified diff of each change"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
    diagnostics_file: Optional[Path] = typer.Option(
        None,
        "--diagnostics",
        help="JSON report of an external analyser; flags unused imports instead of the built-in check",
        dir_okay=False,
    ),
    default_visibility: Optional[str] = typer.Option(
        None, "--default-visibility", help="Visibility assumed for members without a modifier"
    ),
    remove_unused: Optional[bool] = typer.Option(
        None, "--remove-unused/--no-remove-unused", help="Delete unused namespace imports"
    ),
):
    """
    Sort namespace imports, trait uses, constants and properties in place.

    Examples:
        phpsorter sort src/Model/User.php
        phpsorter sort src/ --recursive
        phpsorter sort src/ -r --check --diff
    """
    as_json = CLIConfig.is_machine_mode() or json_output
    user_config = get_user_config()

    try:
        config = user_config.sorter_config({
            "default_visibility": default_visibility,
            "remove_unused_imports": remove_unused,
        })
        files = discover_files(paths, recursive, user_config.get("files.extensions", [".php"]))
        diagnostics = load_diagnostics(str(diagnostics_file)) if diagnostics_file else None
    except (ConfigError, DiagnosticsError) as e:
        logger.error(f"Sort setup failed: {e}")
        code = "CONFIG_ERROR" if isinstance(e, ConfigError) else "DIAGNOSTICS_ERROR"
        print_error(code, str(e), as_json=as_json)
        raise typer.Exit(code=1)

    editor = FileEditor({
        "backup_enabled": bool(user_config.get("files.backup", False)),
        "backup_dir": str(get_paths().backups_dir),
    })

    results: List[Dict[str, Any]] = []
    errors: List[Dict[str, str]] = []
    for path in files:
        try:
            results.append(sort_file(path, config, editor, diagnostics, not check, diff))
        except (PhpSorterError, OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to sort {path}: {e}")
            errors.append({"file": str(path), "message": str(e)})

    changed = [result for result in results if result["changed"]]

    if as_json:
        print_json({
            "command": "sort",
            "status": "error" if errors else "success",
            "check": check,
            "files_checked": len(results),
            "files_changed": len(changed),
            "files": results,
            "errors": errors,
        }, minified=CLIConfig.is_machine_mode())
    else:
        for result in changed:
            verb = "Would sort" if check else "Sorted"
            console.print(f"[yellow]{verb}[/yellow] [cyan]{result['file']}[/cyan]")
            if "diff" in result:
                typer.echo(result["diff"])
        for error in errors:
            console.print(f"[red]Error: {error['file']}: {error['message']}[/red]")
        if not files:
            console.print("[yellow]No PHP files found[/yellow]")
        elif not changed and not errors:
            console.print(f"[green]{len(results)} file(s) already sorted[/green]")

    if errors or (check and changed):
        raise typer.Exit(code=1)
