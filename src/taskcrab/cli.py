"""
Command Line Interface for TaskCrab.
"""

import click
from pathlib import Path
from .version import VERSION
from .config import load_settings, log_level_for
from .data import TaskContext, LoadStatus
from .logs import setup_logging
from .models import Task, DueDate, MAX_PRIORITY, DEFAULT_PRIORITY
from .recovery import FatalError

# Most urgent first
PRIORITY_COLORS = {
    5: (255, 51, 51),
    4: (255, 128, 0),
    3: (255, 204, 0),
    2: (128, 204, 51),
    1: (51, 204, 51),
}

def priority_color(priority: int):
    return PRIORITY_COLORS.get(priority, PRIORITY_COLORS[MAX_PRIORITY])

def priority_meter(priority: int) -> str:
    """Filled dots up to the priority, hollow dots after it."""
    return "".join("●" if i <= priority else "○" for i in range(1, MAX_PRIORITY + 1))

def format_task_row(index: int, task: Task, color: bool = True) -> str:
    dot = "●"
    if color:
        dot = click.style(dot, fg=priority_color(task.priority))
    row = f"{index:>3}  {dot}  {task.name}"
    due = task.due_date_display()
    if due:
        row += f"  📅 {due}"
    return f"{row}  {priority_meter(task.priority)}"

def _open_context(ctx) -> TaskContext:
    return TaskContext(ctx.obj["settings"], path=ctx.obj["file"])

def _report_load(context: TaskContext):
    result = context.load_result
    if result.status in (LoadStatus.CORRUPT, LoadStatus.READ_ERROR):
        click.echo(f"⚠️  Warning: could not load tasks, starting empty: {result.error}", err=True)

def _report_save(store):
    if store.last_save is not None and not store.last_save.ok:
        click.echo(f"⚠️  Warning: tasks not saved: {store.last_save.error}", err=True)


@click.group()
@click.version_option(version=VERSION, prog_name="taskcrab")
@click.option('-f', '--file', 'tasks_file', type=click.Path(dir_okay=False, path_type=Path), help='Task file to use instead of the configured one')
@click.option('-c', '--config', 'config_path', type=click.Path(dir_okay=False, path_type=Path), help='YAML config file')
@click.pass_context
def main(ctx, tasks_file, config_path):
    """
    TaskCrab - pinch your tasks away.

    A small to-do list kept in a JSON file, ordered by priority.
    """
    try:
        settings = load_settings(config_path)
    except FatalError as e:
        raise click.ClickException(str(e))
    setup_logging(log_level_for(settings), settings.log_dir)
    ctx.ensure_object(dict)
    ctx.obj['settings'] = settings
    ctx.obj['file'] = tasks_file


@main.command()
@click.argument('name', nargs=-1)
@click.option('-p', '--priority', type=click.IntRange(1, MAX_PRIORITY, clamp=True), default=DEFAULT_PRIORITY, show_default=True, help='1 (lowest) to 5 (most urgent)')
@click.option('--month', default='', help='Due month (MM)')
@click.option('--day', default='', help='Due day (DD)')
@click.option('--year', default='', help='Due year (YYYY)')
@click.pass_context
def add(ctx, name, priority, month, day, year):
    """Add a task."""
    name = " ".join(name).strip()
    if not name:
        click.echo("❌ Task name is empty, nothing added")
        return

    due_date = DueDate.from_strings(month, day, year)
    context = _open_context(ctx)
    with context as store:
        _report_load(context)
        task = store.add(name, priority, due_date)
        click.echo(f"✅ Added: {task.name}")
    _report_save(store)


@main.command('list')
@click.option('--no-color', is_flag=True, help='Plain output')
@click.pass_context
def list_tasks(ctx, no_color):
    """Show all tasks, most urgent first."""
    context = _open_context(ctx)
    with context as store:
        _report_load(context)
        if not len(store):
            click.echo("📭 No tasks")
            return
        for index, task in enumerate(store):
            click.echo(format_task_row(index, task, color=not no_color))
    _report_save(store)


@main.command()
@click.argument('index', type=int)
@click.pass_context
def delete(ctx, index):
    """Delete the task at INDEX (as shown by 'list')."""
    context = _open_context(ctx)
    with context as store:
        _report_load(context)
        if index < 0 or index >= len(store):
            click.echo(f"❌ No task at position {index}")
            return
        name = store[index].name
        store.delete(index)
        click.echo(f"🗑️  Deleted: {name}")
    _report_save(store)


@main.command()
@click.confirmation_option('--yes', '-y', prompt='Are you sure you want to delete every task?')
@click.pass_context
def clear(ctx):
    """Delete every task."""
    context = _open_context(ctx)
    with context as store:
        _report_load(context)
        store.clear()
        click.echo("🧹 All tasks cleared")
    _report_save(store)


@main.command()
@click.pass_context
def status(ctx):
    """Show version, task file and load state."""
    context = _open_context(ctx)
    click.echo("🦀 TaskCrab")
    click.echo(f"📦 Version: {VERSION}")
    click.echo(f"📁 Task file: {context.task_file.path}")
    with context as store:
        result = context.load_result
        click.echo(f"🔍 Load: {result.status.value}")
        if result.error:
            click.echo(f"   {result.error}")
        click.echo(f"📋 Tasks: {len(store)}")
    _report_save(store)


if __name__ == "__main__":
    main()
