#!/usr/bin/env python3
"""
apkview - APK manifest viewer
Main CLI entry point
"""

import sys
import logging
import click
from pathlib import Path

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.logging import RichHandler
from rich.markup import escape

from apkview import __version__
from apkview.manifest.exceptions import EmptyOrMissingRoot

# Setup consoles; logs go to stderr so piped XML stays clean
console = Console()
log_console = Console(stderr=True)


def setup_logging(verbose: bool = False):
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=log_console, rich_tracebacks=True)]
    )


def _fail(ctx, error):
    """Report a command failure and exit with status 1"""
    if isinstance(error, EmptyOrMissingRoot):
        console.print(f"[bold yellow]{escape(str(error))}[/bold yellow]")
    else:
        console.print(f"[bold red]Error:[/bold red] {escape(str(error))}")
    if ctx.obj.get('verbose'):
        console.print_exception()
    sys.exit(1)


@click.group(invoke_without_command=True)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose logging')
@click.option('--version', is_flag=True, help='Show version information')
@click.pass_context
def cli(ctx, verbose, version):
    """
    apkview - APK manifest viewer

    Shows package metadata and the reconstructed AndroidManifest.xml.
    """
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose

    setup_logging(verbose)

    if version:
        console.print(f"[bold cyan]apkview[/bold cyan] version [green]{__version__}[/green]")
        ctx.exit()

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument('apk_path', type=click.Path(exists=True))
@click.option('--plain', is_flag=True, help='Print the plain copyable summary')
@click.option('--icon', 'icon_path', help='Write the application icon to this file')
@click.pass_context
def info(ctx, apk_path, plain, icon_path):
    """
    Show application and file information

    Includes package, versions, SDK levels, main activity with its
    am start command, file size and MD5/SHA-1/SHA-256 digests.
    """
    try:
        from apkview.core.apk_handler import APKHandler

        handler = APKHandler(apk_path)
        apk_info = handler.extract_info()

        if plain:
            click.echo(handler.get_summary())
        else:
            _display_apk_info_rich(apk_info)

        if icon_path:
            written = handler.extract_icon(icon_path)
            if written:
                console.print(f"\n[green]Icon saved to:[/green] {escape(written)}")
            else:
                console.print("\n[yellow]No icon found[/yellow]")

    except Exception as e:
        _fail(ctx, e)


@cli.command()
@click.argument('apk_path', type=click.Path(exists=True))
@click.option('-o', '--output', help='Write the XML to this file instead of stdout')
@click.option('--no-declaration', is_flag=True, help='Omit the <?xml ...?> declaration')
@click.pass_context
def manifest(ctx, apk_path, output, no_declaration):
    """
    Print the reconstructed AndroidManifest.xml
    """
    try:
        from apkview.core.apk_handler import APKHandler
        from apkview.manifest import FormatConfig

        handler = APKHandler(apk_path)
        xml = handler.get_manifest_xml(FormatConfig(xml_declaration=not no_declaration))

        if output:
            output_path = Path(output)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(xml + "\n", encoding='utf-8')
            console.print(f"[green]Manifest saved to:[/green] {escape(output)}")
        else:
            click.echo(xml)

    except Exception as e:
        _fail(ctx, e)


@cli.command()
@click.argument('apk_path', type=click.Path(exists=True))
@click.option('-d', '--depth', type=int, default=1, show_default=True,
              help='Expand nodes down to this depth')
@click.option('--all', 'expand_all', is_flag=True, help='Expand every node')
@click.option('-e', '--expand', 'expand_paths', multiple=True,
              help='Expand the node at a dotted child-index path (e.g. 1.0)')
@click.option('--plain', is_flag=True, help='Plain text output')
@click.pass_context
def tree(ctx, apk_path, depth, expand_all, expand_paths, plain):
    """
    Show the manifest as a collapsible tree

    Collapsed nodes are shown as <tag ...> ... </tag>. Paths count
    children from 0, e.g. "1.0" is the first child of the root's
    second child.

    Examples:
        apkview tree app.apk
        apkview tree app.apk --depth 3
        apkview tree app.apk -e 4 -e 4.2
    """
    try:
        from apkview.core.apk_handler import APKHandler
        from apkview.manifest.projector import ExpansionState
        from apkview.manifest.tree_view import build_tree, render_lines

        handler = APKHandler(apk_path)
        root = handler.get_manifest_tree()

        state = ExpansionState()
        if expand_all:
            state.expand_all(root)
        else:
            state.expand_to_depth(root, depth)
        for text in expand_paths:
            state.expand_path(ExpansionState.parse_path(text))

        if plain:
            click.echo("\n".join(render_lines(root, state)))
        else:
            console.print(build_tree(root, state))

    except Exception as e:
        _fail(ctx, e)


@cli.command()
@click.argument('apk_path', type=click.Path(exists=True))
@click.option('-k', '--kind', type=click.Choice(['activities', 'services', 'receivers', 'providers']),
              multiple=True, help='Only show these component kinds')
@click.pass_context
def components(ctx, apk_path, kind):
    """
    List activities, services, receivers and providers

    Each entry comes with the am command that starts it (none for
    providers).
    """
    try:
        from apkview.core.apk_handler import APKHandler, COMPONENT_KINDS

        handler = APKHandler(apk_path)
        by_kind = handler.get_components()

        for key in (kind or COMPONENT_KINDS):
            title = COMPONENT_KINDS[key][0]
            items = by_kind.get(key, [])

            if not items:
                console.print(f"[dim]No {title}[/dim]\n")
                continue

            table = Table(title=f"{title} ({len(items)})")
            table.add_column("Name", style="cyan", no_wrap=False)
            table.add_column("Command", style="magenta", no_wrap=False)
            for component in items:
                table.add_row(escape(component.name), escape(component.command or ""))
            console.print(table)

    except Exception as e:
        _fail(ctx, e)


def _display_apk_info_rich(info):
    """Display APK information using Rich formatting"""
    basic_info = f"""[cyan]App Name:[/cyan] {escape(info.app_name)}
[cyan]Package:[/cyan] {escape(info.package_name)}
[cyan]Version:[/cyan] {escape(info.version_name)} ({escape(info.version_code)})"""

    console.print(Panel(basic_info, title="[bold]Application Information[/bold]", border_style="blue"))

    sdk_info = f"""[cyan]Min SDK:[/cyan] {escape(info.min_sdk)}
[cyan]Target SDK:[/cyan] {escape(info.target_sdk)}"""

    console.print(Panel(sdk_info, title="[bold]SDK Versions[/bold]", border_style="green"))

    if info.main_activity:
        launch_info = f"""[cyan]Main Activity:[/cyan] {escape(info.main_activity)}
[cyan]AM Command:[/cyan] {escape(info.main_activity_command)}"""
        console.print(Panel(launch_info, title="[bold]Launch[/bold]", border_style="yellow"))

    if info.file:
        file_info = f"""[cyan]File:[/cyan] {escape(info.file.name)}
[cyan]Size:[/cyan] {info.file.size_kb}
[cyan]Modified:[/cyan] {info.file.last_modified}
[cyan]MD5:[/cyan] [magenta]{info.file.md5}[/magenta]
[cyan]SHA-1:[/cyan] [magenta]{info.file.sha1}[/magenta]
[cyan]SHA-256:[/cyan] [magenta]{info.file.sha256}[/magenta]"""
        console.print(Panel(file_info, title="[bold]File Information[/bold]", border_style="cyan"))

    components_table = Table(title="Components")
    components_table.add_column("Type", style="cyan")
    components_table.add_column("Count", style="magenta")

    for key, items in info.components.items():
        components_table.add_row(key.capitalize(), str(len(items)))

    console.print(components_table)

    if info.permissions:
        console.print(f"\n[bold cyan]Permissions ({len(info.permissions)}):[/bold cyan]")
        for perm in info.permissions[:10]:
            console.print(f"  • {escape(perm)}")
        if len(info.permissions) > 10:
            console.print(f"  ... and {len(info.permissions) - 10} more")


def main():
    """Main entry point"""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        sys.exit(0)
    except Exception as e:
        console.print(f"[bold red]Unexpected error:[/bold red] {escape(str(e))}")
        sys.exit(1)


if __name__ == "__main__":
    main()
